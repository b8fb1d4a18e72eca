"""Abstract base class for booking readers.

Defines the read-only interface the availability layer needs from a
booking store.  Any backend (Supabase, a SQL database, an in-memory list)
implements this ABC.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from tablebooking.models import Booking


@dataclass(frozen=True)
class BookingFilter:
    """Which bookings to fetch: a status set and an inclusive time range."""

    status_in: tuple[str, ...]
    time_range: tuple[datetime, datetime]

    @property
    def start(self) -> datetime:
        return self.time_range[0]

    @property
    def end(self) -> datetime:
        return self.time_range[1]


class BookingReader(ABC):
    """Abstract booking store.

    Readers never create or modify bookings.
    """

    @abstractmethod
    async def query_bookings(self, flt: BookingFilter) -> list[Booking]:
        """Return bookings matching ``flt``.

        Args:
            flt: Status set and ``[start, end]`` bounds on ``booking_time``,
                both ends inclusive.

        Returns:
            List of Booking records, in no particular order.

        Raises:
            BookingStoreError: The store could not be queried.
        """
