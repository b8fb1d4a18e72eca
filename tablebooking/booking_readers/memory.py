"""List-backed booking reader for local development and tests."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Iterable, Optional

from tablebooking.models import Booking
from tablebooking.overlap import parse_instant

from .base import BookingFilter, BookingReader

logger = logging.getLogger(__name__)


class InMemoryBookingReader(BookingReader):
    """BookingReader over a plain list of bookings.

    Naive ``booking_time`` values are read in ``tz``, matching how a
    ``timestamptz`` column would store them for the configured zone.
    """

    def __init__(
        self,
        bookings: Optional[Iterable[Booking]] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._bookings: list[Booking] = list(bookings or [])
        self._tz = tz or timezone.utc
        self.query_count = 0

    def add(self, booking: Booking) -> None:
        self._bookings.append(booking)

    async def query_bookings(self, flt: BookingFilter) -> list[Booking]:
        self.query_count += 1
        start = parse_instant(flt.start, self._tz).astimezone(timezone.utc)
        end = parse_instant(flt.end, self._tz).astimezone(timezone.utc)

        matched: list[Booking] = []
        for booking in self._bookings:
            if booking.status not in flt.status_in:
                continue
            try:
                at = parse_instant(booking.booking_time, self._tz)
            except ValueError:
                logger.warning(
                    "Skipping booking %s with unparseable booking_time %r",
                    booking.id,
                    booking.booking_time,
                )
                continue
            if start <= at.astimezone(timezone.utc) <= end:
                matched.append(booking)
        return matched
