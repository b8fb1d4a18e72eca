"""Pydantic models for booking records and availability results."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

TableId = Union[int, str]


class BookingStatus:
    """Lifecycle tags stored in the ``status`` column."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    READY = "ready"
    APPROVED = "approved"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold a table when checking a requested slot.
ACTIVE_STATUSES: tuple[str, ...] = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.SEATED,
    BookingStatus.READY,
    BookingStatus.APPROVED,
    BookingStatus.PAID,
)

# Statuses the staff floor view shows as holding a table.
FLOOR_STATUSES: tuple[str, ...] = (
    BookingStatus.CONFIRMED,
    BookingStatus.PENDING,
    BookingStatus.SEATED,
    BookingStatus.READY,
)


class Booking(BaseModel):
    """A booking row as read from the store. Never mutated here."""

    id: Optional[TableId] = None
    table_id: Optional[TableId] = None
    booking_time: str  # ISO-8601, as stored
    booking_type: Optional[str] = None  # walk_in | online | steak ...
    status: Optional[str] = None
    end_time: Optional[str] = None

    model_config = {"extra": "ignore"}


class TableBookingInfo(BaseModel):
    type: Optional[str] = None


class AvailabilityResult(BaseModel):
    """Outcome of an availability query.

    An empty ``ids`` list only means "no conflicts" when ``error`` is None.
    Callers must check ``ok`` before treating the tables as free.
    """

    ids: list[TableId] = Field(default_factory=list)
    statuses: dict[TableId, TableBookingInfo] = Field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TableStatus(BaseModel):
    """Live state of one table on the staff floor view."""

    status: Literal["free", "occupied", "upcoming"]
    type: Optional[Literal["walk_in", "online"]] = None
    booking: Optional[Booking] = None
