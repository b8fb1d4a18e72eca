"""Data models for the availability layer."""

from .booking import (
    ACTIVE_STATUSES,
    FLOOR_STATUSES,
    AvailabilityResult,
    Booking,
    BookingStatus,
    TableBookingInfo,
    TableId,
    TableStatus,
)

__all__ = [
    "ACTIVE_STATUSES",
    "FLOOR_STATUSES",
    "AvailabilityResult",
    "Booking",
    "BookingStatus",
    "TableBookingInfo",
    "TableId",
    "TableStatus",
]
