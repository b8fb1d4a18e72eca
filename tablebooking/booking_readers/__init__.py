"""Booking reader abstractions and implementations."""

from __future__ import annotations

import logging

from tablebooking.config import Settings

from .base import BookingFilter, BookingReader
from .memory import InMemoryBookingReader
from .supabase import SupabaseBookingReader

log = logging.getLogger("tablebooking.booking_readers")

__all__ = [
    "BookingFilter",
    "BookingReader",
    "InMemoryBookingReader",
    "SupabaseBookingReader",
    "build_reader",
]


def build_reader(settings: Settings) -> BookingReader:
    """Pick the reader the settings describe.

    Supabase when credentials are present, an empty in-memory store in
    debug mode, otherwise a configuration error.
    """
    if settings.store_configured:
        return SupabaseBookingReader(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.bookings_table,
            timeout=settings.store_timeout_seconds,
        )
    if settings.debug:
        log.warning("No booking store configured; using an empty in-memory store")
        return InMemoryBookingReader(tz=settings.tz)
    raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set outside DEBUG mode.")
