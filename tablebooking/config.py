"""Application configuration via environment variables."""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings

log = logging.getLogger("tablebooking.config")


class Settings(BaseSettings):
    # Booking store (Supabase / PostgREST)
    supabase_url: str = ""
    supabase_key: str = ""
    bookings_table: str = "bookings"
    store_timeout_seconds: float = 10.0

    # Time handling. All day bounds and date/time strings are read in this zone.
    reference_timezone: str = "Asia/Bangkok"
    default_duration_hours: float = 2.0
    upcoming_window_minutes: int = 60

    # Admin auth
    admin_api_key: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.reference_timezone)

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        try:
            ZoneInfo(self.reference_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"REFERENCE_TIMEZONE {self.reference_timezone!r} is not a known IANA zone."
            )

        if self.default_duration_hours <= 0:
            raise ValueError("DEFAULT_DURATION_HOURS must be greater than zero.")

        if not self.store_configured:
            if self.debug:
                warnings.append(
                    "SUPABASE_URL / SUPABASE_KEY not set. Using an empty in-memory "
                    "booking store (DEBUG=true)."
                )
            else:
                raise ValueError(
                    "SUPABASE_URL and SUPABASE_KEY must be set. "
                    "Set them in .env or enable DEBUG for an in-memory store."
                )

        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "ADMIN_API_KEY not set. Staff endpoints are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Staff endpoints are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable staff access."
                )

        return warnings


settings = Settings()
