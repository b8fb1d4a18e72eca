"""Supabase booking reader.

Reads the ``bookings`` table through the PostgREST endpoint Supabase
exposes at ``<SUPABASE_URL>/rest/v1``.  Credentials come from
``SUPABASE_URL`` and ``SUPABASE_KEY`` (see ``tablebooking.config``).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from tablebooking.errors import BookingStoreError
from tablebooking.models import Booking

from .base import BookingFilter, BookingReader

logger = logging.getLogger(__name__)

SELECT_COLUMNS = "id,table_id,booking_time,booking_type,status,end_time"


class SupabaseBookingReader(BookingReader):
    """BookingReader backed by Supabase's PostgREST API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "bookings",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not url or not api_key:
            raise ValueError("Supabase URL and API key must both be provided.")
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    @staticmethod
    def _to_query_time(dt: datetime) -> str:
        """UTC with a ``Z`` suffix; a literal ``+`` would decode as a space."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    @classmethod
    def _build_params(cls, flt: BookingFilter) -> list[tuple[str, str]]:
        return [
            ("select", SELECT_COLUMNS),
            ("status", f"in.({','.join(flt.status_in)})"),
            ("booking_time", f"gte.{cls._to_query_time(flt.start)}"),
            ("booking_time", f"lte.{cls._to_query_time(flt.end)}"),
        ]

    async def _get(self, params: list[tuple[str, str]]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self._endpoint, params=params, headers=self._headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(self._endpoint, params=params, headers=self._headers)

    @staticmethod
    def _parse_rows(rows: list[dict[str, Any]]) -> list[Booking]:
        bookings: list[Booking] = []
        for row in rows:
            try:
                bookings.append(Booking.model_validate(row))
            except ValidationError as exc:
                logger.warning("Skipping malformed booking row %r: %s", row.get("id"), exc)
        return bookings

    # ------------------------------------------------------------------
    # BookingReader interface
    # ------------------------------------------------------------------

    async def query_bookings(self, flt: BookingFilter) -> list[Booking]:
        """Fetch bookings with ``status`` in the filter set and
        ``booking_time`` inside the filter range."""
        try:
            response = await self._get(self._build_params(flt))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BookingStoreError(
                f"Booking store returned status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise BookingStoreError(f"Booking store unreachable: {exc}") from exc

        try:
            rows = response.json()
        except ValueError as exc:
            raise BookingStoreError("Booking store returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise BookingStoreError(
                f"Expected a list of bookings, got {type(rows).__name__}"
            )

        bookings = self._parse_rows(rows)
        logger.debug(
            "Fetched %d bookings between %s and %s", len(bookings), flt.start, flt.end
        )
        return bookings
