"""Table availability queries.

``fetch_occupied_tables`` answers "which tables are taken for this slot?"
for the booking flow.  It pulls every active booking on the requested day
and applies the overlap test in-process, so the interval semantics live in
one place (``tablebooking.overlap``) rather than in the store's query
language.

The answer is advisory.  Between this check and the booking insert another
customer can take the same table; the write path has to enforce uniqueness
on its own.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from tablebooking.booking_readers import BookingFilter, BookingReader
from tablebooking.config import settings
from tablebooking.errors import BookingStoreError
from tablebooking.models import (
    ACTIVE_STATUSES,
    FLOOR_STATUSES,
    AvailabilityResult,
    Booking,
    TableBookingInfo,
    TableId,
    TableStatus,
)
from tablebooking.overlap import add_hours, combine, day_bounds, overlaps, parse_instant

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Stateless availability checks over a BookingReader.

    Nothing is cached between calls.
    """

    def __init__(
        self,
        reader: BookingReader,
        tz: Optional[tzinfo] = None,
        default_duration_hours: Optional[float] = None,
        upcoming_window_minutes: Optional[int] = None,
    ) -> None:
        self._reader = reader
        self._tz = tz or settings.tz
        self._default_duration = (
            default_duration_hours
            if default_duration_hours is not None
            else settings.default_duration_hours
        )
        self._upcoming_window = timedelta(
            minutes=upcoming_window_minutes
            if upcoming_window_minutes is not None
            else settings.upcoming_window_minutes
        )

    @property
    def default_duration_hours(self) -> float:
        return self._default_duration

    async def fetch_occupied_tables(
        self,
        date_str: Optional[str],
        time_str: Optional[str],
        duration_hours: Optional[float] = None,
    ) -> AvailabilityResult:
        """Return tables with an active booking overlapping the requested slot.

        Missing date or time returns an empty result without querying.  Any
        failure is logged and reported through ``AvailabilityResult.error``
        with empty ``ids``; it is never raised.
        """
        if not date_str or not time_str:
            return AvailabilityResult()

        if duration_hours is None:
            duration_hours = self._default_duration

        try:
            requested_start = combine(date_str, time_str, self._tz)
            requested_end = add_hours(requested_start, duration_hours)

            bookings = await self._reader.query_bookings(
                BookingFilter(
                    status_in=ACTIVE_STATUSES,
                    time_range=day_bounds(date_str, self._tz),
                )
            )

            result = AvailabilityResult()
            for booking in bookings:
                if booking.table_id is None:
                    continue
                try:
                    hit = overlaps(
                        requested_start,
                        requested_end,
                        booking.booking_time,
                        duration_hours,
                        tz=self._tz,
                    )
                except ValueError:
                    logger.warning(
                        "Skipping booking %s on table %s: unparseable booking_time %r",
                        booking.id,
                        booking.table_id,
                        booking.booking_time,
                    )
                    continue

                if hit:
                    if booking.table_id not in result.statuses:
                        result.ids.append(booking.table_id)
                    result.statuses[booking.table_id] = TableBookingInfo(
                        type=booking.booking_type
                    )

            return result

        except Exception as exc:
            logger.exception(
                "Error fetching availability for %s %s", date_str, time_str
            )
            return AvailabilityResult(error=str(exc) or type(exc).__name__)

    async def fetch_floor_status(
        self, now: Optional[datetime] = None
    ) -> dict[TableId, TableStatus]:
        """Live status of every table with a booking today.

        A table is ``occupied`` when a booking covers ``now`` (using the
        booking's ``end_time`` when it has one), ``upcoming`` when a booking
        starts within the upcoming window, otherwise ``free``.  Tables with
        no bookings today are left out.

        Raises:
            BookingStoreError: The store could not be queried.
        """
        now = parse_instant(now or datetime.now(tz=self._tz), self._tz)
        today = now.astimezone(self._tz).date().isoformat()

        try:
            bookings = await self._reader.query_bookings(
                BookingFilter(
                    status_in=FLOOR_STATUSES,
                    time_range=day_bounds(today, self._tz),
                )
            )
        except BookingStoreError:
            logger.exception("Error fetching floor status for %s", today)
            raise

        by_table: dict[TableId, list[Booking]] = {}
        for booking in bookings:
            if booking.table_id is not None:
                by_table.setdefault(booking.table_id, []).append(booking)

        return {
            table_id: self._table_status(table_bookings, now)
            for table_id, table_bookings in by_table.items()
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _interval(self, booking: Booking) -> Optional[tuple[datetime, datetime]]:
        try:
            start = parse_instant(booking.booking_time, self._tz)
        except ValueError:
            logger.warning(
                "Skipping booking %s: unparseable booking_time %r",
                booking.id,
                booking.booking_time,
            )
            return None

        end = None
        if booking.end_time:
            try:
                end = parse_instant(booking.end_time, self._tz)
            except ValueError:
                logger.warning(
                    "Booking %s has unparseable end_time %r; using default duration",
                    booking.id,
                    booking.end_time,
                )
        if end is None:
            end = add_hours(start, self._default_duration)

        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    def _table_status(self, bookings: list[Booking], now: datetime) -> TableStatus:
        now_utc = now.astimezone(timezone.utc)
        intervals: list[tuple[Booking, tuple[datetime, datetime]]] = []
        for booking in bookings:
            interval = self._interval(booking)
            if interval is not None:
                intervals.append((booking, interval))

        for booking, (start, end) in intervals:
            if start <= now_utc < end:
                return TableStatus(
                    status="occupied",
                    type="walk_in" if booking.booking_type == "walk_in" else "online",
                    booking=booking,
                )

        for booking, (start, _end) in intervals:
            if timedelta(0) < start - now_utc <= self._upcoming_window:
                return TableStatus(status="upcoming", booking=booking)

        return TableStatus(status="free")
