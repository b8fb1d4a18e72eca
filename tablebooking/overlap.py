"""Half-open interval overlap test and the time helpers around it.

Bookings occupy ``[booking_time, booking_time + duration)``.  Two bookings
that touch at an endpoint do not conflict, so a table can be reserved
back-to-back with no gap.

All arithmetic and comparison on aware datetimes is done in UTC.  Aware
datetimes that share a ``tzinfo`` compare by wall clock, which is wrong
across DST changes.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union

Instant = Union[datetime, str]

DEFAULT_DURATION_HOURS = 2


def parse_instant(value: Instant, tz: Optional[tzinfo] = None) -> datetime:
    """Return ``value`` as a datetime.

    Strings are parsed as ISO-8601 (a trailing ``Z`` is accepted).  Naive
    results are pinned to ``tz`` when one is given.

    Raises:
        ValueError: ``value`` is not a datetime or a parseable string.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported instant: {value!r}")

    if dt.tzinfo is None and tz is not None:
        dt = dt.replace(tzinfo=tz)
    return dt


def _normalize(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc)


def overlaps(
    request_start: datetime,
    request_end: datetime,
    candidate_start: Instant,
    duration_hours: float = DEFAULT_DURATION_HOURS,
    tz: Optional[tzinfo] = None,
) -> bool:
    """Return True if a booking starting at ``candidate_start`` intersects
    the requested interval.

    The candidate occupies ``duration_hours`` from its start.  Empty
    intervals (zero or negative length, on either side) never overlap.
    Naive values on either side are read in one zone: ``tz``, else the
    request's zone, else the candidate's.
    """
    if tz is None:
        tz = request_start.tzinfo or request_end.tzinfo
    candidate = parse_instant(candidate_start, tz)
    if tz is None:
        tz = candidate.tzinfo

    req_start = _normalize(parse_instant(request_start, tz))
    req_end = _normalize(parse_instant(request_end, tz))
    cand_start = _normalize(candidate)
    cand_end = cand_start + timedelta(hours=duration_hours)

    if req_end <= req_start or cand_end <= cand_start:
        return False

    return req_start < cand_end and req_end > cand_start


def combine(date_str: str, time_str: str, tz: Optional[tzinfo] = None) -> datetime:
    """Build the start of a requested slot from ``YYYY-MM-DD`` and ``HH:MM[:SS]``.

    The result carries ``tz`` explicitly instead of relying on the host's
    local zone.
    """
    dt = datetime.fromisoformat(f"{date_str.strip()}T{time_str.strip()}")
    if dt.tzinfo is None and tz is not None:
        dt = dt.replace(tzinfo=tz)
    return dt


def add_hours(start: datetime, hours: float) -> datetime:
    """Elapsed-time addition, independent of DST transitions in ``start``'s zone."""
    if start.tzinfo is None:
        return start + timedelta(hours=hours)
    end = start.astimezone(timezone.utc) + timedelta(hours=hours)
    return end.astimezone(start.tzinfo)


def day_bounds(date_str: str, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    """``[00:00:00, 23:59:59]`` of ``date_str`` in ``tz``."""
    day = datetime.strptime(date_str.strip(), "%Y-%m-%d").date()
    start = datetime.combine(day, time(0, 0, 0), tzinfo=tz)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=tz)
    return start, end

