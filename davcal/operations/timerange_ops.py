"""
Time-range operations - Sans-I/O validation of time-range queries.

A time range given by the caller has to be checked before anything is
sent to the server: both ends must be ISO 8601 instants.  Matching is
done by the server (rfc4791, section 9.9), an object matches if any of
its occurrences overlaps the half-open interval [start, end).  The
results the server returns are never filtered again on this side.
"""
from __future__ import annotations

from datetime import date
from datetime import datetime
from datetime import timezone
from typing import Optional
from typing import Union

from dateutil.parser import isoparse

from davcal.lib import error
from davcal.protocol.types import TimeRange

Instant = Union[str, datetime, date]


def parse_instant(value: Instant) -> datetime:
    """
    Parse one end of a time range.

    Strings must be ISO 8601, either extended ("2021-05-01T00:00:00.000Z")
    or basic ("20210501T000000Z").  Instants without an offset are taken
    to be UTC.  The result is always an aware datetime in UTC.

    Raises:
        InvalidTimeRangeError: If value is not an ISO 8601 instant
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            ts = isoparse(value.strip())
        except (ValueError, OverflowError):
            raise error.InvalidTimeRangeError()
    else:
        raise error.InvalidTimeRangeError()

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def validate_time_range(start: Instant, end: Instant) -> TimeRange:
    """
    Validate a start/end pair.

    start < end is not enforced here, a server getting an empty or
    inverted range will either reject it or return nothing.

    Raises:
        InvalidTimeRangeError: If either end fails to parse
    """
    return TimeRange(start=parse_instant(start), end=parse_instant(end))


def resolve_time_range(
    time_range: Optional[Union[TimeRange, dict, tuple]],
    expand: bool = False,
) -> Optional[TimeRange]:
    """
    Accepts whatever the caller gave as time range (None, a TimeRange,
    a {"start": .., "end": ..} dict or a (start, end) tuple) and returns
    a validated TimeRange or None.

    Raises:
        InvalidTimeRangeError: If the range is malformed, or if expand
            is requested without a range
    """
    if time_range is None:
        if expand:
            raise error.InvalidTimeRangeError("can't expand without a time range")
        return None
    if isinstance(time_range, TimeRange):
        return validate_time_range(time_range.start, time_range.end)
    if isinstance(time_range, dict):
        if "start" not in time_range or "end" not in time_range:
            raise error.InvalidTimeRangeError()
        return validate_time_range(time_range["start"], time_range["end"])
    if isinstance(time_range, tuple) and len(time_range) == 2:
        return validate_time_range(*time_range)
    raise error.InvalidTimeRangeError()
