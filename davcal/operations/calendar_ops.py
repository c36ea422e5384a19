"""
Calendar operations - Sans-I/O mapping of calendar discovery results.
"""
from __future__ import annotations

from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence

from davcal.lib.namespace import CALENDAR_COLOR
from davcal.lib.namespace import CALENDAR_DESCRIPTION
from davcal.lib.namespace import CALENDAR_TIMEZONE
from davcal.lib.namespace import DISPLAYNAME
from davcal.lib.namespace import GETCTAG
from davcal.lib.namespace import Property
from davcal.lib.namespace import RESOURCETYPE
from davcal.lib.namespace import SUPPORTED_CALENDAR_COMPONENT_SET
from davcal.lib.namespace import SYNC_TOKEN
from davcal.operations.base import extract_resource_type
from davcal.operations.base import is_calendar_resource
from davcal.operations.base import resolve_href
from davcal.operations.base import successful_entries
from davcal.protocol.types import Calendar
from davcal.protocol.types import MultistatusEntry

## properties asked for when listing calendars
CALENDAR_PROPS: Sequence[Property] = (
    CALENDAR_DESCRIPTION,
    CALENDAR_TIMEZONE,
    DISPLAYNAME,
    CALENDAR_COLOR,
    GETCTAG,
    RESOURCETYPE,
    SUPPORTED_CALENDAR_COMPONENT_SET,
    SYNC_TOKEN,
)

DEFAULT_COMPONENTS: Sequence[str] = ("VEVENT", "VTODO")


def _text(value) -> Optional[str]:
    """displayname and friends should be plain text, but some servers nest stuff"""
    if value is None or isinstance(value, str):
        return value
    text = "".join(value.itertext()).strip()
    return text or None


def to_calendar(entry: MultistatusEntry, base_url: str) -> Calendar:
    return Calendar(
        url=resolve_href(base_url, entry.href),
        display_name=_text(entry.get(DISPLAYNAME)),
        ctag=entry.get(GETCTAG),
        components=list(entry.get(SUPPORTED_CALENDAR_COMPONENT_SET, [])),
        timezone=entry.get(CALENDAR_TIMEZONE),
        description=_text(entry.get(CALENDAR_DESCRIPTION)),
        color=entry.get(CALENDAR_COLOR),
        sync_token=entry.get(SYNC_TOKEN),
        resource_types=extract_resource_type(entry),
    )


def process_calendars_response(
    entries: Iterable[MultistatusEntry],
    base_url: str,
    components: Optional[Sequence[str]] = DEFAULT_COMPONENTS,
) -> List[Calendar]:
    """
    Turn the answer to a depth 1 PROPFIND on the calendar home into
    calendars.

    Args:
        entries: Parsed multistatus entries
        base_url: URL the PROPFIND was sent to
        components: Keep only calendars supporting at least one of
            these component types.  Calendars not reporting a
            supported-calendar-component-set support everything.
            None keeps all calendars.
    """
    calendars = []
    for entry in successful_entries(entries):
        if not is_calendar_resource(entry):
            continue
        calendar = to_calendar(entry, base_url)
        if (
            components is not None
            and calendar.components
            and not set(calendar.components) & set(components)
        ):
            continue
        calendars.append(calendar)
    return calendars


def process_ctag_response(entries: Iterable[MultistatusEntry]) -> Optional[str]:
    """The ctag from a depth 0 PROPFIND on a calendar"""
    for entry in successful_entries(entries):
        ctag = entry.get(GETCTAG)
        if ctag is not None:
            return ctag
    return None
