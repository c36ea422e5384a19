"""
Pure functions for building CalDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.  Every body declares the namespaces it uses
exactly once, on the root element.
"""
from typing import List
from typing import Optional
from typing import Sequence

from davcal.elements import cdav
from davcal.elements import dav
from davcal.elements import ical
from davcal.elements.base import BaseElement
from davcal.elements.base import PropertyElement
from davcal.lib import error
from davcal.lib.namespace import CALENDAR_DATA
from davcal.lib.namespace import GETETAG
from davcal.lib.namespace import Property
from davcal.protocol.types import TimeRange


def _prop_elements(
    props: Sequence[Property],
    time_range: Optional[TimeRange] = None,
    expand: bool = False,
) -> List[BaseElement]:
    """
    Property elements for a DAV:prop.  calendar-data gets an expand
    instruction when expansion is requested.
    """
    elements: List[BaseElement] = []
    for prop in props:
        if prop == CALENDAR_DATA:
            elements.append(_calendar_data(time_range, expand))
        else:
            elements.append(PropertyElement(prop))
    return elements


def _calendar_data(time_range: Optional[TimeRange], expand: bool) -> BaseElement:
    data = cdav.CalendarData()
    if expand:
        if time_range is None:
            raise error.InvalidTimeRangeError("can't expand without a time range")
        data += cdav.Expand(time_range.start, time_range.end)
    return data


def build_propfind_body(props: Optional[Sequence[Property]] = None) -> bytes:
    """
    Build PROPFIND request body XML.

    Args:
        props: Properties to retrieve.  If empty, returns a propfind
               with an empty prop element.

    Returns:
        UTF-8 encoded XML bytes
    """
    propfind = dav.Propfind() + (dav.Prop() + _prop_elements(props or []))
    return propfind.tobytes()


def build_calendar_query_body(
    props: Sequence[Property] = (GETETAG, CALENDAR_DATA),
    time_range: Optional[TimeRange] = None,
    expand: bool = False,
    component: Optional[str] = "VEVENT",
    filters: Optional[List[BaseElement]] = None,
) -> bytes:
    """
    Build calendar-query REPORT request body.

    The filter always wraps a VCALENDAR comp-filter.  When a time range
    is given, it goes inside a comp-filter for `component`, i.e.:

        <C:filter>
          <C:comp-filter name="VCALENDAR">
            <C:comp-filter name="VEVENT">
              <C:time-range start="20210501T000000Z" end="20210504T000000Z"/>
            </C:comp-filter>
          </C:comp-filter>
        </C:filter>

    Args:
        props: Properties to include for each matching object
        time_range: Validated time range, or None for no time filter
        expand: Ask the server to expand recurrences within time_range
        component: Component type filter name (VEVENT, VTODO, VJOURNAL)
        filters: Additional filter elements for the component filter

    Returns:
        UTF-8 encoded XML bytes
    """
    prop = dav.Prop() + _prop_elements(props, time_range, expand)

    filter_list: List[BaseElement] = list(filters or [])
    if time_range is not None:
        filter_list.append(cdav.TimeRange(time_range.start, time_range.end))

    vcalendar = cdav.CompFilter("VCALENDAR")
    if component:
        comp_filter = cdav.CompFilter(component)
        if filter_list:
            comp_filter += filter_list
        vcalendar += comp_filter
    elif filter_list:
        vcalendar += filter_list

    root = cdav.CalendarQuery() + [prop, cdav.Filter() + vcalendar]
    return root.tobytes()


def build_calendar_multiget_body(
    hrefs: Sequence[str],
    props: Sequence[Property] = (GETETAG, CALENDAR_DATA),
    time_range: Optional[TimeRange] = None,
    expand: bool = False,
) -> bytes:
    """
    Build calendar-multiget REPORT request body.

    Used to retrieve multiple calendar objects by their URLs in a single request.

    Args:
        hrefs: Calendar object URLs to retrieve
        props: Properties to include for each object
        time_range: Validated time range, only used together with expand
        expand: Ask the server to expand recurrences within time_range

    Returns:
        UTF-8 encoded XML bytes
    """
    elements: List[BaseElement] = [dav.Prop() + _prop_elements(props, time_range, expand)]
    for href in hrefs:
        elements.append(dav.Href(href))

    multiget = cdav.CalendarMultiGet() + elements
    return multiget.tobytes()


def build_sync_collection_body(
    sync_token: Optional[str] = None,
    props: Sequence[Property] = (GETETAG, CALENDAR_DATA),
    sync_level: str = "1",
) -> bytes:
    """
    Build sync-collection REPORT request body (rfc6578).

    Args:
        sync_token: Previous sync token (empty or None for initial sync)
        props: Properties to include in response
        sync_level: Sync level (usually "1")

    Returns:
        UTF-8 encoded XML bytes
    """
    elements: List[BaseElement] = [
        dav.SyncToken(sync_token or ""),
        dav.SyncLevel(sync_level),
        dav.Prop() + _prop_elements(props),
    ]
    sync_collection = dav.SyncCollection() + elements
    return sync_collection.tobytes()


def build_mkcalendar_body(
    displayname: Optional[str] = None,
    description: Optional[str] = None,
    timezone: Optional[str] = None,
    color: Optional[str] = None,
    supported_components: Optional[Sequence[str]] = None,
) -> bytes:
    """
    Build MKCALENDAR request body.

    Args:
        displayname: Calendar display name
        description: Calendar description
        timezone: VTIMEZONE component data
        color: Calendar color, i.e. "#FF0000FF"
        supported_components: List of supported component types (VEVENT, VTODO, etc.)

    Returns:
        UTF-8 encoded XML bytes
    """
    prop = dav.Prop()

    if displayname:
        prop += dav.DisplayName(displayname)

    if description:
        prop += cdav.CalendarDescription(description)

    if timezone:
        prop += cdav.CalendarTimeZone(timezone)

    if color:
        prop += ical.CalendarColor(color)

    if supported_components:
        sccs = cdav.SupportedCalendarComponentSet()
        for comp in supported_components:
            sccs += cdav.Comp(comp)
        prop += sccs

    prop += dav.ResourceType() + [dav.Collection(), cdav.Calendar()]

    mkcalendar = cdav.Mkcalendar() + (dav.Set() + prop)
    return mkcalendar.tobytes()
