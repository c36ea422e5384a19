"""
CalDAV protocol operations combining request building and response parsing.

This class provides a high-level interface to CalDAV operations while
remaining completely I/O-free.
"""
from typing import List
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Union
from urllib.parse import urljoin

import icalendar

from davcal.elements.base import BaseElement
from davcal.lib.namespace import Property
from davcal.lib.python_utilities import to_wire

from .types import AccountType
from .types import CalendarData
from .types import DAVMethod
from .types import DAVRequest
from .types import DAVResponse
from .types import MultistatusEntry
from .types import MultistatusResponse
from .types import RequestHeaders
from .types import TimeRange
from .xml_builders import build_calendar_multiget_body
from .xml_builders import build_calendar_query_body
from .xml_builders import build_mkcalendar_body
from .xml_builders import build_propfind_body
from .xml_builders import build_sync_collection_body
from .xml_parsers import parse_propfind_response
from .xml_parsers import parse_report_response
from .xml_parsers import parse_sync_collection_response

HeadersLike = Union[RequestHeaders, Mapping[str, str], None]

XML_CONTENT_TYPE = "application/xml; charset=utf-8"
ICAL_CONTENT_TYPE = "text/calendar; charset=utf-8"


def well_known_url(server_url: str, account_type: AccountType) -> str:
    """The rfc6764 well-known URL for the service"""
    return urljoin(server_url, f"/.well-known/{account_type.value}")


def to_calendar_data(data: CalendarData) -> bytes:
    """Serialize calendar data for a PUT, with CRLF line endings"""
    if isinstance(data, icalendar.Calendar):
        return data.to_ical()
    return to_wire(data)


class CalDAVProtocol:
    """
    Sans-I/O CalDAV protocol handler.

    Builds requests and parses responses without doing any I/O.
    All HTTP communication is delegated to an external I/O implementation.

    Headers are layered: the defaults of each request type, then the
    headers given to the constructor (typically authorization), then
    the headers given for the single request.  Later layers win.

    Example:
        protocol = CalDAVProtocol(headers=basic_auth_headers("user", "pass"))

        # Build request
        request = protocol.propfind_request(
            "https://cal.example.com/calendars/user/", [DISPLAYNAME], depth=1
        )

        # Execute with your I/O (not shown)
        response = io.execute(request)

        # Parse response
        results = protocol.parse_propfind(response)
    """

    def __init__(self, headers: HeadersLike = None) -> None:
        self.headers = RequestHeaders.coerce(headers)

    def _headers(self, defaults: RequestHeaders, headers: HeadersLike) -> dict:
        return defaults.merge(self.headers).merge(headers).as_dict()

    # =========================================================================
    # Request builders
    # =========================================================================

    def propfind_request(
        self,
        url: str,
        props: Optional[Sequence[Property]] = None,
        depth: int = 0,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a PROPFIND request.

        Args:
            url: Resource URL
            props: Properties to retrieve
            depth: Depth header value (0 or 1)
            headers: Extra headers for this request

        Returns:
            DAVRequest ready for execution
        """
        defaults = RequestHeaders(content_type=XML_CONTENT_TYPE, depth=str(depth))
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=url,
            headers=self._headers(defaults, headers),
            body=build_propfind_body(props),
        )

    def calendar_query_request(
        self,
        url: str,
        props: Sequence[Property],
        time_range: Optional[TimeRange] = None,
        expand: bool = False,
        component: Optional[str] = "VEVENT",
        filters: Optional[List[BaseElement]] = None,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a calendar-query REPORT request.

        Args:
            url: Calendar collection URL
            props: Properties to retrieve for each match
            time_range: Validated time range
            expand: Expand recurring events into one result per occurrence
            component: Component type to match
            filters: Additional filters inside the component filter
            depth: Depth header value
            headers: Extra headers for this request

        Returns:
            DAVRequest ready for execution
        """
        body = build_calendar_query_body(
            props=props,
            time_range=time_range,
            expand=expand,
            component=component,
            filters=filters,
        )
        defaults = RequestHeaders(content_type=XML_CONTENT_TYPE, depth=str(depth))
        return DAVRequest(
            method=DAVMethod.REPORT,
            url=url,
            headers=self._headers(defaults, headers),
            body=body,
        )

    def calendar_multiget_request(
        self,
        url: str,
        hrefs: Sequence[str],
        props: Sequence[Property],
        time_range: Optional[TimeRange] = None,
        expand: bool = False,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a calendar-multiget REPORT request.

        Args:
            url: Calendar collection URL
            hrefs: Calendar object URLs to retrieve
            props: Properties to retrieve for each object
            time_range: Validated time range, used with expand
            expand: Expand recurring events
            depth: Depth header value
            headers: Extra headers for this request

        Returns:
            DAVRequest ready for execution
        """
        body = build_calendar_multiget_body(
            hrefs, props=props, time_range=time_range, expand=expand
        )
        defaults = RequestHeaders(content_type=XML_CONTENT_TYPE, depth=str(depth))
        return DAVRequest(
            method=DAVMethod.REPORT,
            url=url,
            headers=self._headers(defaults, headers),
            body=body,
        )

    def sync_collection_request(
        self,
        url: str,
        sync_token: Optional[str] = None,
        props: Optional[Sequence[Property]] = None,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a sync-collection REPORT request.

        Args:
            url: Calendar collection URL
            sync_token: Previous sync token (None for initial sync)
            props: Properties to include in response
            headers: Extra headers for this request

        Returns:
            DAVRequest ready for execution
        """
        if props is None:
            body = build_sync_collection_body(sync_token)
        else:
            body = build_sync_collection_body(sync_token, props=props)
        ## rfc6578 wants Depth 0 (or no Depth) on sync-collection
        defaults = RequestHeaders(content_type=XML_CONTENT_TYPE, depth="0")
        return DAVRequest(
            method=DAVMethod.REPORT,
            url=url,
            headers=self._headers(defaults, headers),
            body=body,
        )

    def mkcalendar_request(
        self,
        url: str,
        displayname: Optional[str] = None,
        description: Optional[str] = None,
        timezone: Optional[str] = None,
        color: Optional[str] = None,
        supported_components: Optional[Sequence[str]] = None,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a MKCALENDAR request.

        Returns:
            DAVRequest ready for execution
        """
        body = build_mkcalendar_body(
            displayname=displayname,
            description=description,
            timezone=timezone,
            color=color,
            supported_components=supported_components,
        )
        defaults = RequestHeaders(content_type=XML_CONTENT_TYPE)
        return DAVRequest(
            method=DAVMethod.MKCALENDAR,
            url=url,
            headers=self._headers(defaults, headers),
            body=body,
        )

    def put_request(
        self,
        url: str,
        data: CalendarData,
        etag: Optional[str] = None,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a PUT request to create/update a resource.

        Args:
            url: Resource URL
            data: Resource content, text, bytes or an icalendar.Calendar
            etag: If-Match header for conditional update
            headers: Extra headers for this request, may override the
                default Content-Type

        Returns:
            DAVRequest ready for execution
        """
        defaults = RequestHeaders(content_type=ICAL_CONTENT_TYPE, if_match=etag)
        return DAVRequest(
            method=DAVMethod.PUT,
            url=url,
            headers=self._headers(defaults, headers),
            body=to_calendar_data(data),
        )

    def delete_request(
        self,
        url: str,
        etag: Optional[str] = None,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a DELETE request.

        Args:
            url: Resource URL to delete
            etag: If-Match header for conditional delete
            headers: Extra headers for this request

        Returns:
            DAVRequest ready for execution
        """
        defaults = RequestHeaders(if_match=etag)
        return DAVRequest(
            method=DAVMethod.DELETE,
            url=url,
            headers=self._headers(defaults, headers),
        )

    def service_discovery_request(
        self,
        server_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> DAVRequest:
        """
        Build a PROPFIND on the well-known URL of the service.  Redirects
        are not followed, the Location header of a 3xx is the answer.
        """
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=well_known_url(server_url, account_type),
            headers=self._headers(RequestHeaders(depth="0"), headers),
            follow_redirects=False,
        )

    # =========================================================================
    # Response parsers
    # =========================================================================

    def parse_propfind(
        self,
        response: DAVResponse,
        huge_tree: bool = False,
    ) -> List[MultistatusEntry]:
        """
        Parse a PROPFIND response.

        Returns:
            List of MultistatusEntry with properties for each resource
        """
        return parse_propfind_response(
            response.body,
            status_code=response.status,
            huge_tree=huge_tree,
        )

    def parse_report(
        self,
        response: DAVResponse,
        huge_tree: bool = False,
    ) -> List[MultistatusEntry]:
        """
        Parse a calendar-query or calendar-multiget REPORT response.

        Returns:
            List of MultistatusEntry, typically with etag and calendar data
        """
        return parse_report_response(
            response.body,
            status_code=response.status,
            huge_tree=huge_tree,
        )

    def parse_sync_collection(
        self,
        response: DAVResponse,
        huge_tree: bool = False,
    ) -> MultistatusResponse:
        """
        Parse a sync-collection REPORT response.

        Returns:
            MultistatusResponse with the entries and the new sync token
        """
        return parse_sync_collection_response(
            response.body,
            status_code=response.status,
            huge_tree=huge_tree,
        )
