"""
High-level CalDAV clients built on the Sans-I/O protocol layer.

SyncCalDAVClient and AsyncCalDAVClient offer the same operations.  Each
operation builds one request with CalDAVProtocol, hands it to the I/O
layer, and maps the parsed response to typed results.  The clients keep
no state between calls except the HTTP session.

Example:
    with SyncCalDAVClient(headers=basic_auth_headers("user", "pass")) as client:
        account = client.create_account("https://caldav.example.com/")
        calendars = client.fetch_calendars(account)
        objects = client.fetch_calendar_objects(
            calendars[0],
            time_range={"start": "2021-05-01T00:00:00Z", "end": "2021-05-04T00:00:00Z"},
        )
"""
import datetime
import logging
from dataclasses import replace
from tempfile import NamedTemporaryFile
from typing import Callable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union
from urllib.parse import urljoin

from davcal.elements.base import BaseElement
from davcal.io import AsyncIO
from davcal.io import AsyncIOProtocol
from davcal.io import SyncIO
from davcal.io import SyncIOProtocol
from davcal.lib import error
from davcal.lib.namespace import ADDRESSBOOK_HOME_SET
from davcal.lib.namespace import CALENDAR_DATA
from davcal.lib.namespace import CALENDAR_HOME_SET
from davcal.lib.namespace import CALENDAR_USER_ADDRESS_SET
from davcal.lib.namespace import CURRENT_USER_PRINCIPAL
from davcal.lib.namespace import GETCTAG
from davcal.lib.namespace import GETETAG
from davcal.lib.namespace import Property
from davcal.lib.python_utilities import to_normal_str
from davcal.operations import calendar_ops
from davcal.operations import calendarobject_ops
from davcal.operations import principal_ops
from davcal.operations.base import resolve_href
from davcal.operations.timerange_ops import resolve_time_range
from davcal.protocol import CalDAVProtocol
from davcal.protocol.operations import HeadersLike
from davcal.protocol.types import Account
from davcal.protocol.types import AccountType
from davcal.protocol.types import Calendar
from davcal.protocol.types import CalendarData
from davcal.protocol.types import CalendarObject
from davcal.protocol.types import DAVMethod
from davcal.protocol.types import DAVRequest
from davcal.protocol.types import DAVResponse
from davcal.protocol.types import MultistatusEntry
from davcal.protocol.types import SyncCollectionResult
from davcal.protocol.types import TimeRange

log = logging.getLogger("davcal")

OBJECT_PROPS: Sequence[Property] = (GETETAG, CALENDAR_DATA)

CalendarRef = Union[Calendar, str]
TimeRangeLike = Union[TimeRange, dict, tuple, None]


def _calendar_url(calendar: CalendarRef) -> str:
    return calendar.url if isinstance(calendar, Calendar) else calendar


def _log_request(request: DAVRequest) -> None:
    if not log.isEnabledFor(logging.DEBUG):
        return
    headers = dict(request.headers)
    for name in headers:
        if name.lower() == "authorization":
            headers[name] = "***"
    log.debug(
        "sending request - method={0}, url={1}, headers={2}\nbody:\n{3}".format(
            request.method.value, request.url, headers, to_normal_str(request.body)
        )
    )


def _log_response(request: DAVRequest, response: DAVResponse) -> None:
    log.debug("server responded with %i %s" % (response.status, response.reason))
    if error.debug_dump_communication:
        with NamedTemporaryFile(prefix="davcalcomm", delete=False) as commlog:
            commlog.write(b"=" * 80 + b"\n")
            commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
            commlog.write(b"\n====>\n")
            commlog.write(f"{request.method.value} {request.url}\n".encode("utf-8"))
            commlog.write(request.body or b"")
            commlog.write(b"\n<====\n")
            commlog.write(f"{response.status} {response.reason}\n".encode("utf-8"))
            commlog.write(response.body)
            log.debug("communication dumped to %s", commlog.name)


class BaseCalDAVClient:
    """
    The parts shared by the sync and the async client: building the
    request for an operation and making sense of the response.  No I/O
    happens here.
    """

    def __init__(self, headers: HeadersLike = None) -> None:
        self.protocol = CalDAVProtocol(headers=headers)

    ## account discovery

    @staticmethod
    def _process_service_discovery(
        server_url: str, request: DAVRequest, response: DAVResponse
    ) -> str:
        if 300 <= response.status < 400:
            location = response.header("Location")
            if location:
                log.debug("service discovery redirected to %s", location)
                return urljoin(request.url, location)
        return server_url

    @staticmethod
    def _process_principal_url(
        root_url: str, entries: List[MultistatusEntry]
    ) -> str:
        href = principal_ops.find_href_property(entries, CURRENT_USER_PRINCIPAL)
        if not href:
            raise error.DiscoveryError(
                url=root_url, reason="cannot find current-user-principal"
            )
        return resolve_href(root_url, href)

    @staticmethod
    def _home_set_prop(account_type: AccountType) -> Property:
        if account_type == AccountType.CARDDAV:
            return ADDRESSBOOK_HOME_SET
        return CALENDAR_HOME_SET

    def _process_home_url(
        self,
        principal_url: str,
        account_type: AccountType,
        entries: List[MultistatusEntry],
    ) -> str:
        href = principal_ops.find_href_property(
            entries, self._home_set_prop(account_type)
        )
        href = principal_ops.sanitize_home_set_url(href)
        if not href:
            raise error.DiscoveryError(url=principal_url, reason="cannot find homeUrl")
        return resolve_href(principal_url, href)

    @staticmethod
    def _check_discovery_response(request: DAVRequest, response: DAVResponse) -> None:
        if response.status in (401, 403):
            raise error.AuthorizationError(url=request.url, reason=response.reason)
        if not response.ok:
            raise error.DiscoveryError(url=request.url, reason=error.errmsg(response))

    @staticmethod
    def _require(account: Account, attr: str) -> str:
        value = getattr(account, attr)
        if not value:
            raise error.DiscoveryError(
                url=account.server_url,
                reason=f"account has no {attr}, run create_account first",
            )
        return value

    ## request builders

    def _calendars_request(
        self,
        account: Account,
        props: Optional[Sequence[Property]],
        headers: HeadersLike,
    ) -> DAVRequest:
        return self.protocol.propfind_request(
            self._require(account, "home_url"),
            props=props or calendar_ops.CALENDAR_PROPS,
            depth=1,
            headers=account.headers.merge(headers),
        )

    def _addresses_request(self, account: Account, headers: HeadersLike) -> DAVRequest:
        return self.protocol.propfind_request(
            self._require(account, "principal_url"),
            props=[CALENDAR_USER_ADDRESS_SET],
            depth=0,
            headers=account.headers.merge(headers),
        )

    def _objects_request(
        self,
        calendar: CalendarRef,
        object_urls: Optional[Sequence[str]],
        time_range: TimeRangeLike,
        expand: bool,
        component: Optional[str],
        headers: HeadersLike,
    ) -> DAVRequest:
        ## raises on a malformed range, before anything is sent
        valid_range = resolve_time_range(time_range, expand=expand)
        url = _calendar_url(calendar)
        if object_urls is not None:
            return self.protocol.calendar_multiget_request(
                url,
                object_urls,
                props=OBJECT_PROPS,
                time_range=valid_range,
                expand=expand,
                headers=headers,
            )
        return self.protocol.calendar_query_request(
            url,
            props=OBJECT_PROPS,
            time_range=valid_range,
            expand=expand,
            component=component,
            headers=headers,
        )

    def _query_request(
        self,
        url: str,
        props: Sequence[Property],
        time_range: TimeRangeLike,
        expand: bool,
        component: Optional[str],
        filters: Optional[List[BaseElement]],
        depth: int,
        headers: HeadersLike,
    ) -> DAVRequest:
        valid_range = resolve_time_range(time_range, expand=expand)
        return self.protocol.calendar_query_request(
            url,
            props=props,
            time_range=valid_range,
            expand=expand,
            component=component,
            filters=filters,
            depth=depth,
            headers=headers,
        )

    def _multiget_request(
        self,
        url: str,
        object_urls: Sequence[str],
        props: Sequence[Property],
        time_range: TimeRangeLike,
        expand: bool,
        depth: int,
        headers: HeadersLike,
    ) -> DAVRequest:
        valid_range = resolve_time_range(time_range, expand=expand)
        return self.protocol.calendar_multiget_request(
            url,
            object_urls,
            props=props,
            time_range=valid_range,
            expand=expand,
            depth=depth,
            headers=headers,
        )

    ## response processing

    def _entries(
        self, request: DAVRequest, response: DAVResponse
    ) -> List[MultistatusEntry]:
        """
        Parsed entries of a PROPFIND or REPORT response.  A response that
        is not ok yields no entries, the failure is logged.
        """
        if not response.ok:
            log.warning(
                "%s %s failed with status %i"
                % (request.method.value, request.url, response.status)
            )
            return []
        if request.method == DAVMethod.PROPFIND:
            return self.protocol.parse_propfind(response)
        return self.protocol.parse_report(response)

    def _process_sync_collection(
        self, request: DAVRequest, response: DAVResponse
    ) -> SyncCollectionResult:
        if not response.ok:
            raise error.ResponseError(url=request.url, reason=error.errmsg(response))
        result = self.protocol.parse_sync_collection(response)
        return calendarobject_ops.process_sync_collection_response(result, request.url)


class SyncCalDAVClient(BaseCalDAVClient):
    """
    Synchronous CalDAV client.

    Args:
        headers: Headers sent with every request, typically from
            davcal.lib.auth.basic_auth_headers
        io: Transport to use, defaults to SyncIO (requests)
        timeout: Request timeout in seconds, for the default transport
        verify_ssl: Verify SSL certificates, for the default transport
    """

    def __init__(
        self,
        headers: HeadersLike = None,
        io: Optional[SyncIOProtocol] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        super(SyncCalDAVClient, self).__init__(headers=headers)
        self.io = io or SyncIO(timeout=timeout, verify=verify_ssl)

    def close(self) -> None:
        """Close the HTTP session."""
        self.io.close()

    def __enter__(self) -> "SyncCalDAVClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _execute(self, request: DAVRequest) -> DAVResponse:
        """Execute a request and return the response."""
        _log_request(request)
        response = self.io.execute(request)
        _log_response(request, response)
        return response

    # Account discovery

    def service_discovery(
        self,
        server_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> str:
        """
        Find the root URL of the service through its well-known URL.
        Falls back to server_url when the server does not redirect.
        """
        request = self.protocol.service_discovery_request(
            server_url, account_type, headers=headers
        )
        response = self._execute(request)
        return self._process_service_discovery(server_url, request, response)

    def fetch_principal_url(self, root_url: str, headers: HeadersLike = None) -> str:
        """
        URL of the current user's principal.

        Raises:
            AuthorizationError: The server rejected the credentials
            DiscoveryError: The server did not tell
        """
        request = self.protocol.propfind_request(
            root_url, [CURRENT_USER_PRINCIPAL], depth=0, headers=headers
        )
        response = self._execute(request)
        self._check_discovery_response(request, response)
        return self._process_principal_url(root_url, self.protocol.parse_propfind(response))

    def fetch_home_url(
        self,
        principal_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> str:
        """
        URL of the calendar (or addressbook) home of the principal.

        Raises:
            AuthorizationError: The server rejected the credentials
            DiscoveryError: The server did not tell
        """
        request = self.protocol.propfind_request(
            principal_url, [self._home_set_prop(account_type)], depth=0, headers=headers
        )
        response = self._execute(request)
        self._check_discovery_response(request, response)
        return self._process_home_url(
            principal_url, account_type, self.protocol.parse_propfind(response)
        )

    def create_account(
        self,
        server_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> Account:
        """
        Discover root, principal and home URL of an account.  The
        returned Account remembers the headers for later calls.
        """
        account_type = AccountType(account_type)
        root_url = self.service_discovery(server_url, account_type, headers=headers)
        principal_url = self.fetch_principal_url(root_url, headers=headers)
        home_url = self.fetch_home_url(principal_url, account_type, headers=headers)
        account = Account(
            server_url=server_url,
            account_type=account_type,
            root_url=root_url,
            principal_url=principal_url,
            home_url=home_url,
        )
        return replace(account, headers=account.headers.merge(headers))

    # Calendars

    def fetch_calendars(
        self,
        account: Account,
        components: Optional[Sequence[str]] = calendar_ops.DEFAULT_COMPONENTS,
        props: Optional[Sequence[Property]] = None,
        headers: HeadersLike = None,
    ) -> List[Calendar]:
        """
        The calendars in the home collection of the account.

        Args:
            account: Account from create_account
            components: Only calendars supporting one of these component
                types, None for all
            props: Properties to ask for, defaults to what Calendar holds
            headers: Extra headers for this request
        """
        request = self._calendars_request(account, props, headers)
        response = self._execute(request)
        return calendar_ops.process_calendars_response(
            self._entries(request, response), request.url, components
        )

    def fetch_calendar_user_addresses(
        self, account: Account, headers: HeadersLike = None
    ) -> List[str]:
        """The calendar user addresses of the account, preferred first"""
        request = self._addresses_request(account, headers)
        response = self._execute(request)
        return principal_ops.process_calendar_user_addresses(
            self._entries(request, response)
        )

    def is_collection_dirty(
        self, calendar: Calendar, headers: HeadersLike = None
    ) -> Tuple[bool, Optional[str]]:
        """
        Compares the ctag of the calendar snapshot with the one on the
        server.  Returns (dirty, new ctag).
        """
        request = self.protocol.propfind_request(
            calendar.url, [GETCTAG], depth=0, headers=headers
        )
        response = self._execute(request)
        ctag = calendar_ops.process_ctag_response(self._entries(request, response))
        return (ctag != calendar.ctag, ctag)

    def make_calendar(
        self,
        url: str,
        displayname: Optional[str] = None,
        description: Optional[str] = None,
        timezone: Optional[str] = None,
        color: Optional[str] = None,
        supported_components: Optional[Sequence[str]] = None,
        headers: HeadersLike = None,
    ) -> DAVResponse:
        """Create a calendar collection with MKCALENDAR"""
        request = self.protocol.mkcalendar_request(
            url,
            displayname=displayname,
            description=description,
            timezone=timezone,
            color=color,
            supported_components=supported_components,
            headers=headers,
        )
        return self._execute(request)

    # Calendar objects

    def calendar_query(
        self,
        url: str,
        props: Sequence[Property] = OBJECT_PROPS,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        component: Optional[str] = "VEVENT",
        filters: Optional[List[BaseElement]] = None,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> List[MultistatusEntry]:
        """
        Run a calendar-query REPORT and return the raw entries, failed
        ones included.

        Raises:
            InvalidTimeRangeError: time_range is malformed (nothing is sent)
        """
        request = self._query_request(
            url, props, time_range, expand, component, filters, depth, headers
        )
        response = self._execute(request)
        return self._entries(request, response)

    def calendar_multiget(
        self,
        url: str,
        object_urls: Sequence[str] = (),
        props: Sequence[Property] = OBJECT_PROPS,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> List[CalendarObject]:
        """
        Fetch the given objects of a calendar in one REPORT.

        Raises:
            InvalidTimeRangeError: time_range is malformed (nothing is sent)
        """
        request = self._multiget_request(
            url, object_urls, props, time_range, expand, depth, headers
        )
        response = self._execute(request)
        return calendarobject_ops.process_report_results(
            self._entries(request, response), url
        )

    def fetch_calendar_objects(
        self,
        calendar: CalendarRef,
        object_urls: Optional[Sequence[str]] = None,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        component: Optional[str] = "VEVENT",
        url_filter: Optional[Callable[[str], bool]] = None,
        headers: HeadersLike = None,
    ) -> List[CalendarObject]:
        """
        Objects of a calendar, optionally limited to those with an
        occurrence overlapping [start, end) of time_range.

        Args:
            calendar: Calendar or its URL
            object_urls: Fetch these objects with a multiget instead of
                querying the calendar
            time_range: TimeRange, {"start": .., "end": ..} or
                (start, end), ISO 8601 strings or datetimes
            expand: One result per occurrence rather than per series
            component: Component type to query for
            url_filter: Only keep objects whose URL it accepts
            headers: Extra headers for this request

        Raises:
            InvalidTimeRangeError: time_range is malformed (nothing is sent)
        """
        request = self._objects_request(
            calendar, object_urls, time_range, expand, component, headers
        )
        response = self._execute(request)
        return calendarobject_ops.process_report_results(
            self._entries(request, response), request.url, url_filter
        )

    def create_object(
        self, url: str, data: CalendarData, headers: HeadersLike = None
    ) -> DAVResponse:
        """PUT a new object.  Check `ok` on the result."""
        return self._execute(self.protocol.put_request(url, data, headers=headers))

    def update_object(
        self,
        url: str,
        data: CalendarData,
        etag: Optional[str] = None,
        headers: HeadersLike = None,
    ) -> DAVResponse:
        """PUT a new version of an object, conditional on etag if given"""
        return self._execute(
            self.protocol.put_request(url, data, etag=etag, headers=headers)
        )

    def delete_object(
        self, url: str, etag: Optional[str] = None, headers: HeadersLike = None
    ) -> DAVResponse:
        """DELETE an object.  Check `ok` on the result."""
        return self._execute(
            self.protocol.delete_request(url, etag=etag, headers=headers)
        )

    def sync_collection(
        self,
        url: str,
        sync_token: Optional[str] = None,
        props: Optional[Sequence[Property]] = None,
        headers: HeadersLike = None,
    ) -> SyncCollectionResult:
        """
        Changes to a calendar since sync_token (rfc6578).

        Raises:
            ResponseError: The server refused, i.e. the token is invalid
        """
        request = self.protocol.sync_collection_request(
            url, sync_token, props, headers=headers
        )
        response = self._execute(request)
        return self._process_sync_collection(request, response)


class AsyncCalDAVClient(BaseCalDAVClient):
    """
    Asynchronous CalDAV client, same operations as SyncCalDAVClient.

    Independent operations may run concurrently, i.e. with
    asyncio.gather; the client holds no state besides the session.

    Example:
        async with AsyncCalDAVClient(headers=auth) as client:
            account = await client.create_account("https://caldav.example.com/")
            calendars = await client.fetch_calendars(account)
    """

    def __init__(
        self,
        headers: HeadersLike = None,
        io: Optional[AsyncIOProtocol] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        super(AsyncCalDAVClient, self).__init__(headers=headers)
        self.io = io or AsyncIO(timeout=timeout, verify_ssl=verify_ssl)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.io.close()

    async def __aenter__(self) -> "AsyncCalDAVClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _execute(self, request: DAVRequest) -> DAVResponse:
        """Execute a request and return the response."""
        _log_request(request)
        response = await self.io.execute(request)
        _log_response(request, response)
        return response

    # Account discovery

    async def service_discovery(
        self,
        server_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> str:
        request = self.protocol.service_discovery_request(
            server_url, account_type, headers=headers
        )
        response = await self._execute(request)
        return self._process_service_discovery(server_url, request, response)

    async def fetch_principal_url(
        self, root_url: str, headers: HeadersLike = None
    ) -> str:
        request = self.protocol.propfind_request(
            root_url, [CURRENT_USER_PRINCIPAL], depth=0, headers=headers
        )
        response = await self._execute(request)
        self._check_discovery_response(request, response)
        return self._process_principal_url(root_url, self.protocol.parse_propfind(response))

    async def fetch_home_url(
        self,
        principal_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> str:
        request = self.protocol.propfind_request(
            principal_url, [self._home_set_prop(account_type)], depth=0, headers=headers
        )
        response = await self._execute(request)
        self._check_discovery_response(request, response)
        return self._process_home_url(
            principal_url, account_type, self.protocol.parse_propfind(response)
        )

    async def create_account(
        self,
        server_url: str,
        account_type: AccountType = AccountType.CALDAV,
        headers: HeadersLike = None,
    ) -> Account:
        account_type = AccountType(account_type)
        root_url = await self.service_discovery(server_url, account_type, headers=headers)
        principal_url = await self.fetch_principal_url(root_url, headers=headers)
        home_url = await self.fetch_home_url(principal_url, account_type, headers=headers)
        account = Account(
            server_url=server_url,
            account_type=account_type,
            root_url=root_url,
            principal_url=principal_url,
            home_url=home_url,
        )
        return replace(account, headers=account.headers.merge(headers))

    # Calendars

    async def fetch_calendars(
        self,
        account: Account,
        components: Optional[Sequence[str]] = calendar_ops.DEFAULT_COMPONENTS,
        props: Optional[Sequence[Property]] = None,
        headers: HeadersLike = None,
    ) -> List[Calendar]:
        request = self._calendars_request(account, props, headers)
        response = await self._execute(request)
        return calendar_ops.process_calendars_response(
            self._entries(request, response), request.url, components
        )

    async def fetch_calendar_user_addresses(
        self, account: Account, headers: HeadersLike = None
    ) -> List[str]:
        request = self._addresses_request(account, headers)
        response = await self._execute(request)
        return principal_ops.process_calendar_user_addresses(
            self._entries(request, response)
        )

    async def is_collection_dirty(
        self, calendar: Calendar, headers: HeadersLike = None
    ) -> Tuple[bool, Optional[str]]:
        request = self.protocol.propfind_request(
            calendar.url, [GETCTAG], depth=0, headers=headers
        )
        response = await self._execute(request)
        ctag = calendar_ops.process_ctag_response(self._entries(request, response))
        return (ctag != calendar.ctag, ctag)

    async def make_calendar(
        self,
        url: str,
        displayname: Optional[str] = None,
        description: Optional[str] = None,
        timezone: Optional[str] = None,
        color: Optional[str] = None,
        supported_components: Optional[Sequence[str]] = None,
        headers: HeadersLike = None,
    ) -> DAVResponse:
        request = self.protocol.mkcalendar_request(
            url,
            displayname=displayname,
            description=description,
            timezone=timezone,
            color=color,
            supported_components=supported_components,
            headers=headers,
        )
        return await self._execute(request)

    # Calendar objects

    async def calendar_query(
        self,
        url: str,
        props: Sequence[Property] = OBJECT_PROPS,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        component: Optional[str] = "VEVENT",
        filters: Optional[List[BaseElement]] = None,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> List[MultistatusEntry]:
        request = self._query_request(
            url, props, time_range, expand, component, filters, depth, headers
        )
        response = await self._execute(request)
        return self._entries(request, response)

    async def calendar_multiget(
        self,
        url: str,
        object_urls: Sequence[str] = (),
        props: Sequence[Property] = OBJECT_PROPS,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        depth: int = 1,
        headers: HeadersLike = None,
    ) -> List[CalendarObject]:
        request = self._multiget_request(
            url, object_urls, props, time_range, expand, depth, headers
        )
        response = await self._execute(request)
        return calendarobject_ops.process_report_results(
            self._entries(request, response), url
        )

    async def fetch_calendar_objects(
        self,
        calendar: CalendarRef,
        object_urls: Optional[Sequence[str]] = None,
        time_range: TimeRangeLike = None,
        expand: bool = False,
        component: Optional[str] = "VEVENT",
        url_filter: Optional[Callable[[str], bool]] = None,
        headers: HeadersLike = None,
    ) -> List[CalendarObject]:
        request = self._objects_request(
            calendar, object_urls, time_range, expand, component, headers
        )
        response = await self._execute(request)
        return calendarobject_ops.process_report_results(
            self._entries(request, response), request.url, url_filter
        )

    async def create_object(
        self, url: str, data: CalendarData, headers: HeadersLike = None
    ) -> DAVResponse:
        return await self._execute(self.protocol.put_request(url, data, headers=headers))

    async def update_object(
        self,
        url: str,
        data: CalendarData,
        etag: Optional[str] = None,
        headers: HeadersLike = None,
    ) -> DAVResponse:
        return await self._execute(
            self.protocol.put_request(url, data, etag=etag, headers=headers)
        )

    async def delete_object(
        self, url: str, etag: Optional[str] = None, headers: HeadersLike = None
    ) -> DAVResponse:
        return await self._execute(
            self.protocol.delete_request(url, etag=etag, headers=headers)
        )

    async def sync_collection(
        self,
        url: str,
        sync_token: Optional[str] = None,
        props: Optional[Sequence[Property]] = None,
        headers: HeadersLike = None,
    ) -> SyncCollectionResult:
        request = self.protocol.sync_collection_request(
            url, sync_token, props, headers=headers
        )
        response = await self._execute(request)
        return self._process_sync_collection(request, response)
