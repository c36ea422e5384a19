"""
Core protocol types for the Sans-I/O CalDAV implementation.

These dataclasses represent HTTP requests and responses at the protocol
level, independent of any I/O implementation, plus the typed results
the client hands back to the caller.
"""
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union

import icalendar

from davcal.lib.namespace import Property


class DAVMethod(Enum):
    """WebDAV/CalDAV HTTP methods."""

    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    PROPFIND = "PROPFIND"
    REPORT = "REPORT"
    MKCALENDAR = "MKCALENDAR"


## what can be uploaded as a calendar object
CalendarData = Union[str, bytes, icalendar.Calendar]


class AccountType(Enum):
    CALDAV = "caldav"
    CARDDAV = "carddav"


## canonical header name for each recognized RequestHeaders field
_HEADER_FIELDS: Dict[str, str] = {
    "authorization": "Authorization",
    "content_type": "Content-Type",
    "depth": "Depth",
    "if_match": "If-Match",
    "if_none_match": "If-None-Match",
}
_FIELD_BY_HEADER: Dict[str, str] = {v.lower(): k for k, v in _HEADER_FIELDS.items()}


@dataclass(frozen=True)
class RequestHeaders:
    """
    The headers that go with a request.

    The headers this library itself cares about have their own fields,
    everything else (custom auth schemes, User-Agent, ...) is passed
    through untouched via `extra`.  Use `merge` to layer one set of
    headers on top of another, the values of the argument win.
    """

    authorization: Optional[str] = None
    content_type: Optional[str] = None
    depth: Optional[str] = None
    if_match: Optional[str] = None
    if_none_match: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, headers: Optional[Mapping[str, str]]) -> "RequestHeaders":
        known: Dict[str, str] = {}
        extra: Dict[str, str] = {}
        for name, value in (headers or {}).items():
            attr = _FIELD_BY_HEADER.get(name.lower())
            if attr:
                known[attr] = value
            else:
                extra[name] = value
        return cls(extra=extra, **known)

    @classmethod
    def coerce(
        cls, headers: Union["RequestHeaders", Mapping[str, str], None]
    ) -> "RequestHeaders":
        if isinstance(headers, RequestHeaders):
            return headers
        return cls.from_mapping(headers)

    def merge(
        self, other: Union["RequestHeaders", Mapping[str, str], None]
    ) -> "RequestHeaders":
        other = RequestHeaders.coerce(other)
        changes: Dict[str, Any] = {
            attr: getattr(other, attr)
            for attr in _HEADER_FIELDS
            if getattr(other, attr) is not None
        }
        extra = {
            k: v
            for k, v in self.extra.items()
            if k.lower() not in {x.lower() for x in other.extra}
        }
        extra.update(other.extra)
        changes["extra"] = extra
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, str]:
        ret = {
            name: getattr(self, attr)
            for attr, name in _HEADER_FIELDS.items()
            if getattr(self, attr) is not None
        }
        for name, value in self.extra.items():
            for existing in [x for x in ret if x.lower() == name.lower()]:
                del ret[existing]
            ret[name] = value
        return ret


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (PUT, PROPFIND, REPORT, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body as bytes (optional)
        follow_redirects: Whether the transport should follow 3xx responses
    """

    method: DAVMethod
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    follow_redirects: bool = True


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    Attributes:
        status: HTTP status code
        headers: HTTP headers as dict
        body: Response body as bytes
    """

    status: int
    headers: Dict[str, str]
    body: bytes

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_multistatus(self) -> bool:
        """True if this is a 207 Multi-Status response."""
        return self.status == 207

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", "replace")

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup"""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return None

    @property
    def reason(self) -> str:
        """Return a reason phrase for the status code."""
        reasons = {
            200: "OK",
            201: "Created",
            204: "No Content",
            207: "Multi-Status",
            301: "Moved Permanently",
            302: "Found",
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            405: "Method Not Allowed",
            409: "Conflict",
            412: "Precondition Failed",
            415: "Unsupported Media Type",
            500: "Internal Server Error",
            501: "Not Implemented",
            503: "Service Unavailable",
        }
        return reasons.get(self.status, "Unknown")


_MISSING = object()


@dataclass
class MultistatusEntry:
    """
    One DAV:response out of a 207 Multi-Status body.

    Attributes:
        href: URL/path of the resource, as given by the server
        status: HTTP status for this resource
        properties: Property -> parsed value.  A property the server
            returned as an empty element maps to None, a property the
            server did not return at all has no key.
    """

    href: str
    status: int = 200
    properties: Dict[Property, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def has(self, prop: Property) -> bool:
        return prop in self.properties

    def get(self, prop: Property, default: Any = None) -> Any:
        value = self.properties.get(prop, _MISSING)
        if value is _MISSING or value is None:
            return default
        return value


@dataclass
class MultistatusResponse:
    """
    Parsed multi-status response containing multiple results.

    Attributes:
        responses: List of individual response results
        sync_token: Sync token if present (for sync-collection)
    """

    responses: List[MultistatusEntry] = field(default_factory=list)
    sync_token: Optional[str] = None


@dataclass(frozen=True)
class TimeRange:
    """
    A validated pair of instants, both timezone-aware.  Build it with
    davcal.operations.timerange_ops.validate_time_range.
    """

    start: datetime
    end: datetime


@dataclass(frozen=True)
class Account:
    """
    Where an account lives on the server.  The urls get filled in by
    discovery, see SyncCalDAVClient.create_account.
    """

    server_url: str
    account_type: AccountType = AccountType.CALDAV
    root_url: Optional[str] = None
    principal_url: Optional[str] = None
    home_url: Optional[str] = None
    headers: RequestHeaders = field(default_factory=RequestHeaders)


@dataclass
class Calendar:
    """A snapshot of a calendar collection as reported by the server"""

    url: str
    display_name: Optional[str] = None
    ctag: Optional[str] = None
    components: List[str] = field(default_factory=list)
    timezone: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    sync_token: Optional[str] = None
    resource_types: List[str] = field(default_factory=list)


@dataclass
class CalendarObject:
    """
    An event, todo or journal resource.

    Attributes:
        url: Absolute URL of the resource
        etag: Opaque version token, None if the server did not send one
        data: Raw iCalendar text, empty if the server did not send any
    """

    url: str
    etag: Optional[str] = None
    data: str = ""

    @property
    def icalendar_instance(self) -> Optional[icalendar.Calendar]:
        if not self.data:
            return None
        return icalendar.Calendar.from_ical(self.data)

    @property
    def component(self) -> Optional[icalendar.Component]:
        """The first event, todo or journal in the data"""
        cal = self.icalendar_instance
        if cal is None:
            return None
        for sub in cal.subcomponents:
            if sub.name in ("VEVENT", "VTODO", "VJOURNAL"):
                return sub
        return None


@dataclass
class SyncCollectionResult:
    """
    Parsed result of a sync-collection REPORT.

    Attributes:
        changed: List of changed/new resources
        deleted: List of deleted resource urls
        sync_token: New sync token for next sync
    """

    changed: List[CalendarObject] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    sync_token: Optional[str] = None
