"""
An in-memory CalDAV server speaking just enough PROPFIND, REPORT, PUT
and DELETE for the client tests, plugged in where the HTTP transport
normally goes.
"""
import itertools
from datetime import datetime
from datetime import timezone
from typing import Dict
from typing import List
from typing import Optional
from xml.sax.saxutils import escape

import icalendar
import pytest
from lxml import etree

from davcal.client import AsyncCalDAVClient
from davcal.client import SyncCalDAVClient
from davcal.lib.auth import basic_auth_headers
from davcal.protocol.types import DAVRequest
from davcal.protocol.types import DAVResponse

SERVER = "https://caldav.example.com"
ROOT = "/dav/"
PRINCIPAL = "/dav/principals/alice/"
HOME = "/dav/calendars/alice/"
CALENDAR = "/dav/calendars/alice/personal/"
TASKS = "/dav/calendars/alice/tasks/"
INBOX = "/dav/calendars/alice/inbox/"

AUTH = basic_auth_headers("alice", "secret")

DAV = "{DAV:}"
CAL = "{urn:ietf:params:xml:ns:caldav}"

EVENT_TEMPLATE = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//davcal//tests//EN
BEGIN:VEVENT
UID:{uid}
DTSTAMP:20210401T120000Z
DTSTART:{start}
DTEND:{end}
SUMMARY:{summary}
END:VEVENT
END:VCALENDAR
"""


def make_event(uid, start, end, summary="event"):
    return EVENT_TEMPLATE.format(uid=uid, start=start, end=end, summary=summary)


def _utc(value):
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _parse_stamp(value):
    return datetime.strptime(value, "%Y%m%dT%H%M%SZ").replace(tzinfo=timezone.utc)


def _response(href, props: str, status="HTTP/1.1 200 OK", missing: str = ""):
    ret = f"<D:response><D:href>{href}</D:href>"
    ret += f"<D:propstat><D:prop>{props}</D:prop><D:status>{status}</D:status></D:propstat>"
    if missing:
        ret += f"<D:propstat><D:prop>{missing}</D:prop><D:status>HTTP/1.1 404 Not Found</D:status></D:propstat>"
    return ret + "</D:response>"


def _multistatus(*responses):
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<D:multistatus xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:caldav" '
        'xmlns:CS="http://calendarserver.org/ns/" xmlns:I="http://apple.com/ns/ical/">'
        + "".join(responses)
        + "</D:multistatus>"
    ).encode("utf-8")


class FakeCalDAVServer:
    """
    Keeps calendars as {path: {uid-path: (etag, data)}}.  Every request
    executed is recorded in `requests`.
    """

    def __init__(self, authorization: Optional[str] = AUTH.authorization) -> None:
        self.authorization = authorization
        self.requests: List[DAVRequest] = []
        self.objects: Dict[str, Dict[str, tuple]] = {CALENDAR: {}, TASKS: {}}
        self.ctags = {CALENDAR: "ctag-1", TASKS: "ctag-1"}
        self._etags = itertools.count(1)
        self.well_known_redirect = True
        self.closed = False

    ## transport interface

    def execute(self, request: DAVRequest) -> DAVResponse:
        self.requests.append(request)
        if self.authorization and request.headers.get("Authorization") != self.authorization:
            return DAVResponse(status=401, headers={}, body=b"")
        path = request.url[len(SERVER) :] if request.url.startswith(SERVER) else request.url
        handler = getattr(self, "_" + request.method.value.lower())
        return handler(path, request)

    def close(self) -> None:
        self.closed = True

    ## helpers for the tests

    def add_object(self, calendar: str, name: str, data: str) -> str:
        n = next(self._etags)
        etag = f'"etag-{n}"'
        self.objects[calendar][calendar + name] = (etag, data)
        self.ctags[calendar] = f"ctag-{n + 1}"
        return etag

    ## methods

    def _propfind(self, path, request):
        if path == "/.well-known/caldav":
            if self.well_known_redirect:
                return DAVResponse(status=301, headers={"Location": ROOT}, body=b"")
            return DAVResponse(status=404, headers={}, body=b"")
        if path in ("", "/", ROOT):
            body = _multistatus(
                _response(
                    path,
                    f"<D:current-user-principal><D:href>{PRINCIPAL}</D:href></D:current-user-principal>",
                )
            )
        elif path == PRINCIPAL:
            body = _multistatus(
                _response(
                    path,
                    f"<C:calendar-home-set><D:href>{HOME}</D:href></C:calendar-home-set>"
                    "<C:calendar-user-address-set>"
                    "<D:href>mailto:alice@example.com</D:href>"
                    '<D:href preferred="1">mailto:alice.smith@example.com</D:href>'
                    "</C:calendar-user-address-set>",
                )
            )
        elif path == HOME:
            body = _multistatus(
                _response(
                    HOME,
                    "<D:resourcetype><D:collection/></D:resourcetype><D:displayname>home</D:displayname>",
                ),
                self._calendar_response(CALENDAR, "Personal", "VEVENT"),
                self._calendar_response(TASKS, "Tasks", "VTODO"),
                _response(
                    INBOX,
                    "<D:resourcetype><D:collection/><C:schedule-inbox/></D:resourcetype>",
                ),
            )
        elif path in self.objects:
            body = _multistatus(
                _response(path, f"<CS:getctag>{self.ctags[path]}</CS:getctag>")
            )
        else:
            return DAVResponse(status=404, headers={}, body=b"")
        return DAVResponse(status=207, headers={"Content-Type": "application/xml"}, body=body)

    def _calendar_response(self, path, name, component):
        return _response(
            path,
            "<D:resourcetype><D:collection/><C:calendar/></D:resourcetype>"
            f"<D:displayname>{name}</D:displayname>"
            f"<CS:getctag>{self.ctags[path]}</CS:getctag>"
            f'<C:supported-calendar-component-set><C:comp name="{component}"/></C:supported-calendar-component-set>'
            f"<D:sync-token>https://caldav.example.com/sync/{self.ctags[path]}</D:sync-token>",
            missing="<I:calendar-color/><C:calendar-description/>",
        )

    def _report(self, path, request):
        if path not in self.objects:
            return DAVResponse(status=404, headers={}, body=b"")
        calendar = self.objects[path]
        root = etree.fromstring(request.body)
        responses = []
        if root.tag == CAL + "calendar-multiget":
            for href in root.findall(DAV + "href"):
                key = href.text[len(SERVER) :] if href.text.startswith(SERVER) else href.text
                if key in calendar:
                    responses.append(self._object_response(key, *calendar[key]))
                else:
                    responses.append(
                        f"<D:response><D:href>{href.text}</D:href>"
                        "<D:status>HTTP/1.1 404 Not Found</D:status></D:response>"
                    )
        elif root.tag == CAL + "calendar-query":
            time_range = root.find(f".//{CAL}time-range")
            uid_match = root.find(f".//{CAL}prop-filter[@name='UID']/{CAL}text-match")
            for href, (etag, data) in sorted(calendar.items()):
                if uid_match is not None and f"UID:{uid_match.text}" not in data:
                    continue
                if time_range is None or self._overlaps(
                    data, time_range.get("start"), time_range.get("end")
                ):
                    responses.append(self._object_response(href, etag, data))
        else:
            return DAVResponse(status=400, headers={}, body=b"")
        return DAVResponse(status=207, headers={}, body=_multistatus(*responses))

    @staticmethod
    def _object_response(href, etag, data):
        return _response(
            href,
            f"<D:getetag>{escape(etag)}</D:getetag>"
            f"<C:calendar-data>{escape(data)}</C:calendar-data>",
        )

    @staticmethod
    def _overlaps(data, start, end):
        event = icalendar.Calendar.from_ical(data).walk("VEVENT")[0]
        dtstart = _utc(event["DTSTART"].dt)
        dtend = _utc(event["DTEND"].dt)
        return dtstart < _parse_stamp(end) and dtend > _parse_stamp(start)

    def _put(self, path, request):
        calendar = path.rsplit("/", 1)[0] + "/"
        if calendar not in self.objects:
            return DAVResponse(status=409, headers={}, body=b"")
        current = self.objects[calendar].get(path)
        if_match = request.headers.get("If-Match")
        if if_match and (current is None or current[0] != if_match):
            return DAVResponse(status=412, headers={}, body=b"")
        etag = self.add_object(calendar, path[len(calendar) :], request.body.decode("utf-8"))
        return DAVResponse(
            status=204 if current else 201, headers={"ETag": etag}, body=b""
        )

    def _delete(self, path, request):
        calendar = path.rsplit("/", 1)[0] + "/"
        if path not in self.objects.get(calendar, {}):
            return DAVResponse(status=404, headers={}, body=b"")
        del self.objects[calendar][path]
        return DAVResponse(status=204, headers={}, body=b"")


class AsyncFakeIO:
    """The same server behind the async transport interface"""

    def __init__(self, server: FakeCalDAVServer) -> None:
        self.server = server

    async def execute(self, request: DAVRequest) -> DAVResponse:
        return self.server.execute(request)

    async def close(self) -> None:
        self.server.close()


@pytest.fixture
def server():
    return FakeCalDAVServer()


@pytest.fixture
def client(server):
    with SyncCalDAVClient(headers=AUTH, io=server) as client:
        yield client


@pytest.fixture
def async_client(server):
    return AsyncCalDAVClient(headers=AUTH, io=AsyncFakeIO(server))


@pytest.fixture
def event_factory():
    return make_event
