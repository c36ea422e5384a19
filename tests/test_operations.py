"""
Tests for the operations layer.

These tests verify the Sans-I/O mapping from parsed multistatus entries
to typed results, and the time-range validation, without any network
I/O.
"""
from datetime import date
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import pytest
from lxml import etree

from davcal.lib import error
from davcal.lib.namespace import CALENDAR_DATA
from davcal.lib.namespace import CALENDAR_HOME_SET
from davcal.lib.namespace import CALENDAR_USER_ADDRESS_SET
from davcal.lib.namespace import DISPLAYNAME
from davcal.lib.namespace import GETCTAG
from davcal.lib.namespace import GETETAG
from davcal.lib.namespace import RESOURCETYPE
from davcal.lib.namespace import SUPPORTED_CALENDAR_COMPONENT_SET
from davcal.operations.base import is_calendar_resource
from davcal.operations.base import resolve_href
from davcal.operations.base import successful_entries
from davcal.operations.calendar_ops import process_calendars_response
from davcal.operations.calendar_ops import process_ctag_response
from davcal.operations.calendarobject_ops import generate_uid
from davcal.operations.calendarobject_ops import generate_url
from davcal.operations.calendarobject_ops import process_report_results
from davcal.operations.calendarobject_ops import process_sync_collection_response
from davcal.operations.principal_ops import find_href_property
from davcal.operations.principal_ops import process_calendar_user_addresses
from davcal.operations.principal_ops import sanitize_home_set_url
from davcal.operations.timerange_ops import parse_instant
from davcal.operations.timerange_ops import resolve_time_range
from davcal.operations.timerange_ops import validate_time_range
from davcal.protocol.types import MultistatusEntry
from davcal.protocol.types import MultistatusResponse
from davcal.protocol.types import TimeRange

BASE = "https://cal.example.com/calendars/user/"
CALENDAR_RT = ["{DAV:}collection", "{urn:ietf:params:xml:ns:caldav}calendar"]


def calendar_entry(href, name, components=None, extra=None):
    props = {RESOURCETYPE: CALENDAR_RT, DISPLAYNAME: name}
    if components is not None:
        props[SUPPORTED_CALENDAR_COMPONENT_SET] = components
    props.update(extra or {})
    return MultistatusEntry(href=href, properties=props)


class TestTimeRange:
    def test_extended_format(self):
        assert parse_instant("2021-05-01T00:00:00.000Z") == datetime(
            2021, 5, 1, tzinfo=timezone.utc
        )

    def test_basic_format(self):
        assert parse_instant("20210501T120000Z") == datetime(
            2021, 5, 1, 12, tzinfo=timezone.utc
        )

    def test_offset_converted_to_utc(self):
        assert parse_instant("2021-05-01T02:00:00+02:00") == datetime(
            2021, 5, 1, tzinfo=timezone.utc
        )

    def test_naive_is_utc(self):
        assert parse_instant("2021-05-01T10:00:00").tzinfo == timezone.utc
        assert parse_instant(datetime(2021, 5, 1, 10)) == datetime(
            2021, 5, 1, 10, tzinfo=timezone.utc
        )

    def test_date(self):
        assert parse_instant(date(2021, 5, 1)) == datetime(2021, 5, 1, tzinfo=timezone.utc)
        assert parse_instant("2021-05-01") == datetime(2021, 5, 1, tzinfo=timezone.utc)

    def test_aware_datetime(self):
        tz = timezone(timedelta(hours=-2))
        assert parse_instant(datetime(2021, 5, 1, 22, tzinfo=tz)) == datetime(
            2021, 5, 2, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize(
        "value", ["", "yesterday", "2021-13-01T00:00:00Z", "05/01/2021", 20210501, None]
    )
    def test_invalid(self, value):
        with pytest.raises(error.InvalidTimeRangeError) as excinfo:
            parse_instant(value)
        assert str(excinfo.value) == "invalid timeRange format, not in ISO8601"

    def test_validate_either_end(self):
        with pytest.raises(error.InvalidTimeRangeError):
            validate_time_range("2021-05-01T00:00:00Z", "bogus")
        with pytest.raises(error.InvalidTimeRangeError):
            validate_time_range("bogus", "2021-05-01T00:00:00Z")

    def test_inverted_range_is_not_rejected(self):
        tr = validate_time_range("2021-05-04", "2021-05-01")
        assert tr.start > tr.end

    def test_resolve_forms(self):
        expected = TimeRange(
            start=datetime(2021, 5, 1, tzinfo=timezone.utc),
            end=datetime(2021, 5, 4, tzinfo=timezone.utc),
        )
        assert resolve_time_range({"start": "2021-05-01", "end": "2021-05-04"}) == expected
        assert resolve_time_range(("2021-05-01", "2021-05-04")) == expected
        assert resolve_time_range(expected) == expected
        assert resolve_time_range(None) is None

    def test_resolve_incomplete(self):
        with pytest.raises(error.InvalidTimeRangeError):
            resolve_time_range({"start": "2021-05-01"})
        with pytest.raises(error.InvalidTimeRangeError):
            resolve_time_range(("2021-05-01",))
        with pytest.raises(error.InvalidTimeRangeError):
            resolve_time_range("2021-05-01/2021-05-04")

    def test_expand_needs_range(self):
        with pytest.raises(error.InvalidTimeRangeError):
            resolve_time_range(None, expand=True)

    def test_error_is_value_error(self):
        assert issubclass(error.InvalidTimeRangeError, ValueError)
        assert error.InvalidTimeRangeError() == error.InvalidTimeRangeError()


class TestBase:
    def test_resolve_href(self):
        assert resolve_href(BASE, "/calendars/user/a.ics") == BASE + "a.ics"
        assert resolve_href(BASE, "b.ics") == BASE + "b.ics"
        assert resolve_href(BASE, "https://other.example.com/x/") == "https://other.example.com/x/"
        assert resolve_href(BASE, "") == BASE

    def test_successful_entries(self):
        entries = [
            MultistatusEntry(href="/a", status=200),
            MultistatusEntry(href="/b", status=404),
            MultistatusEntry(href="/c", status=201),
        ]
        assert [e.href for e in successful_entries(entries)] == ["/a", "/c"]

    def test_is_calendar_resource(self):
        assert is_calendar_resource(calendar_entry("/cal/", "Cal"))
        assert not is_calendar_resource(
            MultistatusEntry(href="/x/", properties={RESOURCETYPE: ["{DAV:}collection"]})
        )
        assert not is_calendar_resource(MultistatusEntry(href="/y/"))


class TestCalendarOps:
    def test_process_calendars_response(self):
        entries = [
            MultistatusEntry(href="/calendars/user/", properties={RESOURCETYPE: ["{DAV:}collection"]}),
            calendar_entry(
                "/calendars/user/work/",
                "Work",
                ["VEVENT"],
                extra={GETCTAG: "c1"},
            ),
            calendar_entry("/calendars/user/journal/", "Journal", ["VJOURNAL"]),
            calendar_entry("/calendars/user/all/", "All"),
            MultistatusEntry(href="/calendars/user/broken/", status=403),
        ]
        calendars = process_calendars_response(entries, BASE)
        assert [c.display_name for c in calendars] == ["Work", "All"]
        work = calendars[0]
        assert work.url == BASE + "work/"
        assert work.ctag == "c1"
        assert work.components == ["VEVENT"]
        assert work.resource_types == CALENDAR_RT

        assert len(process_calendars_response(entries, BASE, components=None)) == 3

    def test_nested_displayname(self):
        name = etree.fromstring('<D:displayname xmlns:D="DAV:"><b>Bold</b></D:displayname>')
        calendars = process_calendars_response([calendar_entry("/c/", name)], BASE)
        assert calendars[0].display_name == "Bold"

    def test_process_ctag_response(self):
        assert process_ctag_response([MultistatusEntry(href="/c/", properties={GETCTAG: "x"})]) == "x"
        assert process_ctag_response([MultistatusEntry(href="/c/")]) is None


class TestCalendarObjectOps:
    def test_generate_uid(self):
        assert generate_uid() != generate_uid()

    def test_generate_url(self):
        assert generate_url(BASE, "abc") == BASE + "abc.ics"
        assert generate_url(BASE.rstrip("/"), "abc") == BASE + "abc.ics"
        assert generate_url(BASE, "a/b") == BASE + "a%252Fb.ics"

    def test_process_report_results(self):
        entries = [
            MultistatusEntry(href="/calendars/user/", properties={}),
            MultistatusEntry(
                href="/calendars/user/a.ics",
                properties={GETETAG: '"1"', CALENDAR_DATA: "BEGIN:VCALENDAR\nEND:VCALENDAR\n"},
            ),
            MultistatusEntry(href="/calendars/user/b.ics", properties={GETETAG: '"2"'}),
            MultistatusEntry(href="/calendars/user/c.ics", status=404),
            MultistatusEntry(href="/calendars/user/d.ics", properties={CALENDAR_DATA: None}),
        ]
        objects = process_report_results(entries, BASE)
        assert [(o.url, o.etag) for o in objects] == [
            (BASE + "a.ics", '"1"'),
            (BASE + "b.ics", '"2"'),
            (BASE + "d.ics", None),
        ]
        assert objects[0].data.startswith("BEGIN:VCALENDAR")
        assert objects[1].data == ""
        assert objects[2].data == ""
        assert objects[1].icalendar_instance is None
        assert objects[1].component is None

    def test_process_report_results_url_filter(self):
        entries = [
            MultistatusEntry(href="/calendars/user/a.ics"),
            MultistatusEntry(href="/calendars/user/b.ics"),
        ]
        objects = process_report_results(entries, BASE, url_filter=lambda u: u.endswith("b.ics"))
        assert [o.url for o in objects] == [BASE + "b.ics"]

    def test_process_sync_collection_response(self):
        result = MultistatusResponse(
            responses=[
                MultistatusEntry(href="/calendars/user/a.ics", properties={GETETAG: '"3"'}),
                MultistatusEntry(href="/calendars/user/b.ics", status=404),
            ],
            sync_token="tok",
        )
        sync = process_sync_collection_response(result, BASE)
        assert [o.url for o in sync.changed] == [BASE + "a.ics"]
        assert sync.deleted == [BASE + "b.ics"]
        assert sync.sync_token == "tok"


class TestPrincipalOps:
    def test_sanitize_home_set_url(self):
        assert sanitize_home_set_url(None) is None
        assert sanitize_home_set_url("/dav/user@example.com/") == "/dav/user%40example.com/"
        assert sanitize_home_set_url("/dav/user%40example.com/") == "/dav/user%40example.com/"
        assert (
            sanitize_home_set_url("https://x.example.com/dav/user@example.com/")
            == "https://x.example.com/dav/user@example.com/"
        )

    def test_find_href_property(self):
        entries = [
            MultistatusEntry(href="/p/", status=404),
            MultistatusEntry(href="/p/", properties={CALENDAR_HOME_SET: "/home/"}),
        ]
        assert find_href_property(entries, CALENDAR_HOME_SET) == "/home/"
        assert find_href_property([], CALENDAR_HOME_SET) is None

    def test_process_calendar_user_addresses(self):
        value = etree.fromstring(
            '<C:calendar-user-address-set xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:caldav">'
            "<D:href>mailto:a@example.com</D:href>"
            '<D:href preferred="1">mailto:b@example.com</D:href>'
            "<D:href>  </D:href>"
            "</C:calendar-user-address-set>"
        )
        entries = [MultistatusEntry(href="/p/", properties={CALENDAR_USER_ADDRESS_SET: value})]
        assert process_calendar_user_addresses(entries) == [
            "mailto:b@example.com",
            "mailto:a@example.com",
        ]

    def test_preferred_attribute_forms(self):
        value = etree.fromstring(
            '<C:calendar-user-address-set xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:caldav">'
            '<D:href preferred="0">mailto:a@example.com</D:href>'
            '<D:href preferred="yes please">mailto:b@example.com</D:href>'
            '<D:href preferred="TRUE">mailto:c@example.com</D:href>'
            "</C:calendar-user-address-set>"
        )
        entries = [MultistatusEntry(href="/p/", properties={CALENDAR_USER_ADDRESS_SET: value})]
        assert process_calendar_user_addresses(entries) == [
            "mailto:c@example.com",
            "mailto:a@example.com",
            "mailto:b@example.com",
        ]

    def test_no_addresses(self):
        assert process_calendar_user_addresses([MultistatusEntry(href="/p/")]) == []
