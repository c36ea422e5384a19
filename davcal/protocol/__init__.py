"""
Sans-I/O CalDAV protocol implementation.

This module provides protocol-level operations without any I/O.
It builds requests and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (DAVRequest, DAVResponse, result types)
- xml_builders: Pure functions to build XML request bodies
- xml_parsers: Pure functions to parse XML response bodies
- operations: High-level CalDAVProtocol class combining builders and parsers

Example usage:

    from davcal.lib.namespace import DISPLAYNAME
    from davcal.protocol import CalDAVProtocol

    protocol = CalDAVProtocol(headers={"Authorization": "Basic ..."})

    # Build a request (no I/O)
    request = protocol.propfind_request(
        "https://cal.example.com/calendars/user/",
        props=[DISPLAYNAME],
        depth=1,
    )

    # Execute via your preferred I/O (sync, async, or mock)
    response = your_http_client.execute(request)

    # Parse response (no I/O)
    entries = protocol.parse_propfind(response)
"""
from .types import (
    # Enums
    AccountType,
    DAVMethod,
    # Request/Response
    DAVRequest,
    DAVResponse,
    RequestHeaders,
    # Result types
    Account,
    Calendar,
    CalendarObject,
    MultistatusEntry,
    MultistatusResponse,
    SyncCollectionResult,
    TimeRange,
)
from .xml_builders import (
    build_calendar_multiget_body,
    build_calendar_query_body,
    build_mkcalendar_body,
    build_propfind_body,
    build_sync_collection_body,
)
from .xml_parsers import (
    parse_multistatus,
    parse_propfind_response,
    parse_report_response,
    parse_sync_collection_response,
)
from .operations import CalDAVProtocol

__all__ = [
    # Enums
    "AccountType",
    "DAVMethod",
    # Request/Response
    "DAVRequest",
    "DAVResponse",
    "RequestHeaders",
    # Result types
    "Account",
    "Calendar",
    "CalendarObject",
    "MultistatusEntry",
    "MultistatusResponse",
    "SyncCollectionResult",
    "TimeRange",
    # XML Builders
    "build_calendar_multiget_body",
    "build_calendar_query_body",
    "build_mkcalendar_body",
    "build_propfind_body",
    "build_sync_collection_body",
    # XML Parsers
    "parse_multistatus",
    "parse_propfind_response",
    "parse_report_response",
    "parse_sync_collection_response",
    # Protocol
    "CalDAVProtocol",
]
