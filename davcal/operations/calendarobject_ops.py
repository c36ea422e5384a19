"""
CalendarObject operations - Sans-I/O mapping of REPORT results.

These functions turn parsed multistatus entries into CalendarObjects and
build URLs for new objects.
"""
from __future__ import annotations

import uuid
from typing import Callable
from typing import Iterable
from typing import List
from typing import Optional
from urllib.parse import quote

from davcal.lib.namespace import CALENDAR_DATA
from davcal.lib.namespace import GETETAG
from davcal.operations.base import resolve_href
from davcal.operations.base import successful_entries
from davcal.protocol.types import CalendarObject
from davcal.protocol.types import MultistatusEntry
from davcal.protocol.types import MultistatusResponse
from davcal.protocol.types import SyncCollectionResult


def generate_uid() -> str:
    """Generate a new UID for a calendar object."""
    return str(uuid.uuid1())


def generate_url(parent_url: str, uid: str) -> str:
    """
    Generate a URL for a new calendar object from its UID.

    Handles special characters in the UID by proper quoting.
    """
    if not parent_url.endswith("/"):
        parent_url += "/"
    return parent_url + quote(uid.replace("/", "%2F")) + ".ics"


def to_calendar_object(entry: MultistatusEntry, base_url: str) -> CalendarObject:
    """
    A CalendarObject out of a multiget or calendar-query entry.  Missing
    calendar-data gives empty data, a missing etag gives None.
    """
    return CalendarObject(
        url=resolve_href(base_url, entry.href),
        etag=entry.get(GETETAG),
        data=entry.get(CALENDAR_DATA) or "",
    )


def process_report_results(
    entries: Iterable[MultistatusEntry],
    base_url: str,
    url_filter: Optional[Callable[[str], bool]] = None,
) -> List[CalendarObject]:
    """
    Map calendar-query / calendar-multiget results to CalendarObjects.

    Entries with a failure status are dropped.  The collection itself
    sometimes shows up among the results, it is skipped as well.

    Args:
        entries: Parsed multistatus entries
        base_url: URL the REPORT was sent to
        url_filter: If given, only objects whose URL it accepts are kept
    """
    objects = []
    for entry in successful_entries(entries):
        obj = to_calendar_object(entry, base_url)
        if obj.url.rstrip("/") == base_url.rstrip("/"):
            continue
        if url_filter is not None and not url_filter(obj.url):
            continue
        objects.append(obj)
    return objects


def process_sync_collection_response(
    result: MultistatusResponse,
    base_url: str,
) -> SyncCollectionResult:
    """Split a sync-collection answer into changed and deleted objects"""
    changed = []
    deleted = []
    for entry in result.responses:
        if entry.status == 404:
            deleted.append(resolve_href(base_url, entry.href))
    for obj in process_report_results(result.responses, base_url):
        changed.append(obj)
    return SyncCollectionResult(
        changed=changed, deleted=deleted, sync_token=result.sync_token
    )
