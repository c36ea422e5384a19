"""
Base utilities for the operations layer.

The operations layer contains pure functions (Sans-I/O) that turn
parsed multistatus entries into the typed results handed to the
caller.  No network I/O happens here.
"""
from __future__ import annotations

import logging
from typing import Iterable
from typing import List
from urllib.parse import urljoin

from davcal.lib.namespace import RESOURCETYPE
from davcal.protocol.types import MultistatusEntry

log = logging.getLogger("davcal")

CALENDAR_RESOURCE_TAG = "{urn:ietf:params:xml:ns:caldav}calendar"


def resolve_href(base_url: str, href: str) -> str:
    """
    Resolve an href from a response against the URL the request was
    sent to.  Servers send absolute paths, sometimes full URLs.
    """
    if not href:
        return base_url
    return urljoin(base_url, href)


def successful_entries(entries: Iterable[MultistatusEntry]) -> List[MultistatusEntry]:
    """
    Drops entries the server reported a failure for.  One resource
    failing does not invalidate the others.
    """
    ret = []
    for entry in entries:
        if entry.ok:
            ret.append(entry)
        else:
            log.debug("dropping %s, status %i", entry.href, entry.status)
    return ret


def extract_resource_type(entry: MultistatusEntry) -> List[str]:
    """
    Resource types of an entry, e.g.
    ['{DAV:}collection', '{urn:ietf:params:xml:ns:caldav}calendar']
    """
    rt = entry.get(RESOURCETYPE, [])
    if isinstance(rt, list):
        return rt
    return [rt]


def is_calendar_resource(entry: MultistatusEntry) -> bool:
    return CALENDAR_RESOURCE_TAG in extract_resource_type(entry)
