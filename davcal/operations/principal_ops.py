"""
Principal operations - Sans-I/O business logic for account discovery.

This module contains pure functions for picking principal and home
URLs and calendar user addresses out of PROPFIND results.
"""
from __future__ import annotations

from typing import Any
from typing import Iterable
from typing import List
from typing import Optional
from urllib.parse import quote

from lxml.etree import _Element

from davcal.elements import dav
from davcal.lib.namespace import CALENDAR_USER_ADDRESS_SET
from davcal.lib.namespace import Property
from davcal.operations.base import successful_entries
from davcal.protocol.types import MultistatusEntry


def sanitize_home_set_url(url: Optional[str]) -> Optional[str]:
    """
    Sanitize calendar home set URL, handling server quirks.

    OwnCloud returns URLs like /remote.php/dav/calendars/tobixen@e.email/
    where the @ should be quoted. Some servers return already-quoted URLs.

    Args:
        url: Calendar home set URL from server

    Returns:
        Sanitized URL with @ properly quoted (if not already)
    """
    if url is None:
        return None

    # Don't double-quote if already quoted
    if "@" in url and "://" not in url and "%40" not in url:
        return quote(url)

    return url


def find_href_property(
    entries: Iterable[MultistatusEntry], prop: Property
) -> Optional[str]:
    """
    The href value of a property like current-user-principal or
    calendar-home-set from a depth 0 PROPFIND.
    """
    for entry in successful_entries(entries):
        value = entry.get(prop)
        if isinstance(value, str):
            return value
    return None


def sort_calendar_user_addresses(addresses: List[Any]) -> List[Any]:
    """
    Sort calendar user addresses by preference.

    The 'preferred' attribute is possibly iCloud-specific but we honor
    it when present.

    Args:
        addresses: List of DAV:href elements

    Returns:
        Sorted list (highest preference first)
    """
    return sorted(addresses, key=lambda x: -_preference(x.get("preferred")))


def _preference(value: Optional[str]) -> int:
    ## seen in the wild: "1", "0", "true", "false"
    if value is None:
        return 0
    value = value.strip().lower()
    if value == "true":
        return 1
    try:
        return int(value)
    except ValueError:
        return 0


def extract_calendar_user_addresses(addresses: List[Any]) -> List[str]:
    """
    Extract calendar user address strings from XML elements.

    Args:
        addresses: List of DAV:href elements

    Returns:
        List of address strings (sorted by preference)
    """
    sorted_addresses = sort_calendar_user_addresses(addresses)
    return [x.text.strip() for x in sorted_addresses if x.text and x.text.strip()]


def process_calendar_user_addresses(entries: Iterable[MultistatusEntry]) -> List[str]:
    """Calendar user addresses from a depth 0 PROPFIND on the principal"""
    addresses: List[str] = []
    for entry in successful_entries(entries):
        value = entry.get(CALENDAR_USER_ADDRESS_SET)
        if isinstance(value, _Element):
            hrefs = [x for x in value if x.tag == dav.Href.tag]
            addresses.extend(extract_calendar_user_addresses(hrefs))
        elif isinstance(value, str):
            ## no DAV:href wrapper, seen on some servers
            addresses.append(value.strip())
    return addresses
