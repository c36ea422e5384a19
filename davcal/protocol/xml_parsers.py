"""
Pure functions for parsing CalDAV XML responses.

All functions in this module are pure - they take XML bytes in and return
structured data out, with no side effects or I/O.

Each DAV:response in a multistatus body is parsed independently.  A
resource reported with a failure status, or with some of the requested
properties missing, never prevents its siblings from being parsed.
"""
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from lxml import etree
from lxml.etree import _Element

from davcal.elements import cdav
from davcal.elements import dav
from davcal.lib import error
from davcal.lib.namespace import ADDRESSBOOK_HOME_SET
from davcal.lib.namespace import CALENDAR_HOME_SET
from davcal.lib.namespace import CURRENT_USER_PRINCIPAL
from davcal.lib.namespace import Property

from .types import MultistatusEntry
from .types import MultistatusResponse

log = logging.getLogger("davcal")

## properties wrapping a single DAV:href
_SINGLE_HREF_TAGS = {
    CURRENT_USER_PRINCIPAL.tag,
    CALENDAR_HOME_SET.tag,
    ADDRESSBOOK_HOME_SET.tag,
}


def parse_multistatus(
    body: bytes,
    huge_tree: bool = False,
) -> MultistatusResponse:
    """
    Parse a 207 Multi-Status response body.

    Args:
        body: Raw XML response bytes
        huge_tree: Allow parsing very large XML documents

    Returns:
        Structured MultistatusResponse with one entry per DAV:response

    Raises:
        MalformedResponseError: If body is not a multistatus XML document
    """
    parser = etree.XMLParser(huge_tree=huge_tree)
    try:
        tree = etree.fromstring(body, parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise error.MalformedResponseError(reason=f"unparseable XML: {e}")

    responses: List[MultistatusEntry] = []
    sync_token: Optional[str] = None

    for elem in _strip_to_multistatus(tree):
        if elem.tag == dav.SyncToken.tag:
            sync_token = elem.text
            continue

        if elem.tag != dav.Response.tag:
            continue

        href, propstats, status = _parse_response_element(elem)
        responses.append(
            MultistatusEntry(
                href=href,
                status=_status_to_code(status) if status else 200,
                properties=_extract_properties(propstats),
            )
        )

    return MultistatusResponse(responses=responses, sync_token=sync_token)


def parse_propfind_response(
    body: bytes,
    status_code: int = 207,
    huge_tree: bool = False,
) -> List[MultistatusEntry]:
    """
    Parse a PROPFIND response.

    Args:
        body: Raw XML response bytes
        status_code: HTTP status code of the response
        huge_tree: Allow parsing very large XML documents

    Returns:
        List of MultistatusEntry with properties for each resource
    """
    if status_code == 404:
        return []

    if not 200 <= status_code < 300:
        raise error.ResponseError(reason=f"PROPFIND failed with status {status_code}")

    ## 204 and friends carry no multistatus
    if status_code not in (200, 207) or not body:
        return []

    return parse_multistatus(body, huge_tree=huge_tree).responses


def parse_report_response(
    body: bytes,
    status_code: int = 207,
    huge_tree: bool = False,
) -> List[MultistatusEntry]:
    """
    Parse a calendar-query or calendar-multiget REPORT response.  Both
    come back in the same format.

    Args:
        body: Raw XML response bytes
        status_code: HTTP status code of the response
        huge_tree: Allow parsing very large XML documents

    Returns:
        List of MultistatusEntry, typically with getetag and calendar-data
    """
    if not 200 <= status_code < 300:
        raise error.ResponseError(reason=f"REPORT failed with status {status_code}")

    if status_code not in (200, 207) or not body:
        return []

    return parse_multistatus(body, huge_tree=huge_tree).responses


def parse_sync_collection_response(
    body: bytes,
    status_code: int = 207,
    huge_tree: bool = False,
) -> MultistatusResponse:
    """
    Parse a sync-collection REPORT response.  Deleted resources come
    back as entries with status 404.
    """
    if not 200 <= status_code < 300:
        raise error.ResponseError(
            reason=f"sync-collection failed with status {status_code}"
        )

    if status_code not in (200, 207) or not body:
        return MultistatusResponse()

    return parse_multistatus(body, huge_tree=huge_tree)


# Helper functions


def _strip_to_multistatus(tree: _Element) -> Union[_Element, List[_Element]]:
    """
    Strip outer elements to get to the multistatus content.

    The general format is:
        <xml><multistatus>
            <response>...</response>
            <response>...</response>
        </multistatus></xml>

    But sometimes multistatus and/or xml element is missing.
    Returns the element(s) containing responses.
    """
    if tree.tag == "xml" and len(tree) > 0 and tree[0].tag == dav.MultiStatus.tag:
        return tree[0]
    if tree.tag == dav.MultiStatus.tag:
        return tree
    if tree.tag == dav.Response.tag:
        error.weirdness("response element without a multistatus wrapper", tree)
        return [tree]
    raise error.MalformedResponseError(
        reason=f"expected a multistatus document, got {tree.tag}"
    )


def _parse_response_element(
    response: _Element,
) -> Tuple[str, List[_Element], Optional[str]]:
    """
    Parse a single DAV:response element.

    Returns:
        Tuple of (href, propstat elements list, status string)
    """
    status: Optional[str] = None
    href: Optional[str] = None
    propstats: List[_Element] = []

    for elem in response:
        if elem.tag == dav.Status.tag:
            status = elem.text
        elif elem.tag == dav.Href.tag:
            text = (elem.text or "").strip()
            # Fix for double-encoded URLs (e.g., Confluence)
            if "%2540" in text:
                text = text.replace("%2540", "%40")
            href = text
        elif elem.tag == dav.PropStat.tag:
            propstats.append(elem)

    return (href or "", propstats, status)


def _propstat_code(propstat: _Element) -> int:
    status_elem = propstat.find(dav.Status.tag)
    if status_elem is None:
        return 200
    return _status_to_code(status_elem.text)


def _extract_properties(propstats: List[_Element]) -> Dict[Property, Any]:
    """
    Extract properties from the successful propstat elements.

    Properties in a non-2xx propstat (typically 404, the server does
    not have it) are left out, as are elements outside the known
    namespaces.  Empty elements map to None.
    """
    properties: Dict[Property, Any] = {}

    for propstat in propstats:
        code = _propstat_code(propstat)
        if not 200 <= code < 300:
            continue

        prop = propstat.find(dav.Prop.tag)
        if prop is None:
            continue

        for child in prop:
            if not isinstance(child.tag, str):
                ## comments and processing instructions
                continue
            key = Property.from_tag(child.tag)
            if key is None:
                log.debug("ignoring property %s in unknown namespace", child.tag)
                continue
            properties[key] = _element_to_value(child)

    return properties


def _element_to_value(elem: _Element) -> Any:
    """
    Convert a property element to a Python value.

    For simple elements, returns the text content, or None if there is
    none (<x/> and <x></x> are the same thing).  Known complex
    properties are flattened, other complex values are returned as the
    lxml element itself.
    """
    tag = elem.tag

    if tag == dav.ResourceType.tag:
        return [child.tag for child in elem if isinstance(child.tag, str)]

    if tag == cdav.SupportedCalendarComponentSet.tag:
        return [child.get("name") for child in elem if child.get("name")]

    if tag in _SINGLE_HREF_TAGS:
        for child in elem:
            if child.tag == dav.Href.tag and child.text and child.text.strip():
                return child.text.strip()
        return None

    if len(elem) == 0:
        if elem.text is None or not elem.text.strip():
            return None
        return elem.text

    return elem


def _status_to_code(status: Optional[str]) -> int:
    """
    Extract status code from status string like "HTTP/1.1 200 OK".

    Args:
        status: Status string

    Returns:
        Integer status code (defaults to 200 if parsing fails)
    """
    if not status:
        return 200

    parts = status.split()
    if len(parts) >= 2:
        try:
            return int(parts[1])
        except ValueError:
            pass

    error.weirdness(f"unparseable status line {status}")
    return 200
