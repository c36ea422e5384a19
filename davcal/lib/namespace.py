#!/usr/bin/env python
from dataclasses import dataclass
from enum import Enum
from typing import Dict
from typing import Optional


class DAVNamespace(Enum):
    """
    The XML namespaces a request body may use.  Each member carries
    the canonical namespace URI and the prefix we always serialize it
    with.
    """

    DAV = ("DAV:", "D")
    CALDAV = ("urn:ietf:params:xml:ns:caldav", "C")
    CARDDAV = ("urn:ietf:params:xml:ns:carddav", "CARD")
    CALENDARSERVER = ("http://calendarserver.org/ns/", "CS")
    ## Apple's ical namespace.  Undocumented, but widely supported for
    ## calendar-color and calendar-order.
    ICAL = ("http://apple.com/ns/ical/", "I")

    def __init__(self, uri: str, prefix: str) -> None:
        self.uri = uri
        self.prefix = prefix

    @classmethod
    def from_uri(cls, uri: str) -> Optional["DAVNamespace"]:
        for namespace in cls:
            if namespace.uri == uri:
                return namespace
        return None


nsmap: Dict[str, str] = {x.prefix: x.uri for x in DAVNamespace}


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name


@dataclass(frozen=True)
class Property:
    """A WebDAV property, identified by local name and namespace"""

    name: str
    namespace: DAVNamespace = DAVNamespace.DAV

    @property
    def tag(self) -> str:
        """The property in lxml's Clark notation, i.e. {DAV:}getetag"""
        return "{%s}%s" % (self.namespace.uri, self.name)

    @classmethod
    def from_tag(cls, tag: str) -> Optional["Property"]:
        """
        Reverse of `tag`.  Returns None for elements outside the known
        namespaces, those can't be expressed as a Property.
        """
        if not tag.startswith("{"):
            return None
        uri, _, name = tag[1:].partition("}")
        namespace = DAVNamespace.from_uri(uri)
        if namespace is None:
            return None
        return cls(name, namespace)

    def __str__(self) -> str:
        return "%s:%s" % (self.namespace.prefix, self.name)


## Properties used throughout the library
DISPLAYNAME = Property("displayname", DAVNamespace.DAV)
RESOURCETYPE = Property("resourcetype", DAVNamespace.DAV)
GETETAG = Property("getetag", DAVNamespace.DAV)
SYNC_TOKEN = Property("sync-token", DAVNamespace.DAV)
CURRENT_USER_PRINCIPAL = Property("current-user-principal", DAVNamespace.DAV)
CALENDAR_DATA = Property("calendar-data", DAVNamespace.CALDAV)
CALENDAR_DESCRIPTION = Property("calendar-description", DAVNamespace.CALDAV)
CALENDAR_TIMEZONE = Property("calendar-timezone", DAVNamespace.CALDAV)
CALENDAR_HOME_SET = Property("calendar-home-set", DAVNamespace.CALDAV)
CALENDAR_USER_ADDRESS_SET = Property("calendar-user-address-set", DAVNamespace.CALDAV)
SUPPORTED_CALENDAR_COMPONENT_SET = Property(
    "supported-calendar-component-set", DAVNamespace.CALDAV
)
ADDRESSBOOK_HOME_SET = Property("addressbook-home-set", DAVNamespace.CARDDAV)
GETCTAG = Property("getctag", DAVNamespace.CALENDARSERVER)
CALENDAR_COLOR = Property("calendar-color", DAVNamespace.ICAL)
