#!/usr/bin/env python
import logging
import os
from typing import Optional

from davcal import __version__

## Environment variables prepended with "DAVCAL_" are used for debug
## purposes and connection parameters.
debug_dump_communication = bool(os.environ.get("DAVCAL_COMMDUMP", False))
## one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("DAVCAL_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("davcal")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)

INVALID_TIME_RANGE_MSG = "invalid timeRange format, not in ISO8601"


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status, r.reason, r.body.decode("utf-8", "replace"))


def weirdness(*reasons) -> None:
    from davcal.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class InvalidTimeRangeError(DAVError, ValueError):
    """
    A start or end instant given for a time-range query did not parse
    as ISO 8601.  Raised before any request is sent.
    """

    reason = INVALID_TIME_RANGE_MSG

    def __init__(self, reason: Optional[str] = None) -> None:
        super(InvalidTimeRangeError, self).__init__(reason=reason)
        self.args = (self.reason,)

    def __str__(self) -> str:
        return self.reason

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InvalidTimeRangeError) and str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))


class AuthorizationError(DAVError):
    """
    The server answered a discovery request with 401 or 403.  The url
    property will contain the url in question, the reason property
    will contain the excuse the server sent.
    """

    pass


class DiscoveryError(DAVError):
    """Principal or home collection of an account could not be found"""

    pass


class ResponseError(DAVError):
    pass


class MalformedResponseError(ResponseError):
    """The response body could not be parsed as a multistatus document"""

    pass
