#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .protocol import Account
from .protocol import AccountType
from .protocol import Calendar
from .protocol import CalendarObject
from .protocol import DAVRequest
from .protocol import DAVResponse
from .protocol import RequestHeaders
from .protocol import SyncCollectionResult
from .protocol import TimeRange
from .client import AsyncCalDAVClient
from .client import SyncCalDAVClient
from .lib.auth import basic_auth_headers
from .lib.auth import bearer_auth_headers
from .lib.error import InvalidTimeRangeError

# Silence notification of no default logging handler
log = logging.getLogger("davcal")
log.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Account",
    "AccountType",
    "AsyncCalDAVClient",
    "Calendar",
    "CalendarObject",
    "DAVRequest",
    "DAVResponse",
    "InvalidTimeRangeError",
    "RequestHeaders",
    "SyncCalDAVClient",
    "SyncCollectionResult",
    "TimeRange",
    "basic_auth_headers",
    "bearer_auth_headers",
]
