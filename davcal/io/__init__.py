"""
I/O layer for the CalDAV protocol.

This module provides sync and async implementations for executing
DAVRequest objects and returning DAVResponse objects.

The I/O layer is intentionally thin - it only handles HTTP transport.
All protocol logic (XML building/parsing) is in davcal.protocol.  HTTP
error statuses are returned as responses (check `ok`), only failures
to talk to the server at all raise.

Example (sync):
    from davcal.protocol import CalDAVProtocol
    from davcal.io import SyncIO

    protocol = CalDAVProtocol()
    with SyncIO() as io:
        request = protocol.propfind_request(url, [DISPLAYNAME])
        response = io.execute(request)
        entries = protocol.parse_propfind(response)
"""
from .base import AsyncIOProtocol, SyncIOProtocol
from .sync import SyncIO
from .async_ import AsyncIO

__all__ = [
    # Protocols
    "SyncIOProtocol",
    "AsyncIOProtocol",
    # Implementations
    "SyncIO",
    "AsyncIO",
]
