"""
What the clients expect from a transport.

Anything with an `execute` taking a DAVRequest and giving back a
DAVResponse will do, the test suite plugs in an in-memory server this
way.  HTTP error statuses come back as responses; only a failure to
reach the server raises.
"""
from typing import Protocol, runtime_checkable

from davcal.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class SyncIOProtocol(Protocol):
    """Blocking transport, see SyncIO"""

    def execute(self, request: DAVRequest) -> DAVResponse:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class AsyncIOProtocol(Protocol):
    """Asyncio transport, see AsyncIO"""

    async def execute(self, request: DAVRequest) -> DAVResponse:
        ...

    async def close(self) -> None:
        ...
