"""
Non-blocking transport for AsyncCalDAVClient, on top of aiohttp.
"""
from typing import Optional

import aiohttp

from davcal.protocol.types import DAVRequest, DAVResponse


class AsyncIO:
    """
    Runs a DAVRequest over an aiohttp.ClientSession.  The session is
    opened lazily, on the first request, so the object can be built
    outside a running event loop.

    A session passed in by the caller is left open by close().
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.verify_ssl = verify_ssl

    def _open_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                connector=aiohttp.TCPConnector(ssl=self.verify_ssl),
            )
        return self._session

    async def execute(self, request: DAVRequest) -> DAVResponse:
        session = self._open_session()
        async with session.request(
            method=request.method.value,
            url=request.url,
            headers=request.headers,
            data=request.body,
            allow_redirects=request.follow_redirects,
        ) as r:
            return DAVResponse(
                status=r.status, headers=dict(r.headers), body=await r.read()
            )

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AsyncIO":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
