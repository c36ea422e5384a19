"""
Blocking transport for SyncCalDAVClient, on top of requests.
"""
from typing import Optional

import requests

from davcal.protocol.types import DAVRequest, DAVResponse


class SyncIO:
    """
    Runs a DAVRequest over a requests.Session.  HTTP error statuses come
    back as plain DAVResponse objects; only connection level problems
    raise (requests.RequestException and friends).

    A session passed in by the caller is left open by close().
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ):
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

    def execute(self, request: DAVRequest) -> DAVResponse:
        ## service discovery turns redirects off to read the Location header
        r = self.session.request(
            method=request.method.value,
            url=request.url,
            headers=request.headers,
            data=request.body,
            timeout=self.timeout,
            verify=self.verify,
            allow_redirects=request.follow_redirects,
        )
        return DAVResponse(status=r.status_code, headers=dict(r.headers), body=r.content)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        return self

    def __exit__(self, *args) -> None:
        self.close()
