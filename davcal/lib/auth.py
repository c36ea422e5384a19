"""
Authentication header helpers.

The library never authenticates by itself; whatever headers the caller
hands over are sent with every request.  These helpers build the usual
ones.
"""
from __future__ import annotations

import base64

from davcal.protocol.types import RequestHeaders


def basic_auth_headers(username: str, password: str) -> RequestHeaders:
    """
    Headers for HTTP Basic authentication.

    Example:
        >>> basic_auth_headers("user", "pass").authorization
        'Basic dXNlcjpwYXNz'
    """
    credentials = f"{username}:{password}".encode("utf-8")
    return RequestHeaders(
        authorization="Basic " + base64.b64encode(credentials).decode("ascii")
    )


def bearer_auth_headers(token: str) -> RequestHeaders:
    """Headers for bearer token (OAuth2) authentication."""
    return RequestHeaders(authorization=f"Bearer {token}")
