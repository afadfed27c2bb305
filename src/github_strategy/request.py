"""Outbound request builder for the GitHub REST API.

:class:`RequestContext` collects the method, headers, and optional JSON body
for a GitHub API call and turns them into an :class:`httpx.Request`. The
profile and email fetchers share it so that every call carries the same
``Accept``, ``User-Agent`` and ``Authorization`` headers.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from github_strategy.exceptions import TransportError

GITHUB_ACCEPT = "application/vnd.github.v3+json"

_BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class RequestContext:
    """Headers and body for one GitHub API request.

    Args:
        method: HTTP method, e.g. ``"GET"``.
        user_agent: Value for the ``User-Agent`` header (GitHub rejects
            requests without one).

    Example::

        context = RequestContext("GET", "my-app")
        context.authorize(tokens.access_token())
        request = context.to_request("https://api.github.com/user")
    """

    def __init__(self, method: str, user_agent: str) -> None:
        self.method = method.upper()
        self.body: dict[str, Any] = {}
        self.headers = httpx.Headers(
            {
                "Content-Type": "application/json",
                "Accept": GITHUB_ACCEPT,
                "User-Agent": user_agent,
            }
        )

    def authorize(self, token: str) -> None:
        self.headers["Authorization"] = f"token {token}"

    def to_request(self, url: str | httpx.URL) -> httpx.Request:
        """Build the :class:`httpx.Request`. GET and HEAD requests never carry a body."""
        content = None
        if self.method not in _BODYLESS_METHODS:
            content = json.dumps(self.body).encode("utf-8")
        return httpx.Request(self.method, url, headers=self.headers, content=content)


async def send(
    request: httpx.Request,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> httpx.Response:
    """Send *request*, mapping network failures to :class:`TransportError`.

    Args:
        request: The request to send.
        client: Shared client to send through. When ``None`` a short-lived
            client is opened for this call.
        timeout: Per-call timeout in seconds, overriding the client's.

    Raises:
        TransportError: On timeout, DNS failure, or refused connection.
    """
    if timeout is not None:
        request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()
    try:
        if client is not None:
            return await client.send(request)
        async with httpx.AsyncClient() as owned:
            return await owned.send(request)
    except httpx.TransportError as exc:
        raise TransportError(f"Request to {request.url} failed: {exc}") from exc
