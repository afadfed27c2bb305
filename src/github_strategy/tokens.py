"""Token set returned by the GitHub token endpoint.

:class:`OAuth2Tokens` wraps the decoded JSON body of a successful
authorization-code or refresh-token grant and exposes typed accessors.
The strategy never persists tokens; ownership passes to the caller's
verify function.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional


def _parse_int(value: Any) -> Optional[int]:
    """Parse an integer field, returning ``None`` for anything unparsable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class OAuth2Tokens:
    """Accessors over a token endpoint response.

    Args:
        data: The decoded JSON token response. Must contain
            ``access_token`` and ``token_type``; the client validates
            this before constructing the object.
        issued_at: When the response was received. Defaults to now (UTC)
            and anchors :meth:`access_token_expires_at`.

    Example::

        tokens = await strategy.refresh_token(refresh_token)
        headers = {"Authorization": f"token {tokens.access_token()}"}
    """

    def __init__(self, data: dict[str, Any], issued_at: Optional[datetime] = None):
        self.data = data
        self.issued_at = issued_at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"OAuth2Tokens(token_type={self.token_type()!r}, scopes={self.scopes()!r})"

    def access_token(self) -> str:
        return self.data["access_token"]

    def token_type(self) -> str:
        return self.data["token_type"]

    def has_refresh_token(self) -> bool:
        return isinstance(self.data.get("refresh_token"), str)

    def refresh_token(self) -> Optional[str]:
        """Return the refresh token, or ``None`` when the app has expiring tokens disabled."""
        value = self.data.get("refresh_token")
        return value if isinstance(value, str) else None

    def access_token_expires_in_seconds(self) -> Optional[int]:
        return _parse_int(self.data.get("expires_in"))

    def access_token_expires_at(self) -> Optional[datetime]:
        expires_in = self.access_token_expires_in_seconds()
        if expires_in is None:
            return None
        return self.issued_at + timedelta(seconds=expires_in)

    def refresh_token_expires_in_seconds(self) -> Optional[int]:
        return _parse_int(self.data.get("refresh_token_expires_in"))

    def scopes(self) -> list[str]:
        """Scopes actually granted. GitHub separates them with commas."""
        value = self.data.get("scope")
        if not isinstance(value, str):
            return []
        return [scope for scope in value.replace(",", " ").split() if scope]
