"""State cookie record and cookie header helpers.

The authorization state crosses the redirect round trip inside a single
cookie. :class:`StateCookie` is the payload record; :meth:`StateCookie.encode`
and :meth:`StateCookie.decode` convert it to and from the form-url-encoded
cookie value (``state=...&codeVerifier=...``).

:func:`build_set_cookie` renders the ``Set-Cookie`` header with
:class:`http.cookies.Morsel`, and :func:`read_cookie` extracts one cookie
from an incoming ``Cookie`` header with :class:`http.cookies.SimpleCookie`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone
from email.utils import format_datetime
from http.cookies import CookieError, Morsel, SimpleCookie
from typing import Optional
from urllib.parse import parse_qsl, urlencode

from github_strategy.models import CookieOptions


@dataclass(frozen=True)
class StateCookie:
    """Payload of the state cookie.

    Attributes:
        state: The state token embedded in the authorization URL.
        code_verifier: PKCE verifier, present only when the adapter uses PKCE.
    """

    state: str
    code_verifier: Optional[str] = None

    def encode(self) -> str:
        pairs = [("state", self.state)]
        if self.code_verifier is not None:
            pairs.append(("codeVerifier", self.code_verifier))
        return urlencode(pairs)

    @classmethod
    def decode(cls, value: str) -> Optional[StateCookie]:
        """Parse a cookie value, returning ``None`` when it has no ``state`` entry."""
        params = dict(parse_qsl(value, keep_blank_values=True))
        if "state" not in params:
            return None
        return cls(state=params["state"], code_verifier=params.get("codeVerifier"))


def build_set_cookie(options: CookieOptions, value: str) -> str:
    """Render a ``Set-Cookie`` header value for *value* with *options* attributes."""
    morsel: Morsel[str] = Morsel()
    # Form-encoded payloads only contain cookie-octets, so no quoting is needed.
    morsel.set(options.name, value, value)
    if options.http_only:
        morsel["httponly"] = True
    if options.max_age is not None:
        morsel["max-age"] = str(options.max_age)
    if options.path:
        morsel["path"] = options.path
    if options.same_site:
        morsel["samesite"] = options.same_site
    if options.secure:
        morsel["secure"] = True
    if options.domain:
        morsel["domain"] = options.domain
    if options.expires is not None:
        expires = options.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        morsel["expires"] = format_datetime(expires.astimezone(timezone.utc), usegmt=True)
    return morsel.OutputString()


def read_cookie(header: Optional[str], name: str) -> Optional[str]:
    """Return the value of cookie *name* from a ``Cookie`` request header.

    Quoted values are unquoted. Parsing stops at the first malformed pair,
    so cookies after it are not found, and an illegal cookie name yields
    ``None``.
    """
    if not header:
        return None
    cookie: SimpleCookie[str] = SimpleCookie()
    try:
        cookie.load(header)
    except CookieError:
        return None
    if name not in cookie:
        return None
    return cookie[name].value
