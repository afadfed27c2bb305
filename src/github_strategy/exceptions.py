"""Exception hierarchy for github_strategy.

All failures raised by the strategy inherit from :class:`StrategyError`,
which carries a class-level ``kind`` string identifying the failure
category. Hosts can branch on ``error.kind`` (or on the class) without
parsing messages. :meth:`~github_strategy.strategy.AuthorizationCodeFlow.authenticate`
catches ``StrategyError`` and wraps it in a
:class:`~github_strategy.outcome.Failed` outcome.

Subclass hierarchy::

    StrategyError                 (kind "strategy_error")
    +-- ProviderAuthorizationError (kind "provider_authorization")
    +-- MissingStateError          (kind "missing_state")
    +-- StateMismatchError         (kind "state_mismatch")
    +-- MissingCodeError           (kind "missing_code")
    +-- TokenExchangeError         (kind "token_exchange")
    +-- TransportError             (kind "transport")
    +-- ProfileFetchError          (kind "profile_fetch")
    +-- ConfigError                (kind "config")

:class:`RedirectRequired` is not a failure. It is raised only by
:meth:`~github_strategy.outcome.Redirect.unwrap` for hosts that prefer
exception-based control flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    import httpx


class StrategyError(Exception):
    """Base exception for all strategy failures.

    Args:
        message: Human-readable error description.
    """

    kind: str = "strategy_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderAuthorizationError(StrategyError):
    """GitHub redirected back with an ``error`` query parameter.

    Args:
        code: The OAuth error code (e.g. ``"access_denied"``).
        description: Value of ``error_description``, if any.
        uri: Value of ``error_uri``, if any.
        state: The ``state`` query parameter, if any.
    """

    kind = "provider_authorization"

    def __init__(
        self,
        code: str,
        description: Optional[str] = None,
        uri: Optional[str] = None,
        state: Optional[str] = None,
    ):
        message = f"Authorization failed: {code}"
        if description:
            message += f" - {description}"
        super().__init__(message)
        self.code = code
        self.description = description
        self.uri = uri
        self.state = state


class MissingStateError(StrategyError):
    """The callback arrived without a usable state cookie."""

    kind = "missing_state"


class StateMismatchError(StrategyError):
    """The state in the callback URL differs from the one in the cookie."""

    kind = "state_mismatch"


class MissingCodeError(StrategyError):
    """The callback carried a state but no authorization code."""

    kind = "missing_code"


class TokenExchangeError(StrategyError):
    """The token endpoint rejected the grant or returned malformed data.

    ``code``, ``description`` and ``uri`` are populated when GitHub
    reported an OAuth error (e.g. ``bad_verification_code``).
    """

    kind = "token_exchange"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        description: Optional[str] = None,
        uri: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.description = description
        self.uri = uri


class TransportError(StrategyError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    kind = "transport"


class ProfileFetchError(StrategyError):
    """Raised when the user-info endpoint fails or returns an unexpected shape."""

    kind = "profile_fetch"


class ConfigError(StrategyError):
    """Raised for configuration problems (missing variables, invalid values, unreadable files)."""

    kind = "config"


class RedirectRequired(Exception):
    """Control-flow signal carrying the redirect response to send to the browser.

    Args:
        response: The ``302`` response with ``Location`` and ``Set-Cookie``.
    """

    def __init__(self, response: httpx.Response):
        super().__init__(f"Redirect to {response.headers.get('Location')}")
        self.response = response
