"""github_strategy -- log users in with GitHub using the OAuth2 authorization-code flow.

The package implements one authentication strategy for host frameworks that
work with :class:`httpx.Request` / :class:`httpx.Response` primitives. A
request without OAuth callback parameters produces a redirect to GitHub
with a short-lived state cookie; GitHub's callback is checked against that
cookie, the code is exchanged for tokens, and the caller's verify function
turns the tokens into a user.

Typical usage::

    from github_strategy import GitHubStrategy, Redirect, Authenticated, Failed

    strategy = GitHubStrategy(options_from_env(), verify)
    outcome = await strategy.authenticate(request)

Modules:
    strategy: The authorization-code state machine and :class:`GitHubStrategy`.
    client: OAuth2 adapter for GitHub's authorize and token endpoints.
    profile / emails: GitHub ``/user`` and ``/user/emails`` lookups.
    models: Pydantic models for options and provider data.
    exceptions: Error hierarchy with a ``kind`` per failure.
    config: Options from environment variables or JSON files.
    log: Opt-in Rich logging.
"""

import logging

from github_strategy.adapter import OAuth2Adapter
from github_strategy.client import GitHubOAuth2Client
from github_strategy.config import load_options, options_from_env
from github_strategy.emails import normalize_emails
from github_strategy.exceptions import (
    ConfigError,
    MissingCodeError,
    MissingStateError,
    ProfileFetchError,
    ProviderAuthorizationError,
    RedirectRequired,
    StateMismatchError,
    StrategyError,
    TokenExchangeError,
    TransportError,
)
from github_strategy.models import CookieOptions, Email, Profile, StrategyOptions
from github_strategy.outcome import Authenticated, Failed, Outcome, Redirect
from github_strategy.strategy import AuthorizationCodeFlow, GitHubStrategy, VerifyOptions
from github_strategy.tokens import OAuth2Tokens

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Authenticated",
    "AuthorizationCodeFlow",
    "ConfigError",
    "CookieOptions",
    "Email",
    "Failed",
    "GitHubOAuth2Client",
    "GitHubStrategy",
    "MissingCodeError",
    "MissingStateError",
    "OAuth2Adapter",
    "OAuth2Tokens",
    "Outcome",
    "Profile",
    "ProfileFetchError",
    "ProviderAuthorizationError",
    "Redirect",
    "RedirectRequired",
    "StateMismatchError",
    "StrategyError",
    "StrategyOptions",
    "TokenExchangeError",
    "TransportError",
    "VerifyOptions",
    "load_options",
    "normalize_emails",
    "options_from_env",
]
