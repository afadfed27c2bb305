"""The OAuth2 authorization-code flow and the GitHub strategy built on it.

:class:`AuthorizationCodeFlow` is the provider-agnostic state machine. A
single call to :meth:`~AuthorizationCodeFlow.authenticate` handles one leg of
the round trip:

1. **No** ``state`` **in the URL** -- generate a state token (and a PKCE
   verifier when the adapter asks for one), store it in the state cookie,
   and return a :class:`~github_strategy.outcome.Redirect` to the
   provider's authorization URL.
2. ``state`` **in the URL** (the provider's callback) -- require a ``code``,
   check the state against the cookie, exchange the code through the
   adapter, and hand ``{request, tokens}`` to the caller's verify function.

An ``error`` parameter in the URL short-circuits both branches.

:class:`GitHubStrategy` wires the flow to
:class:`~github_strategy.client.GitHubOAuth2Client` from a
:class:`~github_strategy.models.StrategyOptions` and adds profile and email
lookups for use inside the verify function.
"""

from __future__ import annotations

import inspect
import logging
import secrets
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, Sequence, Union

import httpx
from pydantic import ValidationError

from github_strategy.adapter import OAuth2Adapter
from github_strategy.client import GitHubOAuth2Client
from github_strategy.cookies import StateCookie, build_set_cookie, read_cookie
from github_strategy.emails import fetch_emails
from github_strategy.exceptions import (
    ConfigError,
    MissingCodeError,
    MissingStateError,
    ProviderAuthorizationError,
    StateMismatchError,
    StrategyError,
)
from github_strategy.models import CookieOptions, Email, Profile, StrategyOptions
from github_strategy.outcome import Authenticated, Failed, Outcome, Redirect, User
from github_strategy.pkce import generate_code_verifier, generate_state
from github_strategy.profile import fetch_profile
from github_strategy.request import RequestContext
from github_strategy.tokens import OAuth2Tokens


@dataclass(frozen=True)
class VerifyOptions:
    """Arguments passed to the verify function.

    Attributes:
        request: The callback request that completed the flow.
        tokens: The tokens obtained from the code exchange.
    """

    request: httpx.Request
    tokens: OAuth2Tokens


VerifyFunction = Callable[[VerifyOptions], Union[User, Awaitable[User]]]
AuthorizationParamsHook = Callable[[dict[str, str], httpx.Request], Mapping[str, str]]


class AuthorizationCodeFlow(Generic[User]):
    """Provider-agnostic OAuth2 authorization-code state machine.

    Holds no per-request state, so one instance can serve concurrent
    requests.

    Args:
        adapter: The provider adapter.
        verify: Called with :class:`VerifyOptions` once tokens are
            obtained. May be a plain function or a coroutine function.
        scopes: Scopes requested in the authorization URL.
        cookie: Name and attributes of the state cookie.
        authorization_params: Optional hook receiving the final query
            parameters and the incoming request, returning the parameters
            to use. Subclasses may override :meth:`authorization_params`
            instead.
        logger: Logger for flow diagnostics. Defaults to this module's
            logger, which is silent unless the host configures logging.
    """

    def __init__(
        self,
        adapter: OAuth2Adapter,
        verify: VerifyFunction,
        *,
        scopes: Sequence[str] = (),
        cookie: Optional[CookieOptions] = None,
        authorization_params: Optional[AuthorizationParamsHook] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.adapter = adapter
        self.verify = verify
        self.scopes = tuple(scopes)
        self.cookie = cookie or CookieOptions()
        self._authorization_params_hook = authorization_params
        self._logger = logger or logging.getLogger(__name__)

    async def authenticate(
        self,
        request: httpx.Request,
        *,
        timeout: Optional[float] = None,
    ) -> Outcome[User]:
        """Run one step of the flow for *request*.

        Args:
            request: The incoming request, either the initial login request
                or GitHub's redirect back to the application.
            timeout: Per-call timeout in seconds for the token exchange.

        Returns:
            :class:`~github_strategy.outcome.Redirect` when the user must be
            sent to the provider, :class:`~github_strategy.outcome.Authenticated`
            with the verify function's result, or
            :class:`~github_strategy.outcome.Failed` when any
            :class:`~github_strategy.exceptions.StrategyError` was raised,
            including one raised from the verify function. Other exceptions
            from the verify function propagate unchanged.
        """
        self._logger.debug("Authenticating request to %s", request.url.path)
        try:
            return await self._authenticate(request, timeout)
        except StrategyError as exc:
            self._logger.debug("Authentication failed (%s): %s", exc.kind, exc)
            return Failed(exc)

    async def _authenticate(
        self,
        request: httpx.Request,
        timeout: Optional[float],
    ) -> Outcome[User]:
        params = request.url.params
        url_state = params.get("state")
        error = params.get("error")

        if error:
            raise ProviderAuthorizationError(
                error,
                description=params.get("error_description"),
                uri=params.get("error_uri"),
                state=url_state,
            )

        if not url_state:
            self._logger.debug("No state found in the URL, redirecting to authorization endpoint")
            return self._redirect(request)

        code = params.get("code")
        if not code:
            raise MissingCodeError("Missing code in the URL")

        cookie_value = read_cookie(request.headers.get("cookie"), self.cookie.name)
        stored = StateCookie.decode(cookie_value) if cookie_value is not None else None
        if stored is None:
            raise MissingStateError("Missing state on cookie")

        if not secrets.compare_digest(stored.state.encode("utf-8"), url_state.encode("utf-8")):
            raise StateMismatchError("State in URL doesn't match state in cookie")

        self._logger.debug("Validating authorization code")
        tokens = await self.adapter.validate_authorization_code(
            code, stored.code_verifier, timeout=timeout
        )

        self._logger.debug("Verifying the user profile")
        user = self.verify(VerifyOptions(request=request, tokens=tokens))
        if inspect.isawaitable(user):
            user = await user

        self._logger.debug("User authenticated")
        return Authenticated(user)

    def _redirect(self, request: httpx.Request) -> Redirect:
        state = generate_state()
        code_verifier = generate_code_verifier() if self.adapter.uses_pkce else None

        url = httpx.URL(
            self.adapter.create_authorization_url(state, self.scopes, code_verifier)
        )
        query = dict(url.params)
        query.update(self.adapter.authorization_params())
        query = dict(self.authorization_params(query, request))
        location = str(url.copy_with(params=query))
        self._logger.debug("Authorization URL host: %s", url.host)

        set_cookie = build_set_cookie(
            self.cookie, StateCookie(state=state, code_verifier=code_verifier).encode()
        )
        response = httpx.Response(
            302,
            headers=[("Location", location), ("Set-Cookie", set_cookie)],
            request=request,
        )
        return Redirect(response)

    def authorization_params(
        self,
        params: dict[str, str],
        request: httpx.Request,
    ) -> Mapping[str, str]:
        """Return the query parameters for the authorization URL.

        Some providers accept non-standard parameters when requesting
        authorization. Override this (or pass ``authorization_params`` to
        the constructor) to add, change, or remove parameters based on the
        incoming request. The default applies the constructor hook, if any.
        """
        if self._authorization_params_hook is None:
            return params
        return self._authorization_params_hook(params, request)

    async def refresh_token(
        self,
        refresh_token: str,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        """Get a new token set from a refresh token once the access token expired.

        Raises:
            TokenExchangeError: If the refresh token is invalid or expired.
            TransportError: If the provider cannot be reached.
        """
        return await self.adapter.refresh_access_token(refresh_token, timeout=timeout)


class GitHubStrategy(Generic[User]):
    """Log users in with GitHub.

    Args:
        options: A :class:`~github_strategy.models.StrategyOptions`, or a
            mapping validated into one.
        verify: Called with :class:`VerifyOptions` after the code exchange;
            its return value becomes the authenticated user.
        authorization_params: Optional hook to change the authorization
            URL query per request.
        use_pkce: Send a PKCE challenge with the authorization request.
        http_client: Optional shared :class:`httpx.AsyncClient` for every
            call to GitHub.
        logger: Logger for flow diagnostics.

    Raises:
        ConfigError: If *options* is a mapping that fails validation.

    Example::

        async def verify(options: VerifyOptions) -> User:
            profile = await strategy.user_profile(options.tokens)
            return await users.upsert(profile)

        strategy = GitHubStrategy(
            {"client_id": "...", "client_secret": "...",
             "redirect_uri": "https://example.app/auth/github/callback"},
            verify,
        )
    """

    name = "github"

    def __init__(
        self,
        options: Union[StrategyOptions, Mapping[str, Any]],
        verify: VerifyFunction,
        *,
        authorization_params: Optional[AuthorizationParamsHook] = None,
        use_pkce: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not isinstance(options, StrategyOptions):
            try:
                options = StrategyOptions.model_validate(options)
            except ValidationError as exc:
                raise ConfigError(f"Invalid GitHub strategy options: {exc}") from exc
        self.options = options
        self._http_client = http_client
        self.client = GitHubOAuth2Client(
            options.client_id,
            options.client_secret,
            options.redirect_uri,
            authorization_endpoint=options.authorization_endpoint,
            token_endpoint=options.token_endpoint,
            allow_signup=options.allow_signup,
            use_pkce=use_pkce,
            user_agent=options.user_agent,
            http_client=http_client,
        )
        self.flow: AuthorizationCodeFlow[User] = AuthorizationCodeFlow(
            self.client,
            verify,
            scopes=options.scopes,
            cookie=options.cookie,
            authorization_params=authorization_params,
            logger=logger,
        )

    @property
    def cookie_name(self) -> str:
        return self.options.cookie.name

    async def authenticate(
        self,
        request: httpx.Request,
        *,
        timeout: Optional[float] = None,
    ) -> Outcome[User]:
        """See :meth:`AuthorizationCodeFlow.authenticate`."""
        return await self.flow.authenticate(request, timeout=timeout)

    async def refresh_token(
        self,
        refresh_token: str,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        """Get a new token set using a refresh token.

        Example::

            tokens = await strategy.refresh_token(refresh_token)
            print(tokens.access_token())
        """
        return await self.flow.refresh_token(refresh_token, timeout=timeout)

    async def user_profile(
        self,
        tokens: Union[OAuth2Tokens, str],
        *,
        timeout: Optional[float] = None,
    ) -> Profile:
        """Fetch the authenticated user's normalized profile.

        Raises:
            ProfileFetchError: If GitHub returns an error or an unexpected body.
            TransportError: If GitHub cannot be reached.
        """
        return await fetch_profile(
            self.options.user_info_endpoint,
            self._context(tokens),
            client=self._http_client,
            timeout=timeout,
        )

    async def user_emails(
        self,
        tokens: Union[OAuth2Tokens, str],
        *,
        timeout: Optional[float] = None,
    ) -> list[Email]:
        """Fetch the user's verified emails, primary first.

        Requires the ``user:email`` (or ``user``) scope. Returns an empty
        list when GitHub's response is unusable.

        Raises:
            TransportError: If GitHub cannot be reached.
        """
        return await fetch_emails(
            self.options.user_emails_endpoint,
            self._context(tokens),
            client=self._http_client,
            timeout=timeout,
        )

    def _context(self, tokens: Union[OAuth2Tokens, str]) -> RequestContext:
        context = RequestContext("GET", self.options.user_agent)
        token = tokens.access_token() if isinstance(tokens, OAuth2Tokens) else tokens
        context.authorize(token)
        return context
