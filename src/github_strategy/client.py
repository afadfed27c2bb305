"""OAuth2 client adapter for GitHub.

:class:`GitHubOAuth2Client` implements :class:`~github_strategy.adapter.OAuth2Adapter`
against GitHub's OAuth endpoints:

- ``https://github.com/login/oauth/authorize`` for the consent redirect.
- ``https://github.com/login/oauth/access_token`` for the code and refresh
  grants.

GitHub reports grant errors as a JSON body with an ``error`` key, usually
with HTTP 200. Those surface as :class:`~github_strategy.exceptions.TokenExchangeError`,
while network failures surface as
:class:`~github_strategy.exceptions.TransportError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence
from urllib.parse import urlencode

import httpx

from github_strategy.adapter import OAuth2Adapter
from github_strategy.exceptions import TokenExchangeError
from github_strategy.models import AUTHORIZATION_ENDPOINT, DEFAULT_USER_AGENT, TOKEN_ENDPOINT
from github_strategy.pkce import create_code_challenge
from github_strategy.request import send
from github_strategy.tokens import OAuth2Tokens

logger = logging.getLogger(__name__)


class GitHubOAuth2Client(OAuth2Adapter):
    """Authorization URL construction and token grants for a GitHub OAuth app.

    Args:
        client_id: The OAuth app's client ID.
        client_secret: The OAuth app's client secret.
        redirect_uri: The callback URL registered with the app.
        authorization_endpoint: Override for GitHub Enterprise hosts.
        token_endpoint: Override for GitHub Enterprise hosts.
        allow_signup: Whether unauthenticated users may sign up for GitHub
            during the flow. ``None`` leaves the parameter out.
        use_pkce: Send a PKCE challenge with the authorization request.
        user_agent: ``User-Agent`` sent to the token endpoint.
        http_client: Optional shared :class:`httpx.AsyncClient`.

    Example::

        client = GitHubOAuth2Client("Iv1.abc", "s3cr3t", "https://example.app/callback")
        url = client.create_authorization_url(state, ["read:user"])
        tokens = await client.validate_authorization_code(code)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        authorization_endpoint: str = AUTHORIZATION_ENDPOINT,
        token_endpoint: str = TOKEN_ENDPOINT,
        allow_signup: Optional[bool] = None,
        use_pkce: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.authorization_endpoint = authorization_endpoint
        self.token_endpoint = token_endpoint
        self.allow_signup = allow_signup
        self.user_agent = user_agent
        self._use_pkce = use_pkce
        self._http_client = http_client

    @property
    def uses_pkce(self) -> bool:
        return self._use_pkce

    def create_authorization_url(
        self,
        state: str,
        scopes: Sequence[str],
        code_verifier: Optional[str] = None,
    ) -> str:
        params: dict[str, str] = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        if scopes:
            params["scope"] = " ".join(scopes)
        if code_verifier is not None:
            params["code_challenge"] = create_code_challenge(code_verifier)
            params["code_challenge_method"] = "S256"

        separator = "&" if "?" in self.authorization_endpoint else "?"
        return f"{self.authorization_endpoint}{separator}{urlencode(params)}"

    def authorization_params(self) -> dict[str, str]:
        if self.allow_signup is None:
            return {}
        return {"allow_signup": "true" if self.allow_signup else "false"}

    async def validate_authorization_code(
        self,
        code: str,
        code_verifier: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        data: dict[str, str] = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        if code_verifier is not None:
            data["code_verifier"] = code_verifier
        return await self._token_request(data, "Token exchange", timeout)

    async def refresh_access_token(
        self,
        refresh_token: str,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        data = {"grant_type": "refresh_token", "refresh_token": refresh_token}
        return await self._token_request(data, "Token refresh", timeout)

    async def _token_request(
        self,
        data: dict[str, str],
        action: str,
        timeout: Optional[float],
    ) -> OAuth2Tokens:
        """POST a grant to the token endpoint and validate the response.

        Args:
            data: Grant-specific form fields; client credentials are added here.
            action: Label used in error messages.
            timeout: Optional per-call timeout in seconds.

        Raises:
            TokenExchangeError: On an OAuth error body, an HTTP error, a
                non-JSON body, or a missing ``access_token`` / ``token_type``.
            TransportError: On network failures.
        """
        form = {**data, "client_id": self.client_id, "client_secret": self.client_secret}
        request = httpx.Request(
            "POST",
            self.token_endpoint,
            data=form,
            headers={"Accept": "application/json", "User-Agent": self.user_agent},
        )
        logger.debug("%s: POST %s", action, self.token_endpoint)
        response = await send(request, client=self._http_client, timeout=timeout)

        try:
            token_data: Any = response.json()
        except ValueError as exc:
            raise TokenExchangeError(
                f"{action} failed with status {response.status_code}: "
                "response is not valid JSON"
            ) from exc

        if isinstance(token_data, dict) and "error" in token_data:
            raise TokenExchangeError(
                f"{action} failed: {token_data['error']}",
                code=str(token_data["error"]),
                description=token_data.get("error_description"),
                uri=token_data.get("error_uri"),
            )
        if response.is_error:
            raise TokenExchangeError(
                f"{action} failed with status {response.status_code}: {response.text}"
            )
        if not isinstance(token_data, dict):
            raise TokenExchangeError(f"{action} response is not a JSON object")
        if not isinstance(token_data.get("access_token"), str) or not token_data["access_token"]:
            raise TokenExchangeError(f"{action} response missing 'access_token' field")
        if not isinstance(token_data.get("token_type"), str) or not token_data["token_type"]:
            raise TokenExchangeError(f"{action} response missing 'token_type' field")

        return OAuth2Tokens(token_data)
