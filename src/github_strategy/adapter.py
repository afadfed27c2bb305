"""Capability interface the authorization-code flow is parameterized by.

:class:`~github_strategy.strategy.AuthorizationCodeFlow` knows nothing about
a specific provider. It drives any :class:`OAuth2Adapter`, which supplies:

1. :meth:`~OAuth2Adapter.create_authorization_url` -- URL construction, no I/O.
2. :meth:`~OAuth2Adapter.validate_authorization_code` -- the code exchange.
3. :meth:`~OAuth2Adapter.refresh_access_token` -- the refresh grant.
4. :meth:`~OAuth2Adapter.authorization_params` -- provider-specific extra
   query parameters (e.g. GitHub's ``allow_signup``).
5. :attr:`~OAuth2Adapter.uses_pkce` -- whether a code verifier is generated.

See Also:
    :class:`github_strategy.client.GitHubOAuth2Client` for the GitHub adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from github_strategy.tokens import OAuth2Tokens


class OAuth2Adapter(ABC):
    """Abstract base class for OAuth2 provider adapters."""

    @property
    def uses_pkce(self) -> bool:
        """Whether the flow must generate a PKCE code verifier. Defaults to ``False``."""
        return False

    @abstractmethod
    def create_authorization_url(
        self,
        state: str,
        scopes: Sequence[str],
        code_verifier: Optional[str] = None,
    ) -> str:
        """Build the provider's authorization URL.

        Args:
            state: The anti-CSRF state token.
            scopes: Requested scopes; omitted from the URL when empty.
            code_verifier: PKCE verifier whose challenge must be embedded.

        Returns:
            The absolute authorization URL.
        """
        ...

    @abstractmethod
    async def validate_authorization_code(
        self,
        code: str,
        code_verifier: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        """Exchange an authorization code for tokens.

        Raises:
            TokenExchangeError: If the provider rejects the code or
                returns malformed data.
            TransportError: If the provider cannot be reached.
        """
        ...

    @abstractmethod
    async def refresh_access_token(
        self,
        refresh_token: str,
        *,
        timeout: Optional[float] = None,
    ) -> OAuth2Tokens:
        """Obtain a new token set with a refresh token.

        Raises:
            TokenExchangeError: If the refresh token is invalid or expired.
            TransportError: If the provider cannot be reached.
        """
        ...

    def authorization_params(self) -> dict[str, str]:
        """Return provider-specific parameters added to every authorization URL."""
        return {}
