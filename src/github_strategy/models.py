"""Canonical Pydantic models shared across all github_strategy modules.

The models fall into two groups:

**Configuration models** -- built once when the strategy is constructed and
read-only afterwards:
    :data:`Scope`, :class:`CookieOptions`, and :class:`StrategyOptions`.

**Provider data models** -- produced from GitHub API responses:
    :class:`GitHubUser`, :class:`RawEmail`, :class:`Email`,
    :class:`ProfileName`, :class:`Photo`, and :class:`Profile`.

Configuration models are frozen so that one strategy instance can be shared
across concurrent requests.
"""

from __future__ import annotations

from datetime import datetime
from http.cookies import CookieError, Morsel
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_COOKIE_NAME = "github"
DEFAULT_USER_AGENT = "github-auth-strategy"

AUTHORIZATION_ENDPOINT = "https://github.com/login/oauth/authorize"
TOKEN_ENDPOINT = "https://github.com/login/oauth/access_token"
USER_INFO_ENDPOINT = "https://api.github.com/user"
USER_EMAILS_ENDPOINT = "https://api.github.com/user/emails"


# --- Configuration ---


Scope = Literal[
    "repo",
    "repo:status",
    "repo_deployment",
    "public_repo",
    "repo:invite",
    "security_events",
    "admin:repo_hook",
    "write:repo_hook",
    "read:repo_hook",
    "admin:org",
    "write:org",
    "read:org",
    "admin:public_key",
    "write:public_key",
    "read:public_key",
    "admin:org_hook",
    "gist",
    "notifications",
    "user",
    "read:user",
    "user:email",
    "user:follow",
    "project",
    "read:project",
    "delete_repo",
    "write:packages",
    "read:packages",
    "delete:packages",
    "write:discussion",
    "read:discussion",
    "admin:gpg_key",
    "write:gpg_key",
    "read:gpg_key",
    "codespace",
    "workflow",
]
"""OAuth scopes accepted by GitHub.

See https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/scopes-for-oauth-apps
"""


class CookieOptions(BaseModel):
    """Name and attributes of the cookie carrying the authorization state.

    The cookie value is always produced by the strategy and cannot be set
    here. Every attribute has a conservative default.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=DEFAULT_COOKIE_NAME, min_length=1)
    http_only: bool = True
    max_age: Optional[int] = Field(default=60 * 5, description="Lifetime in seconds")
    path: str = "/"
    same_site: Optional[Literal["Lax", "Strict", "None"]] = "Lax"
    secure: bool = False
    domain: Optional[str] = None
    expires: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def _legal_cookie_name(cls, value: str) -> str:
        try:
            Morsel().set(value, "", "")
        except CookieError as exc:
            raise ValueError(f"{value!r} is not a valid cookie name: {exc}") from exc
        return value


class StrategyOptions(BaseModel):
    """Immutable configuration for :class:`~github_strategy.strategy.GitHubStrategy`.

    ``cookie`` accepts either a plain cookie name or a full
    :class:`CookieOptions`; an empty name falls back to ``"github"``.
    ``scopes`` keeps the order given and drops duplicates.

    Example::

        StrategyOptions(
            client_id="Iv1.abc",
            client_secret="s3cr3t",
            redirect_uri="https://example.app/auth/github/callback",
            scopes=["read:user", "user:email"],
        )
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    scopes: tuple[Scope, ...] = ()
    cookie: CookieOptions = Field(default_factory=CookieOptions)
    allow_signup: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    authorization_endpoint: str = AUTHORIZATION_ENDPOINT
    token_endpoint: str = TOKEN_ENDPOINT
    user_info_endpoint: str = USER_INFO_ENDPOINT
    user_emails_endpoint: str = USER_EMAILS_ENDPOINT

    @field_validator("scopes", mode="before")
    @classmethod
    def _dedupe_scopes(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: list[Any] = []
        for scope in value:
            if scope not in seen:
                seen.append(scope)
        return tuple(seen)

    @field_validator("cookie", mode="before")
    @classmethod
    def _coerce_cookie(cls, value: Any) -> Any:
        if value is None:
            return CookieOptions()
        if isinstance(value, str):
            return {"name": value or DEFAULT_COOKIE_NAME}
        return value


# --- Provider data ---


class GitHubUser(BaseModel):
    """Subset of the ``GET /user`` payload the profile needs.

    Unknown fields are kept in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    login: str
    id: Union[int, str]
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class RawEmail(BaseModel):
    """One element of the ``GET /user/emails`` payload.

    Only ``email`` is typed. The flags are read for truthiness, so odd values
    from the API never reject the whole list.
    """

    email: str
    verified: Any
    primary: Any
    visibility: Any


class Email(BaseModel):
    """A normalized email address. ``type`` is ``None`` when unclassified."""

    value: str
    type: Optional[Literal["primary", "secondary"]] = None


class ProfileName(BaseModel):
    family_name: Optional[str] = None
    given_name: Optional[str] = None
    middle_name: Optional[str] = None


class Photo(BaseModel):
    value: str


class Profile(BaseModel):
    """Normalized GitHub identity handed to application code.

    ``raw`` is the untouched ``GET /user`` payload for callers that need
    fields beyond the normalized ones.
    """

    provider: Literal["github"] = "github"
    id: str
    display_name: str
    username: str
    name: ProfileName = Field(default_factory=ProfileName)
    emails: list[Email] = Field(default_factory=list)
    photos: list[Photo] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)
