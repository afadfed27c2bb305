"""User profile fetching.

:func:`fetch_profile` calls GitHub's ``GET /user`` once, validates the body
against :class:`~github_strategy.models.GitHubUser`, and builds a normalized
:class:`~github_strategy.models.Profile`. There is no retry.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from github_strategy.exceptions import ProfileFetchError
from github_strategy.models import Email, GitHubUser, Photo, Profile, ProfileName
from github_strategy.request import RequestContext, send


def split_name(name: Optional[str]) -> ProfileName:
    """Split a free-form display name into given, middle, and family parts.

    A single word is treated as the given name.
    """
    parts = (name or "").split()
    if not parts:
        return ProfileName()
    if len(parts) == 1:
        return ProfileName(given_name=parts[0])
    return ProfileName(
        given_name=parts[0],
        middle_name=" ".join(parts[1:-1]) or None,
        family_name=parts[-1],
    )


def build_profile(payload: dict[str, Any]) -> Profile:
    """Normalize a decoded ``/user`` payload.

    Raises:
        ProfileFetchError: If ``login`` or ``id`` is missing or mistyped.
    """
    try:
        user = GitHubUser.model_validate(payload)
    except ValidationError as exc:
        raise ProfileFetchError(f"Unexpected user profile shape: {exc}") from exc

    emails = [Email(value=user.email)] if user.email else []
    photos = [Photo(value=user.avatar_url)] if user.avatar_url else []
    return Profile(
        id=str(user.id),
        display_name=user.name or user.login,
        username=user.login,
        name=split_name(user.name),
        emails=emails,
        photos=photos,
        raw=payload,
    )


async def fetch_profile(
    endpoint: str,
    context: RequestContext,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> Profile:
    """Fetch and normalize the authenticated user's profile.

    Args:
        endpoint: The user-info URL, normally ``https://api.github.com/user``.
        context: An authorized :class:`~github_strategy.request.RequestContext`.
        client: Optional shared :class:`httpx.AsyncClient`.
        timeout: Optional per-call timeout in seconds.

    Returns:
        The normalized :class:`~github_strategy.models.Profile`.

    Raises:
        TransportError: If GitHub cannot be reached.
        ProfileFetchError: On an error status, a non-JSON body, or an
            unexpected payload shape.
    """
    response = await send(context.to_request(endpoint), client=client, timeout=timeout)
    if response.is_error:
        raise ProfileFetchError(
            f"User profile request failed with status {response.status_code}: "
            f"{response.text}"
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise ProfileFetchError("User profile response is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ProfileFetchError("User profile response is not a JSON object")
    return build_profile(payload)
