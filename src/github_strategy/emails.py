"""Email list fetching and normalization.

GitHub's ``GET /user/emails`` returns every address on the account. The
normalizer keeps the verified ones, puts the primary address first, and
maps them to :class:`~github_strategy.models.Email`. Malformed payloads
degrade to an empty list instead of failing the login.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from github_strategy.models import Email, RawEmail
from github_strategy.request import RequestContext, send

logger = logging.getLogger(__name__)

_EMAIL_LIST = TypeAdapter(list[RawEmail])
_REQUIRED_KEYS = frozenset({"email", "verified", "primary", "visibility"})


def normalize_emails(body: Any) -> list[Email]:
    """Turn a raw ``/user/emails`` body into a prioritized email list.

    The body must be a list whose every element is an object with
    ``email``, ``verified``, ``primary`` and ``visibility`` keys and a
    string ``email``. If the body or any element is malformed, the result is
    empty. The flags are only tested for truthiness.

    Unverified addresses are dropped. Primary addresses come first; the
    original order is otherwise kept.

    Args:
        body: The decoded JSON body, of unknown shape.

    Returns:
        A list of :class:`~github_strategy.models.Email`. Never raises.
    """
    if not isinstance(body, list):
        return []
    if not all(isinstance(item, dict) and _REQUIRED_KEYS <= item.keys() for item in body):
        return []
    try:
        records = _EMAIL_LIST.validate_python(body)
    except ValidationError:
        return []

    verified = [record for record in records if bool(record.verified)]
    primary = [record for record in verified if bool(record.primary)]
    secondary = [record for record in verified if not record.primary]
    return [
        Email(value=record.email, type="primary" if record.primary else "secondary")
        for record in primary + secondary
    ]


async def fetch_emails(
    endpoint: str,
    context: RequestContext,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> list[Email]:
    """Fetch ``/user/emails`` and normalize the result.

    Only network failures raise; an error status or unparsable body yields
    an empty list.

    Raises:
        TransportError: If GitHub cannot be reached.
    """
    response = await send(context.to_request(endpoint), client=client, timeout=timeout)
    if response.is_error:
        logger.debug("Email list request returned HTTP %d", response.status_code)
        return []
    try:
        body = response.json()
    except ValueError:
        logger.debug("Email list response was not JSON")
        return []
    return normalize_emails(body)
