"""Random values for the authorization round trip.

:func:`generate_state` produces the anti-CSRF ``state`` token.
:func:`generate_code_verifier` and :func:`create_code_challenge` produce the
PKCE verifier and its ``S256`` challenge (:rfc:`7636`). Randomness comes from
:mod:`secrets`.
"""

from __future__ import annotations

import base64
import hashlib
import secrets


def generate_state() -> str:
    """Return an unguessable, URL-safe state token (256 bits of entropy)."""
    return secrets.token_urlsafe(32)


def generate_code_verifier() -> str:
    # RFC 7636: 43-128 characters from unreserved character set
    return secrets.token_urlsafe(64)[:128]


def create_code_challenge(code_verifier: str) -> str:
    """Derive the ``S256`` code challenge for *code_verifier*."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")

