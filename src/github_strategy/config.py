"""Building :class:`~github_strategy.models.StrategyOptions` from the environment or a file.

* **Environment** -- :func:`options_from_env` reads ``GITHUB_*`` variables
  (the prefix is configurable).
* **JSON file** -- :func:`load_options` reads a JSON object whose keys are
  the :class:`~github_strategy.models.StrategyOptions` field names.
* **Credential resolution** -- :func:`resolve_credential` lets the client
  secret live in another variable or a file instead of the config itself.

Every failure is reported as :class:`~github_strategy.exceptions.ConfigError`.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from github_strategy.exceptions import ConfigError
from github_strategy.models import StrategyOptions

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

# Environment suffix -> StrategyOptions field, for plain string fields.
_ENV_FIELDS = {
    "CLIENT_ID": "client_id",
    "CLIENT_SECRET": "client_secret",
    "REDIRECT_URI": "redirect_uri",
    "USER_AGENT": "user_agent",
    "COOKIE_NAME": "cookie",
    "AUTHORIZATION_ENDPOINT": "authorization_endpoint",
    "TOKEN_ENDPOINT": "token_endpoint",
    "USER_INFO_ENDPOINT": "user_info_endpoint",
    "USER_EMAILS_ENDPOINT": "user_emails_endpoint",
}


def resolve_credential(source: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``VAR_NAME`` from the environment
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else -- used verbatim

    Args:
        source: The source descriptor string.
        environ: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the variable is unset or the file can't be read.
    """
    env = os.environ if environ is None else environ

    if source.startswith("env:"):
        var_name = source[4:]
        value = env.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return source


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean environment value such as ``"true"`` or ``"0"``."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def parse_scopes(value: str) -> list[str]:
    """Split a comma- or whitespace-separated scope list."""
    return [scope for scope in re.split(r"[\s,]+", value) if scope]


def build_options(data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> StrategyOptions:
    """Validate *data* into :class:`StrategyOptions`, resolving the client secret source.

    Raises:
        ConfigError: If validation fails.
    """
    values = dict(data)
    secret = values.get("client_secret")
    if isinstance(secret, str):
        values["client_secret"] = resolve_credential(secret, environ)
    try:
        return StrategyOptions.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid GitHub strategy options: {exc}") from exc


def options_from_env(
    prefix: str = "GITHUB_",
    environ: Optional[Mapping[str, str]] = None,
) -> StrategyOptions:
    """Build options from environment variables.

    Recognised variables (with the default prefix): ``GITHUB_CLIENT_ID``,
    ``GITHUB_CLIENT_SECRET``, ``GITHUB_REDIRECT_URI``, ``GITHUB_SCOPES``
    (comma or space separated), ``GITHUB_ALLOW_SIGNUP``,
    ``GITHUB_USER_AGENT``, ``GITHUB_COOKIE_NAME`` and the endpoint
    overrides ``GITHUB_AUTHORIZATION_ENDPOINT``, ``GITHUB_TOKEN_ENDPOINT``,
    ``GITHUB_USER_INFO_ENDPOINT``, ``GITHUB_USER_EMAILS_ENDPOINT``.

    ``GITHUB_CLIENT_SECRET`` may itself be a credential source such as
    ``file:/run/secrets/github``.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    for suffix, field in _ENV_FIELDS.items():
        value = env.get(prefix + suffix)
        if value is not None:
            data[field] = value

    scopes = env.get(prefix + "SCOPES")
    if scopes is not None:
        data["scopes"] = parse_scopes(scopes)

    allow_signup = env.get(prefix + "ALLOW_SIGNUP")
    if allow_signup is not None:
        data["allow_signup"] = parse_bool(allow_signup, prefix + "ALLOW_SIGNUP")

    return build_options(data, env)


def load_options(path: str | Path, environ: Optional[Mapping[str, str]] = None) -> StrategyOptions:
    """Load options from a JSON file.

    Raises:
        ConfigError: If the file is missing, not valid JSON, not an object,
            or fails validation.
    """
    path = Path(path).expanduser()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return build_options(raw, environ)
