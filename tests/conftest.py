"""Shared test fixtures for github_strategy.

Provides reusable strategy options, token payloads, and a clean logging
state. These fixtures are automatically discovered by pytest and available
to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from github_strategy.models import StrategyOptions


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture
def strategy_options() -> StrategyOptions:
    """Options for a GitHub OAuth app with two scopes and default endpoints."""
    return StrategyOptions(
        client_id="MY_CLIENT_ID",
        client_secret="MY_CLIENT_SECRET",
        redirect_uri="https://example.app/callback",
        scopes=["user:email", "read:user"],
    )


# ---------------------------------------------------------------------------
# Provider payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def token_payload() -> dict[str, Any]:
    """A successful token endpoint response with expiring user tokens."""
    return {
        "access_token": "gho_access",
        "token_type": "bearer",
        "scope": "read:user,user:email",
        "expires_in": 28800,
        "refresh_token": "ghr_refresh",
        "refresh_token_expires_in": "15897600",
    }


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """A trimmed ``GET /user`` response."""
    return {
        "login": "octocat",
        "id": 583231,
        "node_id": "MDQ6VXNlcjU4MzIzMQ==",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "name": "The Octo Cat",
        "company": "@github",
        "email": "octocat@github.com",
        "public_repos": 8,
    }


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Restore the package logger's handlers and level after every test."""
    package_logger = logging.getLogger("github_strategy")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
