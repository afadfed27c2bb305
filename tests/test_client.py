"""Tests for the GitHub OAuth2 client adapter."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from github_strategy.client import GitHubOAuth2Client
from github_strategy.exceptions import TokenExchangeError, TransportError
from github_strategy.pkce import create_code_challenge


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_client(http: httpx.AsyncClient | None = None, **kwargs: Any) -> GitHubOAuth2Client:
    return GitHubOAuth2Client(
        "CLIENT_ID",
        "CLIENT_SECRET",
        "https://example.app/callback",
        http_client=http,
        **kwargs,
    )


def _responding(status_code: int = 200, **kwargs: Any) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, **kwargs))


# ---------------------------------------------------------------------------
# Authorization URL
# ---------------------------------------------------------------------------


class TestCreateAuthorizationUrl:
    def test_required_parameters(self) -> None:
        url = httpx.URL(_make_client().create_authorization_url("st4te", ["repo", "gist"]))
        assert url.scheme == "https"
        assert url.host == "github.com"
        assert url.path == "/login/oauth/authorize"
        assert dict(url.params) == {
            "response_type": "code",
            "client_id": "CLIENT_ID",
            "redirect_uri": "https://example.app/callback",
            "state": "st4te",
            "scope": "repo gist",
        }

    def test_empty_scopes_omitted(self) -> None:
        url = httpx.URL(_make_client().create_authorization_url("s", []))
        assert "scope" not in url.params

    def test_deterministic(self) -> None:
        client = _make_client()
        assert client.create_authorization_url("s", ["repo"]) == client.create_authorization_url(
            "s", ["repo"]
        )

    def test_code_challenge(self) -> None:
        url = httpx.URL(_make_client().create_authorization_url("s", [], code_verifier="v" * 43))
        assert url.params["code_challenge"] == create_code_challenge("v" * 43)
        assert url.params["code_challenge_method"] == "S256"

    def test_enterprise_endpoint(self) -> None:
        client = _make_client(authorization_endpoint="https://ghe.example.com/login/oauth/authorize")
        url = httpx.URL(client.create_authorization_url("s", []))
        assert url.host == "ghe.example.com"

    def test_endpoint_with_existing_query(self) -> None:
        client = _make_client(authorization_endpoint="https://idp.example.com/authorize?tenant=a")
        url = httpx.URL(client.create_authorization_url("s", []))
        assert url.params["tenant"] == "a"
        assert url.params["state"] == "s"

    def test_allow_signup_params(self) -> None:
        assert _make_client().authorization_params() == {}
        assert _make_client(allow_signup=True).authorization_params() == {"allow_signup": "true"}
        assert _make_client(allow_signup=False).authorization_params() == {"allow_signup": "false"}

    def test_uses_pkce_flag(self) -> None:
        assert _make_client().uses_pkce is False
        assert _make_client(use_pkce=True).uses_pkce is True


# ---------------------------------------------------------------------------
# Token grants
# ---------------------------------------------------------------------------


class TestValidateAuthorizationCode:
    @pytest.mark.asyncio
    async def test_successful_exchange(self, token_payload: dict[str, Any]) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=token_payload)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            tokens = await _make_client(http, user_agent="my-app").validate_authorization_code(
                "code-1", "verifier-1"
            )

        assert tokens.access_token() == "gho_access"
        assert tokens.token_type() == "bearer"
        request = captured[0]
        assert request.method == "POST"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == "my-app"
        form = parse_qs(request.content.decode())
        assert form["code"] == ["code-1"]
        assert form["code_verifier"] == ["verifier-1"]

    @pytest.mark.asyncio
    async def test_oauth_error_body(self) -> None:
        transport = _responding(
            json={"error": "bad_verification_code", "error_description": "expired"}
        )
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(TokenExchangeError) as exc_info:
                await _make_client(http).validate_authorization_code("code")

        assert exc_info.value.code == "bad_verification_code"
        assert exc_info.value.description == "expired"
        assert exc_info.value.kind == "token_exchange"

    @pytest.mark.asyncio
    async def test_missing_access_token(self) -> None:
        async with httpx.AsyncClient(transport=_responding(json={"token_type": "bearer"})) as http:
            with pytest.raises(TokenExchangeError, match="access_token"):
                await _make_client(http).validate_authorization_code("code")

    @pytest.mark.asyncio
    async def test_missing_token_type(self) -> None:
        async with httpx.AsyncClient(transport=_responding(json={"access_token": "t"})) as http:
            with pytest.raises(TokenExchangeError, match="token_type"):
                await _make_client(http).validate_authorization_code("code")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"access_token": "", "token_type": "bearer"}, "access_token"),
            ({"access_token": "t", "token_type": ""}, "token_type"),
        ],
    )
    async def test_empty_token_fields(self, payload: dict[str, Any], field: str) -> None:
        async with httpx.AsyncClient(transport=_responding(json=payload)) as http:
            with pytest.raises(TokenExchangeError, match=field):
                await _make_client(http).validate_authorization_code("code")

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        async with httpx.AsyncClient(transport=_responding(500, json={"message": "oops"})) as http:
            with pytest.raises(TokenExchangeError, match="500"):
                await _make_client(http).validate_authorization_code("code")

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        async with httpx.AsyncClient(transport=_responding(200, text="<html>")) as http:
            with pytest.raises(TokenExchangeError, match="not valid JSON"):
                await _make_client(http).validate_authorization_code("code")

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(TransportError):
                await _make_client(http).validate_authorization_code("code", timeout=0.1)


class TestRefreshAccessToken:
    @pytest.mark.asyncio
    async def test_refresh(self, token_payload: dict[str, Any]) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=token_payload)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            tokens = await _make_client(http).refresh_access_token("ghr_refresh")

        form = parse_qs(captured[0].content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["ghr_refresh"]
        assert form["client_secret"] == ["CLIENT_SECRET"]
        assert tokens.has_refresh_token()

    @pytest.mark.asyncio
    async def test_expired_refresh_token(self) -> None:
        transport = _responding(json={"error": "bad_refresh_token"})
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(TokenExchangeError) as exc_info:
                await _make_client(http).refresh_access_token("ghr_old")
        assert exc_info.value.code == "bad_refresh_token"
