"""Tests for email normalization and fetching."""

from __future__ import annotations

import httpx
import pytest

from github_strategy.emails import fetch_emails, normalize_emails
from github_strategy.exceptions import TransportError
from github_strategy.models import Email
from github_strategy.request import RequestContext

ENDPOINT = "https://api.github.com/user/emails"


class TestNormalizeEmails:
    def test_drops_unverified_and_puts_primary_first(self) -> None:
        body = [
            {"email": "a@x", "verified": False, "primary": True, "visibility": None},
            {"email": "b@x", "verified": True, "primary": False, "visibility": "public"},
            {"email": "c@x", "verified": True, "primary": True, "visibility": None},
        ]
        assert normalize_emails(body) == [
            Email(value="c@x", type="primary"),
            Email(value="b@x", type="secondary"),
        ]

    def test_stable_among_equals(self) -> None:
        body = [
            {"email": "s1@x", "verified": True, "primary": False, "visibility": None},
            {"email": "p1@x", "verified": True, "primary": True, "visibility": None},
            {"email": "s2@x", "verified": True, "primary": False, "visibility": None},
            {"email": "p2@x", "verified": True, "primary": True, "visibility": None},
        ]
        assert [email.value for email in normalize_emails(body)] == ["p1@x", "p2@x", "s1@x", "s2@x"]

    @pytest.mark.parametrize(
        "body",
        [
            {},
            None,
            "a@x",
            [{"email": "x"}],
            [None],
            [["email", "verified", "primary", "visibility"]],
            [
                {"email": "ok@x", "verified": True, "primary": True, "visibility": None},
                {"email": "bad@x", "verified": True},
            ],
        ],
    )
    def test_malformed_body_is_empty(self, body: object) -> None:
        assert normalize_emails(body) == []

    def test_odd_flag_values_do_not_empty_the_list(self) -> None:
        body = [
            {"email": "ok@x", "verified": True, "primary": True, "visibility": None},
            {"email": "n@x", "verified": None, "primary": False, "visibility": None},
            {"email": "s@x", "verified": 1, "primary": 0, "visibility": 0},
        ]
        assert normalize_emails(body) == [
            Email(value="ok@x", type="primary"),
            Email(value="s@x", type="secondary"),
        ]

    def test_non_string_address_is_empty(self) -> None:
        body = [{"email": None, "verified": True, "primary": True, "visibility": None}]
        assert normalize_emails(body) == []

    def test_empty_list(self) -> None:
        assert normalize_emails([]) == []

    def test_all_unverified(self) -> None:
        body = [{"email": "a@x", "verified": False, "primary": True, "visibility": "private"}]
        assert normalize_emails(body) == []


class TestFetchEmails:
    @pytest.mark.asyncio
    async def test_fetch(self) -> None:
        body = [{"email": "me@x", "verified": True, "primary": True, "visibility": "private"}]
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        context = RequestContext("GET", "tests")
        context.authorize("gho_x")
        async with httpx.AsyncClient(transport=transport) as http:
            emails = await fetch_emails(ENDPOINT, context, client=http)
        assert emails == [Email(value="me@x", type="primary")]

    @pytest.mark.asyncio
    async def test_error_status_is_empty(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(404, json={"message": "Not Found"})
        )
        async with httpx.AsyncClient(transport=transport) as http:
            assert await fetch_emails(ENDPOINT, RequestContext("GET", "t"), client=http) == []

    @pytest.mark.asyncio
    async def test_non_json_is_empty(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="nope"))
        async with httpx.AsyncClient(transport=transport) as http:
            assert await fetch_emails(ENDPOINT, RequestContext("GET", "t"), client=http) == []

    @pytest.mark.asyncio
    async def test_network_failure_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(TransportError):
                await fetch_emails(ENDPOINT, RequestContext("GET", "t"), client=http)
