"""Shared fixtures for prepMSCEIT tests."""

from __future__ import annotations

import json
import os
from typing import Any
from uuid import uuid4

import httpx
import pytest

os.environ.update({
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_SERVICE_ROLE_KEY": "service-role-key",
    "GEMINI_API_KEY": "",
    "OPENAI_API_KEY": "",
    "RESEND_API_KEY": "",
    "LEAD_WEBHOOK_URL": "",
    "ONBOARDING_DELAY_SECONDS": "0",
})

from prepmsceit.config.settings import get_settings  # noqa: E402

get_settings.cache_clear()

from prepmsceit.core.mailer import Mailer  # noqa: E402
from prepmsceit.core.supabase_client import SupabaseClient  # noqa: E402
from prepmsceit.models.branch import Branch  # noqa: E402
from prepmsceit.models.stats import UserStats  # noqa: E402


SUPABASE_URL = "https://project.supabase.co"


class FakeSupabase:
    """
    In-memory stand-in for the Supabase REST and auth APIs.

    Served through httpx.MockTransport. `failures` maps (method, path) to a
    status code that the fake returns instead of handling the call.
    """

    def __init__(self):
        self.users: dict[str, dict[str, Any]] = {}
        self.tokens: dict[str, str] = {}
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add_user(self, email: str, token: str | None = None, **metadata: Any) -> dict[str, Any]:
        user = {"id": str(uuid4()), "email": email, "user_metadata": dict(metadata)}
        self.users[user["id"]] = user
        if token:
            self.tokens[token] = user["id"]
        return user

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        status = self.failures.get((request.method, path))
        if status is not None:
            return httpx.Response(status, json={"message": f"forced failure on {path}"})

        if path.startswith("/rest/v1/"):
            return self._rest(request, path.removeprefix("/rest/v1/"))
        return self._auth(request, path.removeprefix("/auth/v1"))

    def _body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def _rest(self, request: httpx.Request, table: str) -> httpx.Response:
        rows = self.rows(table)
        filters = {
            key: value.removeprefix("eq.")
            for key, value in request.url.params.items()
            if value.startswith("eq.")
        }

        def matches(row: dict[str, Any]) -> bool:
            return all(str(row.get(k)) == v for k, v in filters.items())

        if request.method == "GET":
            return httpx.Response(200, json=[row for row in rows if matches(row)])

        body = self._body(request)
        if request.method == "PATCH":
            for row in rows:
                if matches(row):
                    row.update(body)
            return httpx.Response(204)

        if "merge-duplicates" in request.headers.get("prefer", ""):
            key = request.url.params.get("on_conflict", "id")
            for row in rows:
                if row.get(key) == body.get(key):
                    row.update(body)
                    return httpx.Response(201)
        rows.append(dict(body))
        return httpx.Response(201)

    def _auth(self, request: httpx.Request, path: str) -> httpx.Response:
        body = self._body(request)

        if path == "/user":
            token = request.headers.get("authorization", "").removeprefix("Bearer ")
            user = self.users.get(self.tokens.get(token, ""))
            if user is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            if request.method == "PUT":
                user["user_metadata"].update(body.get("data", {}))
            return httpx.Response(200, json=user)

        if path == "/admin/users" and request.method == "GET":
            return httpx.Response(200, json={"users": list(self.users.values())})

        if path.startswith("/admin/users/"):
            user = self.users.get(path.rsplit("/", 1)[-1])
            if user is None:
                return httpx.Response(404, json={"msg": "User not found"})
            return httpx.Response(200, json=user)

        if path == "/invite":
            if any(u["email"] == body["email"] for u in self.users.values()):
                return httpx.Response(422, json={
                    "code": "email_exists",
                    "msg": "A user with this email address has already been registered",
                })
            user = self.add_user(body["email"], **body.get("data", {}))
            return httpx.Response(200, json=user)

        if path == "/admin/generate_link":
            user = next((u for u in self.users.values() if u["email"] == body["email"]), None)
            return httpx.Response(200, json={
                "action_link": f"{SUPABASE_URL}/auth/v1/verify?token=abc&type={body['type']}",
                "id": user["id"] if user else None,
                "email": body["email"],
            })

        if path == "/otp":
            return httpx.Response(200, json={})

        return httpx.Response(404, json={"msg": f"no route {path}"})


class FakeResend:
    """Records emails posted to the Resend API."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.sent: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"message": "rejected"})
        self.sent.append(json.loads(request.content))
        return httpx.Response(200, json={"id": f"email-{len(self.sent)}"})


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def supabase(fake_supabase) -> SupabaseClient:
    return SupabaseClient(
        url=SUPABASE_URL,
        service_role_key="service-role-key",
        transport=httpx.MockTransport(fake_supabase),
    )


@pytest.fixture
def fake_resend() -> FakeResend:
    return FakeResend()


@pytest.fixture
def mailer(fake_resend) -> Mailer:
    return Mailer(api_key="re_test", transport=httpx.MockTransport(fake_resend))


@pytest.fixture
def unconfigured_mailer() -> Mailer:
    return Mailer(api_key="", transport=httpx.MockTransport(FakeResend()))


@pytest.fixture
def baseline_stats() -> UserStats:
    """Stats with Perceiving untried and the other branches at 60."""
    return UserStats(
        scores={
            Branch.PERCEIVING: 0,
            Branch.USING: 60,
            Branch.UNDERSTANDING: 60,
            Branch.MANAGING: 60,
        },
    )


@pytest.fixture
def rejecting_mailer() -> Mailer:
    return Mailer(api_key="re_test", transport=httpx.MockTransport(FakeResend(status_code=422)))
