"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import httpx
import pytest

from crafters_common import CraftersSettings, ResolvedConfig, SpaceshipCredentials, StoredConfig, VercelCredentials
from crafters.config import get_settings
from crafters.tui.state import AppState

ENV_VARS = (
    "SPACESHIP_API_KEY",
    "SPACESHIP_API_SECRET",
    "BASE_DOMAIN",
    "VERCEL_TOKEN",
    "VERCEL_TEAM_ID",
    "CLERK_SECRET_KEY",
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[CraftersSettings]:
    """Point every path at temp directories and clear credential env vars."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CRAFTERS_HOME", str(tmp_path / "crafters"))
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "claude"))
    monkeypatch.setenv("CRAFTERS_ACTOR", "tester")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def stored_config() -> StoredConfig:
    return StoredConfig(
        spaceship=SpaceshipCredentials(api_key="ss-key-1234567890", api_secret="ss-secret"),
        vercel=VercelCredentials(token="vc-token-1234567890"),
        base_domain="crafter.run",
    )


@pytest.fixture
def resolved_config() -> ResolvedConfig:
    return ResolvedConfig(
        api_key="ss-key",
        api_secret="ss-secret",
        vercel_token="vc-token",
        base_domain="crafter.run",
    )


# ---------------------------------------------------------------------------
# In-memory Spaceship / Vercel / Clerk
# ---------------------------------------------------------------------------


class FakeVendors:
    """Stateful stand-in for the three vendor APIs behind one MockTransport.

    ``fail`` maps ``(host, method)`` or ``(host, method, path)`` to an HTTP
    status that the matching requests answer with instead.
    """

    def __init__(self, base_domain: str = "crafter.run"):
        self.base_domain = base_domain
        self.requests: list[httpx.Request] = []
        self.records: list[dict[str, Any]] = []
        self.project_domains: dict[str, list[str]] = {}
        self.projects: list[dict[str, Any]] = []
        self.recommended_cname = "abc123.vercel-dns-017.com."
        self.clerk_domains: list[dict[str, Any]] = []
        self.clerk_cname_targets = [
            {"host": "clerk.{domain}", "value": "frontend-api.clerk.services", "required": True},
            {"host": "accounts.{domain}", "value": "accounts.clerk.services", "required": True},
        ]
        self.fail: dict[tuple[str, ...], int] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, host: str, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.host == host and (method is None or r.method == method)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host, method, path = request.url.host, request.method, request.url.path
        status = self.fail.get((host, method, path)) or self.fail.get((host, method))
        if status:
            return httpx.Response(status, json={"error": {"message": "injected failure"}})
        if host == "spaceship.dev":
            return self._spaceship(request)
        if host == "api.vercel.com":
            return self._vercel(request)
        if host == "api.clerk.com":
            return self._clerk(request)
        return httpx.Response(404)

    # -- Spaceship ---------------------------------------------------------

    def _spaceship(self, request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"/api/v1/dns/records/{self.base_domain}"
        if request.method == "GET":
            take = int(request.url.params.get("take", 100))
            skip = int(request.url.params.get("skip", 0))
            return httpx.Response(200, json={"items": self.records[skip : skip + take], "total": len(self.records)})
        body = json.loads(request.content)
        if request.method == "PUT":
            assert body["force"] is True
            for item in body["items"]:
                self.records = [
                    r for r in self.records
                    if not (r["type"] == item["type"] and r["name"] == item["name"])
                ]
                self.records.append(item)
            return httpx.Response(204)
        if request.method == "DELETE":
            for item in body:
                self.records = [
                    r for r in self.records
                    if not (r["type"] == item["type"] and r["name"] == item["name"] and r.get("cname") == item["cname"])
                ]
            return httpx.Response(204)
        return httpx.Response(405)

    # -- Vercel ------------------------------------------------------------

    def _vercel(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.strip("/").split("/")
        if parts[1:] == ["projects"] and request.method == "GET":
            return httpx.Response(200, json={"projects": self.projects, "pagination": {"next": None}})
        if parts[1] == "projects" and parts[3] == "domains":
            project = parts[2]
            attached = self.project_domains.setdefault(project, [])
            if request.method == "POST" and len(parts) == 4:
                name = json.loads(request.content)["name"]
                if name in attached:
                    return httpx.Response(409, json={"error": {"code": "domain_already_in_use"}})
                attached.append(name)
                return httpx.Response(200, json={"name": name, "projectId": project, "verified": True})
            domain = parts[4]
            if request.method == "GET":
                if domain in attached:
                    return httpx.Response(200, json={"name": domain, "projectId": project, "verified": True})
                return httpx.Response(404, json={"error": {"code": "not_found"}})
            if request.method == "DELETE":
                if domain not in attached:
                    return httpx.Response(404, json={"error": {"code": "not_found"}})
                attached.remove(domain)
                return httpx.Response(200, json={})
        if parts[1] == "domains" and parts[-1] == "config":
            return httpx.Response(
                200,
                json={
                    "recommendedCNAME": [
                        {"rank": 2, "value": "cname.vercel-dns.com."},
                        {"rank": 1, "value": self.recommended_cname},
                    ]
                },
            )
        return httpx.Response(404)

    # -- Clerk -------------------------------------------------------------

    def _clerk(self, request: httpx.Request) -> httpx.Response:
        if request.url.path != "/v1/domains":
            return httpx.Response(404)
        if request.method == "GET":
            return httpx.Response(200, json={"data": self.clerk_domains, "total_count": len(self.clerk_domains)})
        name = json.loads(request.content)["name"]
        if any(d["name"] == name for d in self.clerk_domains):
            return httpx.Response(422, json={"errors": [{"code": "form_identifier_exists"}]})
        domain = {
            "id": f"dmn_{len(self.clerk_domains) + 1}",
            "name": name,
            "is_satellite": False,
            "cname_targets": [
                {**t, "host": t["host"].format(domain=name)} for t in self.clerk_cname_targets
            ],
        }
        self.clerk_domains.append(domain)
        return httpx.Response(200, json=domain)


@pytest.fixture
def vendors() -> FakeVendors:
    return FakeVendors()


# ---------------------------------------------------------------------------
# TUI
# ---------------------------------------------------------------------------


class FakeTimer:
    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Records ``call_later`` instead of scheduling."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture
def tui_state(fake_loop: FakeLoop) -> AppState:
    return AppState(loop=fake_loop)
