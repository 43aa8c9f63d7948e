"""Tests for the Typer commands."""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from crafters_common import CommandsResult, InstallResult
from crafters.audit import read_events
from crafters.cli import app
from crafters.config import load_config, save_config
from crafters.services.provisioning import Provisioner
from crafters.services.spaceship import SpaceshipClient
from crafters.services.vercel import VercelClient

runner = CliRunner()


@pytest.fixture
def logged_in(stored_config):
    save_config(stored_config)
    return stored_config


@pytest.fixture
def fake_provisioner(vendors, monkeypatch):
    """Route every command's vendor traffic through the in-memory vendors."""
    factory = SimpleNamespace(from_config=lambda cfg: Provisioner.from_config(cfg, transport=vendors.transport))
    monkeypatch.setattr("crafters.commands.domain.Provisioner", factory)
    return vendors


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "myapp"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


# ---------------------------------------------------------------------------
# login / logout / whoami
# ---------------------------------------------------------------------------


class TestCredentials:
    def test_login_with_flags(self):
        result = runner.invoke(
            app,
            [
                "login",
                "--spaceship-key", "ss-key",
                "--spaceship-secret", "ss-secret",
                "--vercel-token", "vc-token",
                "--vercel-team-id", "team_1",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Credentials saved" in result.output

        stored = load_config()
        assert stored.spaceship.api_secret == "ss-secret"
        assert stored.vercel.team_id == "team_1"
        assert stored.base_domain == "crafter.run"
        assert read_events()[-1].action == "login"

    def test_login_prompts_for_secrets(self):
        result = runner.invoke(
            app,
            ["login", "--spaceship-key", "ss-key", "--base-domain", "example.dev"],
            input="ss-secret\nvc-token\n",
        )
        assert result.exit_code == 0, result.output
        stored = load_config()
        assert stored.vercel.token == "vc-token"
        assert stored.base_domain == "example.dev"

    def test_whoami_masks_secrets(self, logged_in):
        result = runner.invoke(app, ["whoami"])
        assert result.exit_code == 0
        assert "ss-key-1..." in result.output
        assert "vc-token..." in result.output
        assert "ss-key-1234567890" not in result.output

    def test_whoami_logged_out(self):
        result = runner.invoke(app, ["whoami"])
        assert result.exit_code == 0
        assert "Not logged in" in result.output

    def test_logout(self, logged_in):
        result = runner.invoke(app, ["logout"])
        assert "Credentials removed" in result.output
        assert load_config() is None

        result = runner.invoke(app, ["logout"])
        assert "No credentials found" in result.output


# ---------------------------------------------------------------------------
# domain
# ---------------------------------------------------------------------------


class TestDomainAdd:
    def test_defaults_to_directory_name(self, logged_in, fake_provisioner, project_dir):
        result = runner.invoke(app, ["domain", "add"])

        assert result.exit_code == 0, result.output
        assert "myapp.crafter.run" in result.output
        assert "[1/3]" in result.output
        assert "configured (Vercel + DNS)" in result.output
        assert fake_provisioner.project_domains["myapp"] == ["myapp.crafter.run"]

        (event,) = read_events()
        assert event.action == "domain.add"
        assert event.result == "success"
        assert event.params["mode"] == "standard"

    def test_linked_project_and_clerk_from_env_file(self, logged_in, fake_provisioner, project_dir):
        (project_dir / ".vercel").mkdir()
        (project_dir / ".vercel" / "project.json").write_text(json.dumps({"projectName": "myapp-web"}))
        (project_dir / ".env.local").write_text("CLERK_SECRET_KEY=sk_test_local\n")

        result = runner.invoke(app, ["domain", "add", "shop"])

        assert result.exit_code == 0, result.output
        assert "myapp-web" in result.output
        assert "configured (Vercel + Clerk + DNS)" in result.output
        assert fake_provisioner.project_domains["myapp-web"] == ["shop.crafter.run"]
        (clerk_post,) = fake_provisioner.calls("api.clerk.com", "POST")
        assert clerk_post.headers["Authorization"] == "Bearer sk_test_local"

    def test_no_clerk(self, logged_in, fake_provisioner, project_dir, monkeypatch):
        monkeypatch.setenv("CLERK_SECRET_KEY", "sk_env")
        result = runner.invoke(app, ["domain", "add", "shop", "--no-clerk"])

        assert result.exit_code == 0, result.output
        assert fake_provisioner.calls("api.clerk.com") == []

    def test_clerk_failure_is_warning(self, logged_in, fake_provisioner, project_dir):
        fake_provisioner.fail[("api.clerk.com", "POST")] = 401
        result = runner.invoke(app, ["domain", "add", "shop", "--clerk-key", "sk_bad"])

        assert result.exit_code == 0, result.output
        assert "Warning:" in result.output
        assert "Run manually" in result.output
        assert "configured (Vercel + DNS)" in result.output

    def test_dns_only(self, logged_in, fake_provisioner, project_dir):
        result = runner.invoke(app, ["domain", "add", "docs", "--target", "docs.example.org"])

        assert result.exit_code == 0, result.output
        assert "docs.crafter.run -> docs.example.org" in result.output
        assert fake_provisioner.calls("api.vercel.com") == []

    def test_no_vercel_sets_up_clerk_only(self, logged_in, fake_provisioner, project_dir):
        result = runner.invoke(app, ["domain", "add", "shop", "--no-vercel", "--clerk-key", "sk_test"])

        assert result.exit_code == 0, result.output
        assert "Vercel:" not in result.output
        assert "configured (Clerk + DNS)" in result.output
        assert fake_provisioner.calls("api.vercel.com") == []
        assert "shop" not in fake_provisioner.project_domains
        assert {r["name"] for r in fake_provisioner.records} == {"clerk.shop", "accounts.shop"}
        assert read_events()[-1].params["mode"] == "clerk-only"

    def test_no_vercel_with_no_clerk_exits(self, logged_in, fake_provisioner, project_dir):
        result = runner.invoke(app, ["domain", "add", "shop", "--no-vercel", "--no-clerk"])

        assert result.exit_code == 1
        assert "nothing to configure" in result.output
        assert fake_provisioner.records == []

    def test_critical_failure_exits(self, logged_in, fake_provisioner, project_dir):
        fake_provisioner.fail[("api.vercel.com", "POST")] = 403
        result = runner.invoke(app, ["domain", "add", "shop"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Vercel API error: 403" in result.output
        assert fake_provisioner.records == []
        (event,) = read_events()
        assert event.result == "failure"

    def test_missing_credentials(self, project_dir):
        result = runner.invoke(app, ["domain", "add", "shop"])
        assert result.exit_code == 1
        assert "Missing credentials" in result.output


class TestDomainRemoveAndList:
    def test_remove(self, logged_in, fake_provisioner, project_dir):
        fake_provisioner.records = [{"type": "CNAME", "name": "docs", "cname": "cname.vercel-dns.com", "ttl": 3600}]
        fake_provisioner.project_domains["docs"] = ["docs.crafter.run"]

        result = runner.invoke(app, ["domain", "remove", "docs"])

        assert result.exit_code == 0, result.output
        assert "has been removed" in result.output
        assert fake_provisioner.records == []
        assert fake_provisioner.project_domains["docs"] == []

    def test_remove_all_failing_exits(self, logged_in, fake_provisioner, project_dir):
        fake_provisioner.fail[("spaceship.dev", "DELETE")] = 500
        result = runner.invoke(app, ["domain", "remove", "gone"])

        assert result.exit_code == 1
        assert "Vercel API error: 404" in result.output

    def test_list(self, logged_in, fake_provisioner):
        fake_provisioner.records = [
            {"type": "CNAME", "name": "shop", "cname": "cname.vercel-dns.com", "ttl": 3600},
            {"type": "TXT", "name": "_verify", "value": "x", "ttl": 3600},
        ]
        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert "shop.crafter.run" in result.output
        assert "_verify" not in result.output
        assert "1 record(s)" in result.output

    def test_list_empty(self, logged_in, fake_provisioner):
        result = runner.invoke(app, ["domain", "list"])
        assert "No CNAME records found" in result.output


# ---------------------------------------------------------------------------
# claude / projects
# ---------------------------------------------------------------------------


class TestClaude:
    def test_install_hints_update_when_skipped(self):
        result_model = InstallResult(
            repo_action="cloned",
            commands=CommandsResult(copied=["review.md"], skipped=["commit.md"]),
            agents=["planner.md"],
        )
        with patch("crafters.commands.claude.install_claude_dx", AsyncMock(return_value=result_model)) as install:
            result = runner.invoke(app, ["claude", "install"])

        assert result.exit_code == 0, result.output
        assert install.await_args.args[0] is False
        assert "Commands skipped:" in result.output
        assert "crafters claude update" in result.output
        assert read_events()[-1].action == "claude.install"

    def test_update_forces(self):
        result_model = InstallResult(repo_action="updated")
        with patch("crafters.commands.claude.install_claude_dx", AsyncMock(return_value=result_model)) as install:
            result = runner.invoke(app, ["claude", "update"])

        assert result.exit_code == 0, result.output
        assert install.await_args.args[0] is True
        assert "updated" in result.output

    def test_corrupt_settings_is_reported(self, settings):
        source = settings.claude_dx_dir / ".claude"
        source.mkdir(parents=True)
        (source / "settings.json").write_text(json.dumps({"model": "opus"}))
        settings.claude_dir.mkdir(parents=True)
        (settings.claude_dir / "settings.json").write_text("{not json")

        with patch("crafters.services.claude_dx.clone_or_pull", AsyncMock(return_value="updated")):
            result = runner.invoke(app, ["claude", "install"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Invalid JSON in" in result.output
        assert read_events()[-1].result == "failure"


class TestProjectsSync:
    def test_sync_writes_snapshot(self, logged_in, vendors, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "crafters.commands.projects.SpaceshipClient", partial(SpaceshipClient, transport=vendors.transport)
        )
        monkeypatch.setattr(
            "crafters.commands.projects.VercelClient", partial(VercelClient, transport=vendors.transport)
        )
        vendors.records = [{"type": "CNAME", "name": "blog", "cname": "cname.vercel-dns.com", "ttl": 3600}]
        vendors.projects = [{"id": "prj_1", "name": "blog"}]
        output = tmp_path / "projects.json"

        result = runner.invoke(app, ["projects", "sync", "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert "[4/4]" in result.output
        data = json.loads(output.read_text())
        assert data["stats"]["totalSubdomains"] == 1
        assert data["projects"][0]["vercel"]["projectName"] == "blog"


# ---------------------------------------------------------------------------
# root
# ---------------------------------------------------------------------------


class TestRoot:
    def test_no_command_needs_terminal(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "needs a terminal" in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("domain", "claude", "projects", "login", "logout", "whoami"):
            assert name in result.output
