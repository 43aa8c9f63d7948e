"""Tests for working-directory detection heuristics."""

from __future__ import annotations

import json
from pathlib import Path

from crafters.services.detection import (
    detect_clerk,
    detect_clerk_secret_key,
    detect_vercel_project,
    resolve_project,
)


class TestVercelProject:
    def test_linked(self, tmp_path: Path):
        (tmp_path / ".vercel").mkdir()
        (tmp_path / ".vercel" / "project.json").write_text(
            json.dumps({"projectId": "prj_1", "orgId": "team_1", "projectName": "myapp-web"})
        )
        assert detect_vercel_project(tmp_path) == "myapp-web"

    def test_not_linked(self, tmp_path: Path):
        assert detect_vercel_project(tmp_path) is None

    def test_malformed(self, tmp_path: Path):
        (tmp_path / ".vercel").mkdir()
        (tmp_path / ".vercel" / "project.json").write_text("{oops")
        assert detect_vercel_project(tmp_path) is None

    def test_resolve_precedence(self, tmp_path: Path):
        assert resolve_project(None, tmp_path, "myapp") == "myapp"
        (tmp_path / ".vercel").mkdir()
        (tmp_path / ".vercel" / "project.json").write_text(json.dumps({"projectName": "linked"}))
        assert resolve_project(None, tmp_path, "myapp") == "linked"
        assert resolve_project("explicit", tmp_path, "myapp") == "explicit"


class TestClerk:
    def test_package_dependency(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"@clerk/nextjs": "^6.0.0"}}))
        assert detect_clerk(tmp_path) is True
        assert detect_clerk_secret_key(tmp_path) is None

    def test_nothing(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"next": "15"}}))
        assert detect_clerk(tmp_path) is False

    def test_secret_key_from_env_local(self, tmp_path: Path):
        (tmp_path / ".env").write_text("OTHER=1\n")
        (tmp_path / ".env.local").write_text('# comment\nexport CLERK_SECRET_KEY="sk_test_abc"\n')
        assert detect_clerk_secret_key(tmp_path) == "sk_test_abc"
        assert detect_clerk(tmp_path) is True

    def test_first_file_wins(self, tmp_path: Path):
        (tmp_path / ".env").write_text("CLERK_SECRET_KEY=sk_first\n")
        (tmp_path / ".env.local").write_text("CLERK_SECRET_KEY=sk_second\n")
        assert detect_clerk_secret_key(tmp_path) == "sk_first"

    def test_empty_value_is_not_a_key(self, tmp_path: Path):
        (tmp_path / ".env").write_text("CLERK_SECRET_KEY=\n")
        assert detect_clerk_secret_key(tmp_path) is None
        assert detect_clerk(tmp_path) is True
