"""Install Claude Code commands, agents, skills and settings from claude-dx."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from crafters_common import CLAUDE_DX_REPO, CommandsResult, InstallResult
from crafters.config import get_settings
from crafters.errors import CraftersError
from crafters.services import github

log = logging.getLogger(__name__)


@dataclass
class ClaudeDxPaths:
    repo_dir: Path
    claude_dir: Path

    @classmethod
    def default(cls) -> ClaudeDxPaths:
        settings = get_settings()
        return cls(repo_dir=settings.claude_dx_dir, claude_dir=settings.claude_dir)

    @property
    def source_dir(self) -> Path:
        return self.repo_dir / ".claude"


def is_installed(paths: ClaudeDxPaths | None = None) -> bool:
    paths = paths or ClaudeDxPaths.default()
    return paths.repo_dir.exists()


async def clone_or_pull(paths: ClaudeDxPaths, repo: str = CLAUDE_DX_REPO) -> Literal["cloned", "updated"]:
    """Clone the reference repo if absent, otherwise pull it."""
    paths.repo_dir.parent.mkdir(parents=True, exist_ok=True)
    if paths.repo_dir.exists():
        await github.pull(paths.repo_dir)
        return "updated"
    await github.clone(repo, paths.repo_dir)
    return "cloned"


def _copy_entry(src: Path, dest: Path) -> None:
    if src.is_dir():
        shutil.copytree(src, dest, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dest)


def copy_commands(paths: ClaudeDxPaths, force: bool) -> CommandsResult:
    """Copy command definitions; existing ones are skipped unless ``force``."""
    src_dir = paths.source_dir / "commands"
    dest_dir = paths.claude_dir / "commands"
    result = CommandsResult()
    if not src_dir.is_dir():
        return result

    dest_dir.mkdir(parents=True, exist_ok=True)
    for entry in sorted(src_dir.iterdir()):
        dest = dest_dir / entry.name
        if dest.exists() and not force:
            result.skipped.append(entry.name)
            continue
        _copy_entry(entry, dest)
        result.copied.append(entry.name)
    return result


def copy_agents(paths: ClaudeDxPaths) -> list[str]:
    """Copy agent definitions, always overwriting."""
    src_dir = paths.source_dir / "agents"
    dest_dir = paths.claude_dir / "agents"
    if not src_dir.is_dir():
        return []

    dest_dir.mkdir(parents=True, exist_ok=True)
    copied: list[str] = []
    for entry in sorted(src_dir.iterdir()):
        _copy_entry(entry, dest_dir / entry.name)
        copied.append(entry.name)
    return copied


def copy_skills(paths: ClaudeDxPaths) -> list[str]:
    """Copy skill directories, always overwriting. Loose files are ignored."""
    src_dir = paths.source_dir / "skills"
    dest_dir = paths.claude_dir / "skills"
    if not src_dir.is_dir():
        return []

    dest_dir.mkdir(parents=True, exist_ok=True)
    skills: list[str] = []
    for entry in sorted(src_dir.iterdir()):
        if entry.is_dir():
            shutil.copytree(entry, dest_dir / entry.name, dirs_exist_ok=True)
            skills.append(entry.name)
    return skills


def merge_settings_documents(dest: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    """Merge ``src`` settings into ``dest`` without clobbering.

    Keys missing from ``dest`` are added as-is. ``permissions`` lists are
    unioned per category (dest order first, then new src entries); a
    non-list permission value such as ``defaultMode`` is only added when
    ``dest`` lacks it. Any other key already in ``dest`` is left alone.
    """
    merged = dict(dest)
    for key, value in src.items():
        if key == "permissions" and isinstance(value, dict):
            permissions = dict(merged.get("permissions") or {})
            for category, rules in value.items():
                existing = permissions.get(category)
                if isinstance(rules, list) and isinstance(existing, (list, type(None))):
                    permissions[category] = list(dict.fromkeys([*(existing or []), *rules]))
                elif category not in permissions:
                    permissions[category] = rules
            merged["permissions"] = permissions
        elif key not in merged:
            merged[key] = value
    return merged


def _read_settings(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise CraftersError(f"Invalid JSON in {path}: {exc}") from exc


def merge_settings(paths: ClaudeDxPaths) -> bool:
    """Merge claude-dx ``settings.json`` into the user's. False if there is none."""
    src_path = paths.source_dir / "settings.json"
    dest_path = paths.claude_dir / "settings.json"
    if not src_path.is_file():
        return False

    src = _read_settings(src_path)
    dest: dict[str, Any] = {}
    if dest_path.is_file():
        dest = _read_settings(dest_path)

    merged = merge_settings_documents(dest, src)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    dest_path.write_text(json.dumps(merged, indent=2) + "\n")
    return True


async def install_claude_dx(force: bool, paths: ClaudeDxPaths | None = None) -> InstallResult:
    """Sync the repo, then copy commands, agents, skills and merge settings."""
    paths = paths or ClaudeDxPaths.default()
    repo_action = await clone_or_pull(paths)
    log.info("claude-dx %s at %s", repo_action, paths.repo_dir)

    return InstallResult(
        repo_action=repo_action,
        commands=copy_commands(paths, force),
        agents=copy_agents(paths),
        skills=copy_skills(paths),
        settings_merged=merge_settings(paths),
    )
