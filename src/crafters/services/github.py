"""git and gh subprocess wrappers."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from crafters.errors import GitError

log = logging.getLogger(__name__)

REPO_VIEW_FIELDS = "url,description,stargazerCount,repositoryTopics,primaryLanguage,isArchived,updatedAt"


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


async def _run(cmd: list[str], *, cwd: Path | None = None) -> CommandResult:
    log.debug("run: %s", " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd) if cwd else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        return CommandResult(127, "", str(exc))
    stdout, stderr = await proc.communicate()
    return CommandResult(
        proc.returncode if proc.returncode is not None else 1,
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace"),
    )


async def clone(repo: str, dest: Path) -> None:
    """``gh repo clone`` into ``dest``."""
    cmd = ["gh", "repo", "clone", repo, str(dest)]
    result = await _run(cmd)
    if result.returncode != 0:
        raise GitError(cmd, result.returncode, result.stderr)


async def pull(path: Path) -> None:
    cmd = ["git", "pull"]
    result = await _run(cmd, cwd=path)
    if result.returncode != 0:
        raise GitError(cmd, result.returncode, result.stderr)


async def repo_view(full_repo: str) -> dict[str, Any] | None:
    """Repository metadata via ``gh repo view --json``; None on any failure."""
    result = await _run(["gh", "repo", "view", full_repo, "--json", REPO_VIEW_FIELDS])
    if result.returncode != 0:
        log.debug("gh repo view %s failed: %s", full_repo, result.stderr.strip())
        return None
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError:
        return None


async def has_file(full_repo: str, path: str) -> bool:
    result = await _run(["gh", "api", f"repos/{full_repo}/contents/{path}", "--silent"])
    return result.returncode == 0
