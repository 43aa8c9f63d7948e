"""Working-directory heuristics for the interactive add flow.

Every check is advisory: an unreadable or missing file means "not
detected", never an error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from crafters_common.constants import ENV_CLERK_SECRET_KEY

log = logging.getLogger(__name__)

_ENV_FILES = (".env", ".env.local", ".env.development", ".env.development.local")
_CLERK_PACKAGE_MARKER = "@clerk/"


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError):
        return None


def detect_vercel_project(cwd: Path) -> str | None:
    """Project slug from ``.vercel/project.json`` if the directory is linked."""
    raw = _read_text(cwd / ".vercel" / "project.json")
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.debug("Unparseable .vercel/project.json in %s", cwd)
        return None
    if not isinstance(data, dict):
        return None
    name = data.get("projectName")
    return name if isinstance(name, str) and name else None


def detect_clerk(cwd: Path) -> bool:
    """True when the project depends on a Clerk SDK or carries a Clerk key."""
    package_json = _read_text(cwd / "package.json")
    if package_json and _CLERK_PACKAGE_MARKER in package_json:
        return True
    return detect_clerk_secret_key(cwd) is not None or any(
        ENV_CLERK_SECRET_KEY in (_read_text(cwd / name) or "") for name in _ENV_FILES
    )


def detect_clerk_secret_key(cwd: Path) -> str | None:
    """``CLERK_SECRET_KEY`` value from the first env file that defines it."""
    for name in _ENV_FILES:
        content = _read_text(cwd / name)
        if not content:
            continue
        for line in content.splitlines():
            key, sep, value = line.strip().partition("=")
            if sep and key.strip().removeprefix("export ").strip() == ENV_CLERK_SECRET_KEY:
                value = value.strip().strip("\"'")
                if value:
                    return value
    return None


def resolve_project(explicit: str | None, cwd: Path, subdomain: str) -> str:
    """Explicit flag wins, then the linked project, then the subdomain itself."""
    return explicit or detect_vercel_project(cwd) or subdomain
