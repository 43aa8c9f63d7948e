"""Credentials store and effective-config resolution."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from crafters_common import CraftersSettings, ResolvedConfig, StoredConfig
from crafters_common.constants import (
    DEFAULT_BASE_DOMAIN,
    ENV_BASE_DOMAIN,
    ENV_CLERK_SECRET_KEY,
    ENV_SPACESHIP_API_KEY,
    ENV_SPACESHIP_API_SECRET,
    ENV_VERCEL_TEAM_ID,
    ENV_VERCEL_TOKEN,
)
from crafters.errors import ConfigurationError

log = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> CraftersSettings:
    """Return the global CraftersSettings (resolved once, cached)."""
    return CraftersSettings()


def get_config_path() -> Path:
    return get_settings().config_file


def config_exists() -> bool:
    return get_config_path().is_file()


def load_config() -> StoredConfig | None:
    """Read the stored credentials, or None when absent or unreadable."""
    path = get_config_path()
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("Ignoring unreadable config %s: %s", path, exc)
        return None
    try:
        return StoredConfig.model_validate(data)
    except ValidationError as exc:
        log.warning("Ignoring invalid config %s: %s", path, exc)
        return None


def save_config(config: StoredConfig) -> Path:
    """Write credentials, owner read/write only."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.to_json())
    path.chmod(0o600)
    return path


def delete_config() -> bool:
    """Remove the stored credentials. Returns False if there were none."""
    path = get_config_path()
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def _env(name: str) -> str | None:
    return os.environ.get(name) or None


def resolve_config(clerk_secret_key: str | None = None) -> ResolvedConfig:
    """Layer env overrides on top of the stored file.

    Resolution order per value: environment variable, stored file, default.
    Raises ConfigurationError before any vendor call if Spaceship key/secret
    or the Vercel token is missing.
    """
    stored = load_config()

    api_key = _env(ENV_SPACESHIP_API_KEY) or (stored.spaceship.api_key if stored else None)
    api_secret = _env(ENV_SPACESHIP_API_SECRET) or (stored.spaceship.api_secret if stored else None)
    base_domain = _env(ENV_BASE_DOMAIN) or (stored.base_domain if stored else None) or DEFAULT_BASE_DOMAIN
    vercel_token = _env(ENV_VERCEL_TOKEN) or (stored.vercel.token if stored else None)
    vercel_team_id = _env(ENV_VERCEL_TEAM_ID) or (stored.vercel.team_id if stored else None)
    clerk_key = clerk_secret_key or _env(ENV_CLERK_SECRET_KEY)

    if not api_key or not api_secret:
        raise ConfigurationError(
            "Missing credentials. Run `crafters login` or set "
            f"{ENV_SPACESHIP_API_KEY}/{ENV_SPACESHIP_API_SECRET}"
        )
    if not vercel_token:
        raise ConfigurationError(
            f"Missing Vercel token. Run `crafters login` or set {ENV_VERCEL_TOKEN}"
        )

    return ResolvedConfig(
        api_key=api_key,
        api_secret=api_secret,
        vercel_token=vercel_token,
        vercel_team_id=vercel_team_id,
        clerk_secret_key=clerk_key,
        base_domain=base_domain,
    )


def mask(secret: str, visible: int = 8) -> str:
    """Show the first characters of a secret for whoami-style displays."""
    return f"{secret[:visible]}..."
