"""Central configuration records for crafters."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from crafters_common.constants import (
    AUDIT_FILE_NAME,
    CLAUDE_CONFIG_DIR,
    CLAUDE_DX_DIR_NAME,
    CONFIG_FILE_NAME,
    CRAFTERS_DIR,
    DEFAULT_BASE_DOMAIN,
)


def _default_crafters_dir() -> Path:
    env = os.environ.get("CRAFTERS_HOME")
    if env:
        return Path(env)
    return CRAFTERS_DIR


def _default_claude_dir() -> Path:
    env = os.environ.get("CLAUDE_CONFIG_DIR")
    if env:
        return Path(env)
    return CLAUDE_CONFIG_DIR


class CraftersSettings(BaseModel):
    """Local paths, resolved once at startup."""

    crafters_dir: Path = Field(default_factory=_default_crafters_dir)
    claude_dir: Path = Field(default_factory=_default_claude_dir)

    @property
    def config_file(self) -> Path:
        return self.crafters_dir / CONFIG_FILE_NAME

    @property
    def audit_jsonl_path(self) -> Path:
        return self.crafters_dir / AUDIT_FILE_NAME

    @property
    def claude_dx_dir(self) -> Path:
        return self.crafters_dir / CLAUDE_DX_DIR_NAME


# ---------------------------------------------------------------------------
# Stored credentials file (~/.crafters/config.json)
# ---------------------------------------------------------------------------


class SpaceshipCredentials(BaseModel):
    model_config = {"populate_by_name": True}

    api_key: str = Field(alias="apiKey")
    api_secret: str = Field(alias="apiSecret")


class VercelCredentials(BaseModel):
    model_config = {"populate_by_name": True}

    token: str
    team_id: str | None = Field(default=None, alias="teamId")


class SiteEntry(BaseModel):
    model_config = {"populate_by_name": True}

    repo: str
    data_path: str | None = Field(default=None, alias="dataPath")


class StoredConfig(BaseModel):
    """On-disk shape of the credentials file (camelCase keys)."""

    model_config = {"populate_by_name": True}

    spaceship: SpaceshipCredentials
    vercel: VercelCredentials
    base_domain: str = Field(default=DEFAULT_BASE_DOMAIN, alias="baseDomain")
    sites: dict[str, SiteEntry] | None = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class ResolvedConfig(BaseModel):
    """Effective credentials for one invocation (env > file > default)."""

    model_config = {"frozen": True}

    api_key: str
    api_secret: str
    vercel_token: str
    vercel_team_id: str | None = None
    clerk_secret_key: str | None = None
    base_domain: str = DEFAULT_BASE_DOMAIN

    def full_domain(self, subdomain: str) -> str:
        return f"{subdomain}.{self.base_domain}"
