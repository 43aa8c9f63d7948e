"""Vercel project and Clerk domain models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class VercelProject(BaseModel):
    """The subset of a Vercel project this tool reads."""

    model_config = {"populate_by_name": True}

    id: str
    name: str
    framework: str | None = None
    updated_at: int | None = Field(default=None, alias="updatedAt")
    link: dict[str, Any] | None = None
    targets: dict[str, Any] = Field(default_factory=dict)
    latest_deployments: list[dict[str, Any]] = Field(default_factory=list, alias="latestDeployments")

    @field_validator("framework", mode="before")
    @classmethod
    def _framework_is_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("targets", mode="before")
    @classmethod
    def _targets_not_null(cls, value: Any) -> dict[str, Any]:
        return value or {}

    @field_validator("latest_deployments", mode="before")
    @classmethod
    def _deployments_not_null(cls, value: Any) -> list[dict[str, Any]]:
        return value or []

    @property
    def repo(self) -> str | None:
        """``org/repo`` of the linked Git repository, if any."""
        if not self.link:
            return None
        org = self.link.get("org")
        repo = self.link.get("repo")
        if org and repo:
            return f"{org}/{repo}"
        return None

    def target_aliases(self) -> list[str]:
        """Aliases of every deployment target (production, preview, ...)."""
        aliases: list[str] = []
        for target in self.targets.values():
            if not target:
                continue
            aliases.extend(target.get("alias") or [])
        return aliases

    def deployment_aliases(self) -> list[str]:
        aliases: list[str] = []
        for deploy in self.latest_deployments:
            aliases.extend(deploy.get("alias") or [])
        return aliases


class CnameTarget(BaseModel):
    """A CNAME the auth provider requires for a registered domain."""

    host: str
    value: str
    required: bool = True


class ClerkDomain(BaseModel):
    """A domain registered on the Clerk instance."""

    id: str = ""
    name: str
    is_satellite: bool = False
    frontend_api_url: str | None = None
    cname_targets: list[CnameTarget] = Field(default_factory=list)

    @field_validator("cname_targets", mode="before")
    @classmethod
    def _targets_not_null(cls, value: Any) -> list[Any]:
        return value or []
