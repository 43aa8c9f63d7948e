"""Projects snapshot models written by ``crafters projects sync``."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class _CamelModel(BaseModel):
    model_config = {"populate_by_name": True}


class VercelLink(_CamelModel):
    project_id: str = Field(alias="projectId")
    project_name: str = Field(alias="projectName")
    framework: str | None = None
    repo: str | None = None


class GithubMeta(_CamelModel):
    url: str = ""
    description: str | None = None
    stars: int = 0
    topics: list[str] = Field(default_factory=list)
    language: str | None = None
    has_claude_md: bool = Field(default=False, alias="hasClaudeMd")
    is_archived: bool = Field(default=False, alias="isArchived")
    updated_at: str = Field(default="", alias="updatedAt")


class ProjectEntry(_CamelModel):
    """One CNAME record joined with its Vercel project and GitHub repo."""

    subdomain: str
    domain: str
    dns_target: str = Field(alias="dnsTarget")
    vercel: VercelLink | None = None
    github: GithubMeta | None = None


class SnapshotStats(_CamelModel):
    total_subdomains: int = Field(default=0, alias="totalSubdomains")
    total_with_vercel: int = Field(default=0, alias="totalWithVercel")
    total_with_github: int = Field(default=0, alias="totalWithGithub")
    total_stars: int = Field(default=0, alias="totalStars")


class ProjectsSnapshot(_CamelModel):
    last_sync: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="lastSync")
    base_domain: str = Field(alias="baseDomain")
    projects: list[ProjectEntry] = Field(default_factory=list)
    stats: SnapshotStats = Field(default_factory=SnapshotStats)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
