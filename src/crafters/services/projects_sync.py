"""Projects sync: join DNS records, Vercel projects and GitHub repos."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from crafters_common import (
    DEFAULT_VERCEL_CNAME,
    VERCEL_DNS_MARKER,
    DnsRecord,
    GithubMeta,
    ProjectEntry,
    ProjectsSnapshot,
    SnapshotStats,
    VercelLink,
    VercelProject,
)
from crafters.services import github
from crafters.services.spaceship import SpaceshipClient
from crafters.services.vercel import VercelClient

log = logging.getLogger(__name__)

RepoFetcher = Callable[[str], Awaitable[GithubMeta | None]]
Progress = Callable[[str], None]


# ---------------------------------------------------------------------------
# Matching (pure functions, testable)
# ---------------------------------------------------------------------------


def vercel_cnames(records: list[DnsRecord]) -> list[DnsRecord]:
    """CNAME records whose target points at Vercel."""
    return [r for r in records if r.is_cname and VERCEL_DNS_MARKER in (r.cname or "")]


def _link(project: VercelProject) -> VercelLink:
    return VercelLink(
        project_id=project.id,
        project_name=project.name,
        framework=project.framework,
        repo=project.repo,
    )


def _label(alias: str, base_domain: str) -> str | None:
    suffix = f".{base_domain}"
    if alias.endswith(suffix):
        return alias[: -len(suffix)]
    return None


def build_alias_index(projects: list[VercelProject], base_domain: str) -> dict[str, VercelLink]:
    """Map subdomain label -> project from aliases under ``base_domain``.

    Target aliases (production etc.) are indexed before latest-deployment
    aliases; the first project to claim a label keeps it.
    """
    index: dict[str, VercelLink] = {}
    for project in projects:
        for alias in project.target_aliases():
            label = _label(alias, base_domain)
            if label and label not in index:
                index[label] = _link(project)
    for project in projects:
        for alias in project.deployment_aliases():
            label = _label(alias, base_domain)
            if label and label not in index:
                index[label] = _link(project)
    return index


def match_project(
    subdomain: str,
    alias_index: dict[str, VercelLink],
    projects: list[VercelProject],
) -> VercelLink | None:
    """Alias match first, then project name equal to the label (with or without hyphens)."""
    if subdomain in alias_index:
        return alias_index[subdomain]
    stripped = subdomain.replace("-", "")
    for project in projects:
        if project.name == subdomain or project.name == stripped:
            return _link(project)
    return None


def build_entries(
    records: list[DnsRecord],
    projects: list[VercelProject],
    base_domain: str,
) -> list[ProjectEntry]:
    """One entry per record; unmatched records keep ``vercel=None``."""
    alias_index = build_alias_index(projects, base_domain)
    entries: list[ProjectEntry] = []
    for record in records:
        entries.append(
            ProjectEntry(
                subdomain=record.name,
                domain=record.fqdn(base_domain),
                dns_target=record.cname or DEFAULT_VERCEL_CNAME,
                vercel=match_project(record.name, alias_index, projects),
            )
        )
    return entries


# ---------------------------------------------------------------------------
# GitHub metadata
# ---------------------------------------------------------------------------


def parse_repo_view(data: dict[str, Any], has_claude_md: bool) -> GithubMeta:
    topics = [
        t if isinstance(t, str) else t.get("name", "")
        for t in data.get("repositoryTopics") or []
    ]
    language = (data.get("primaryLanguage") or {}).get("name")
    return GithubMeta(
        url=data.get("url", ""),
        description=data.get("description"),
        stars=data.get("stargazerCount") or 0,
        topics=[t for t in topics if t],
        language=language or None,
        has_claude_md=has_claude_md,
        is_archived=data.get("isArchived") or False,
        updated_at=data.get("updatedAt") or "",
    )


async def fetch_repo_meta(full_repo: str) -> GithubMeta | None:
    view, has_claude_md = await asyncio.gather(
        github.repo_view(full_repo),
        github.has_file(full_repo, "CLAUDE.md"),
    )
    if view is None:
        return None
    return parse_repo_view(view, has_claude_md)


async def fetch_all_repo_meta(repos: set[str], fetch: RepoFetcher = fetch_repo_meta) -> dict[str, GithubMeta]:
    """Fetch each distinct repo once, concurrently."""
    ordered = sorted(repos)
    results = await asyncio.gather(*(fetch(repo) for repo in ordered))
    return {repo: meta for repo, meta in zip(ordered, results) if meta is not None}


# ---------------------------------------------------------------------------
# Snapshot assembly
# ---------------------------------------------------------------------------


def sort_entries(entries: list[ProjectEntry]) -> list[ProjectEntry]:
    """Stars descending; equal stars fall back to subdomain for a stable snapshot."""
    return sorted(entries, key=lambda e: (-(e.github.stars if e.github else 0), e.subdomain))


def compute_stats(entries: list[ProjectEntry]) -> SnapshotStats:
    return SnapshotStats(
        total_subdomains=len(entries),
        total_with_vercel=sum(1 for e in entries if e.vercel),
        total_with_github=sum(1 for e in entries if e.github),
        total_stars=sum(e.github.stars for e in entries if e.github),
    )


async def sync_projects(
    spaceship: SpaceshipClient,
    vercel: VercelClient,
    base_domain: str,
    *,
    fetch: RepoFetcher = fetch_repo_meta,
    progress: Progress | None = None,
) -> ProjectsSnapshot:
    """Build a point-in-time snapshot of every Vercel-backed subdomain."""

    def report(message: str) -> None:
        log.info(message)
        if progress:
            progress(message)

    records = vercel_cnames(await spaceship.list_records())
    report(f"Found {len(records)} Vercel CNAME records")

    projects = await vercel.list_all_projects()
    report(f"Found {len(projects)} projects")

    entries = build_entries(records, projects, base_domain)
    matched = sum(1 for e in entries if e.vercel)
    report(f"Matched {matched}/{len(entries)} subdomains")

    repos = {e.vercel.repo for e in entries if e.vercel and e.vercel.repo}
    metadata = await fetch_all_repo_meta(repos, fetch)
    report(f"Fetched metadata for {len(metadata)} repos")

    for entry in entries:
        if entry.vercel and entry.vercel.repo:
            entry.github = metadata.get(entry.vercel.repo)

    entries = sort_entries(entries)
    return ProjectsSnapshot(
        base_domain=base_domain,
        projects=entries,
        stats=compute_stats(entries),
    )


def write_snapshot(snapshot: ProjectsSnapshot, path: Path) -> Path:
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.to_json() + "\n")
    return path
