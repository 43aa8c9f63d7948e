"""Projects metadata commands."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from crafters_common import ProjectsSnapshot, ResolvedConfig
from crafters.audit import audit
from crafters.config import resolve_config
from crafters.console import error_boundary
from crafters.services.projects_sync import sync_projects, write_snapshot
from crafters.services.spaceship import SpaceshipClient
from crafters.services.vercel import VercelClient

app = typer.Typer(no_args_is_help=True)
console = Console()

_STEPS = 4


async def _sync(config: ResolvedConfig) -> ProjectsSnapshot:
    step = 0

    def progress(message: str) -> None:
        nonlocal step
        step += 1
        console.print(f"[bold][{step}/{_STEPS}][/bold] {message}")

    async with SpaceshipClient(config.api_key, config.api_secret, config.base_domain) as spaceship, VercelClient(
        config.vercel_token, config.vercel_team_id
    ) as vercel:
        return await sync_projects(spaceship, vercel, config.base_domain, progress=progress)


@app.command()
def sync(
    output: Path = typer.Option(Path("./projects.json"), "--output", "-o", help="Output file path"),
) -> None:
    """Join subdomains with Vercel projects and GitHub repos into a JSON snapshot."""
    with error_boundary():
        config = resolve_config()
        console.print(f"Syncing projects for [cyan]{config.base_domain}[/cyan]\n")
        with audit("projects.sync", target=config.base_domain, output=str(output)) as event:
            snapshot = asyncio.run(_sync(config))
            path = write_snapshot(snapshot, output)
            event.params["subdomains"] = snapshot.stats.total_subdomains

    stats = snapshot.stats
    table = Table(title="Projects snapshot")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Subdomains", str(stats.total_subdomains))
    table.add_row("With Vercel", str(stats.total_with_vercel))
    table.add_row("With GitHub", str(stats.total_with_github))
    table.add_row("Total stars", str(stats.total_stars))
    console.print(table)
    console.print(f"\n[green bold]Done![/green bold] Output: {path}")
