"""Claude Code configuration commands."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from crafters_common import InstallResult
from crafters.audit import audit
from crafters.console import error_boundary
from crafters.services.claude_dx import ClaudeDxPaths, install_claude_dx

app = typer.Typer(no_args_is_help=True)
console = Console()


def _install(force: bool) -> InstallResult:
    paths = ClaudeDxPaths.default()
    console.print(f"[bold][1/2][/bold] Syncing claude-dx repo into {paths.repo_dir}")
    with audit("claude.install", target=str(paths.claude_dir), force=force) as event:
        result = asyncio.run(install_claude_dx(force, paths))
        event.params["repo_action"] = result.repo_action
        event.params["summary"] = result.summary()
    console.print(f"[bold][2/2][/bold] Repo {result.repo_action}, configs copied to {paths.claude_dir}")
    return result


@app.command()
def install(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing commands"),
) -> None:
    """Install Claude Code commands, agents and skills from claude-dx."""
    with error_boundary():
        result = _install(force)

    if result.commands.copied:
        console.print(f"[green]Commands installed:[/green] [cyan]{', '.join(result.commands.copied)}[/cyan]")
    if result.commands.skipped:
        console.print(f"[yellow]Commands skipped:[/yellow] [dim]{', '.join(result.commands.skipped)}[/dim]")
    if result.agents:
        console.print(f"[green]Agents installed:[/green] [cyan]{', '.join(result.agents)}[/cyan]")
    if result.skills:
        console.print(f"[green]Skills installed:[/green] [cyan]{', '.join(result.skills)}[/cyan]")
    if result.settings_merged:
        console.print("[green]Settings merged[/green]")

    if result.commands.skipped and not force:
        console.print(
            f"\n[green bold]Done![/green bold] {result.summary()} installed. "
            "Use [cyan]crafters claude update[/cyan] to overwrite skipped."
        )
    else:
        console.print(f"\n[green bold]Done![/green bold] {result.summary()} installed.")


@app.command()
def update() -> None:
    """Re-sync claude-dx and overwrite every installed config."""
    with error_boundary():
        result = _install(force=True)
    console.print(f"\n[green bold]Done![/green bold] {result.summary()} updated.")
