"""Subdomain management commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from crafters.audit import audit
from crafters.config import resolve_config
from crafters.console import error_boundary
from crafters.errors import CraftersError
from crafters.services import detection
from crafters.services.provisioning import Provisioner, Step

app = typer.Typer(no_args_is_help=True)
console = Console()


def _print_step(index: int, total: int, step: Step) -> None:
    console.print(f"[bold][{index}/{total}][/bold] {step.label}")


@app.command()
def add(
    subdomain: Optional[str] = typer.Argument(
        None, help="Subdomain to add (e.g. 'myapp' for myapp.crafter.run). Defaults to the current directory name."
    ),
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Vercel project slug (auto-detected from .vercel/project.json)"
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="Custom CNAME target (DNS-only, skips Vercel and Clerk)"
    ),
    clerk_key: Optional[str] = typer.Option(
        None, "--clerk-key", help="Clerk secret key (auto-detected from .env files)"
    ),
    no_clerk: bool = typer.Option(False, "--no-clerk", help="Skip Clerk domain setup"),
    no_vercel: bool = typer.Option(False, "--no-vercel", help="Skip Vercel, only set up Clerk DNS"),
) -> None:
    """Add a subdomain to a Vercel project and point DNS at it."""
    cwd = Path.cwd()
    subdomain = subdomain or cwd.name
    skip_vercel = no_vercel and not target

    with error_boundary():
        if skip_vercel and no_clerk:
            raise CraftersError("--no-vercel and --no-clerk together leave nothing to configure.")
        if not no_clerk and not target:
            clerk_key = clerk_key or detection.detect_clerk_secret_key(cwd)
        config = resolve_config(None if no_clerk else clerk_key)
        if no_clerk:
            config = config.model_copy(update={"clerk_secret_key": None})
        full_domain = config.full_domain(subdomain)

        console.print(f"Domain: [cyan]{full_domain}[/cyan]")
        if target:
            console.print(f"Target: [cyan]{target}[/cyan]")
        else:
            if skip_vercel:
                project = None
            else:
                detected = project is None
                project = detection.resolve_project(project, cwd, subdomain)
                console.print(f"Vercel: [cyan]{project}[/cyan]" + (" [dim](auto-detected)[/dim]" if detected else ""))
            if config.clerk_secret_key:
                console.print("Clerk:  [green]detected[/green] [dim](will register domain)[/dim]")
            elif not no_clerk and detection.detect_clerk(cwd):
                console.print("[yellow]Clerk detected but no CLERK_SECRET_KEY found; skipping Clerk.[/yellow]")

        with audit("domain.add", target=full_domain, project=project, custom_target=target) as event:
            outcome = asyncio.run(_add(config, subdomain, project, target, skip_vercel))
            event.params["mode"] = outcome.mode.value
            event.params["warnings"] = len(outcome.warnings)
            outcome.raise_for_failure()

    if outcome.cname_target:
        console.print(f"  CNAME: [dim]{outcome.cname_target}[/dim]")
    for cname in outcome.clerk_targets:
        console.print(f"  [cyan]{cname.host}[/cyan] -> [dim]{cname.value}[/dim]")
    for warning in outcome.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if target:
        console.print(f"\n[green bold]Done![/green bold] {full_domain} -> {target}")
        return
    parts = [] if skip_vercel else ["Vercel"]
    if "clerk" in outcome.steps_completed:
        parts.append("Clerk")
    parts.append("DNS")
    console.print(
        f"\n[green bold]Done![/green bold] {full_domain} configured ({' + '.join(parts)}). "
        "SSL issued automatically."
    )


async def _add(config, subdomain: str, project: str | None, target: str | None, skip_vercel: bool = False):
    async with Provisioner.from_config(config) as provisioner:
        return await provisioner.add(
            subdomain, project, target=target, skip_vercel=skip_vercel, on_step=_print_step
        )


@app.command()
def remove(
    subdomain: str = typer.Argument(..., help="Subdomain to remove"),
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Vercel project slug (defaults to the detected project or the subdomain)"
    ),
) -> None:
    """Remove a subdomain from its Vercel project and delete its CNAME."""
    with error_boundary():
        config = resolve_config()
        project = detection.resolve_project(project, Path.cwd(), subdomain)
        full_domain = config.full_domain(subdomain)

        console.print(f"Domain:  [cyan]{full_domain}[/cyan]")
        console.print(f"Project: [cyan]{project}[/cyan]")

        with audit("domain.remove", target=full_domain, project=project) as event:
            outcome = asyncio.run(_remove(config, subdomain, project))
            event.params["warnings"] = len(outcome.warnings)
            outcome.raise_for_failure()

    for warning in outcome.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    console.print(f"\n[yellow]{full_domain}[/yellow] has been removed.")


async def _remove(config, subdomain: str, project: str):
    async with Provisioner.from_config(config) as provisioner:
        return await provisioner.remove(subdomain, project, on_step=_print_step)


@app.command(name="list")
def list_domains() -> None:
    """List all CNAME records of the base domain."""
    with error_boundary():
        config = resolve_config()
        records = asyncio.run(_list(config))

    if not records:
        console.print("[yellow]No CNAME records found.[/yellow]")
        return

    table = Table(title=f"Subdomains of {config.base_domain}")
    table.add_column("Domain", style="cyan")
    table.add_column("Target", style="dim")
    for record in records:
        table.add_row(record.fqdn(config.base_domain), record.cname or "")
    console.print(table)
    console.print(f"{len(records)} record(s)")


async def _list(config):
    async with Provisioner.from_config(config) as provisioner:
        return await provisioner.list_domains()
