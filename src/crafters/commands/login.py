"""Credential commands: login, logout, whoami."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from crafters_common import DEFAULT_BASE_DOMAIN, SpaceshipCredentials, StoredConfig, VercelCredentials
from crafters.audit import audit
from crafters.config import delete_config, get_config_path, load_config, mask, save_config
from crafters.console import error_boundary

console = Console()


def login(
    spaceship_key: str = typer.Option(..., "--spaceship-key", help="Spaceship API key"),
    spaceship_secret: str = typer.Option(
        ..., "--spaceship-secret", prompt=True, hide_input=True, help="Spaceship API secret"
    ),
    vercel_token: str = typer.Option(..., "--vercel-token", prompt=True, hide_input=True, help="Vercel token"),
    vercel_team_id: Optional[str] = typer.Option(None, "--vercel-team-id", help="Vercel team ID"),
    base_domain: str = typer.Option(DEFAULT_BASE_DOMAIN, "--base-domain", help="Base domain"),
) -> None:
    """Store Spaceship and Vercel credentials."""
    config = StoredConfig(
        spaceship=SpaceshipCredentials(api_key=spaceship_key, api_secret=spaceship_secret),
        vercel=VercelCredentials(token=vercel_token, team_id=vercel_team_id or None),
        base_domain=base_domain,
    )
    with error_boundary(), audit("login", target=base_domain):
        path = save_config(config)
    console.print(f"[green]Credentials saved to[/green] [dim]{path}[/dim]")


def logout() -> None:
    """Remove stored credentials."""
    with error_boundary(), audit("logout", target=str(get_config_path())) as event:
        removed = delete_config()
        event.params["removed"] = removed
    if removed:
        console.print("[green]Credentials removed.[/green]")
    else:
        console.print("[yellow]No credentials found.[/yellow]")


def whoami() -> None:
    """Show the stored configuration with secrets masked."""
    config = load_config()
    if config is None:
        console.print("[yellow]Not logged in.[/yellow] Run [cyan]crafters login[/cyan] first.")
        return

    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Base Domain:     [cyan]{config.base_domain}[/cyan]")
    console.print(f"  Spaceship Key:   [dim]{mask(config.spaceship.api_key)}[/dim]")
    console.print(f"  Vercel Token:    [dim]{mask(config.vercel.token)}[/dim]")
    if config.vercel.team_id:
        console.print(f"  Vercel Team ID:  [dim]{config.vercel.team_id}[/dim]")
    console.print(f"\nConfig: [dim]{get_config_path()}[/dim]")
