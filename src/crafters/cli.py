"""Root Typer application for the crafters CLI."""

from __future__ import annotations

import typer

from crafters.commands import claude, domain, login, projects
from crafters.console import error_boundary, setup_logging

app = typer.Typer(
    name="crafters",
    help="Crafter Station CLI: domain management and Claude Code configuration.",
    invoke_without_command=True,
)

app.add_typer(domain.app, name="domain", help="Manage subdomains for Vercel projects.")
app.add_typer(claude.app, name="claude", help="Manage Claude Code configuration.")
app.add_typer(projects.app, name="projects", help="Manage Crafter Station projects metadata.")
app.command(name="login")(login.login)
app.command(name="logout")(login.logout)
app.command(name="whoami")(login.whoami)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log vendor requests to stderr"),
) -> None:
    """Launch the interactive shell when no subcommand is given."""
    if ctx.invoked_subcommand is not None:
        setup_logging(verbose)
        return

    from crafters.tui.app import launch_tui

    with error_boundary():
        launch_tui()


if __name__ == "__main__":
    app()
