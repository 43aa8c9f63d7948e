"""Shared CLI output helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

import typer
from rich.console import Console
from rich.logging import RichHandler

from crafters.errors import CraftersError

err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """DEBUG through rich when ``--verbose``, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO; keep it behind --verbose.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@contextmanager
def error_boundary() -> Generator[None, None, None]:
    """Turn a CraftersError into a red message and the error's exit code."""
    try:
        yield
    except CraftersError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(exc.exit_code) from exc
