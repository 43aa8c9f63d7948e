"""Custom exceptions for the crafters CLI."""

from __future__ import annotations


class CraftersError(Exception):
    """Base exception for all crafters operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(CraftersError):
    """Required credentials are missing."""


class VendorApiError(CraftersError):
    """A vendor API answered with a non-success status or was unreachable."""

    vendor = "Vendor"

    def __init__(self, status: int | None, body: str = "", *, message: str | None = None):
        self.status = status
        self.body = body
        if message is None:
            shown = status if status is not None else "network"
            message = f"{self.vendor} API error: {shown} - {body}"
        super().__init__(message)


class SpaceshipError(VendorApiError):
    """Spaceship DNS API call failed."""

    vendor = "Spaceship"


class VercelError(VendorApiError):
    """Vercel API call failed."""

    vendor = "Vercel"


class ClerkError(VendorApiError):
    """Clerk Backend API call failed."""

    vendor = "Clerk"


class CommandError(CraftersError):
    """An external command exited non-zero."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed: {' '.join(cmd)}\nstderr: {stderr.strip()}")


class GitError(CommandError):
    """git / gh clone or pull failed."""
