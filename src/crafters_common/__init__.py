"""crafters common: shared models and constants for the crafters CLI and TUI."""

from crafters_common.config import (
    CraftersSettings,
    ResolvedConfig,
    SiteEntry,
    SpaceshipCredentials,
    StoredConfig,
    VercelCredentials,
)
from crafters_common.constants import (
    CLAUDE_DX_REPO,
    DEFAULT_BASE_DOMAIN,
    DEFAULT_TTL,
    DEFAULT_VERCEL_CNAME,
    VERCEL_DNS_MARKER,
)
from crafters_common.models import (
    AuditEvent,
    ClerkDomain,
    CnameTarget,
    CommandsResult,
    DnsRecord,
    GithubMeta,
    InstallResult,
    ProjectEntry,
    ProjectsSnapshot,
    ProvisioningMode,
    ProvisioningOutcome,
    RemovalOutcome,
    SnapshotStats,
    StepOutcome,
    VercelLink,
    VercelProject,
)

__all__ = [
    "AuditEvent",
    "CLAUDE_DX_REPO",
    "ClerkDomain",
    "CnameTarget",
    "CommandsResult",
    "CraftersSettings",
    "DEFAULT_BASE_DOMAIN",
    "DEFAULT_TTL",
    "DEFAULT_VERCEL_CNAME",
    "DnsRecord",
    "GithubMeta",
    "InstallResult",
    "ProjectEntry",
    "ProjectsSnapshot",
    "ProvisioningMode",
    "ProvisioningOutcome",
    "RemovalOutcome",
    "ResolvedConfig",
    "SiteEntry",
    "SnapshotStats",
    "SpaceshipCredentials",
    "StepOutcome",
    "StoredConfig",
    "VERCEL_DNS_MARKER",
    "VercelCredentials",
    "VercelLink",
    "VercelProject",
]
