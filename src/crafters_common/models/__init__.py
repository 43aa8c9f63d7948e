"""Shared Pydantic models."""

from crafters_common.models.audit_event import AuditEvent
from crafters_common.models.claude import CommandsResult, InstallResult
from crafters_common.models.dns import DnsRecord
from crafters_common.models.hosting import ClerkDomain, CnameTarget, VercelProject
from crafters_common.models.projects import (
    GithubMeta,
    ProjectEntry,
    ProjectsSnapshot,
    SnapshotStats,
    VercelLink,
)
from crafters_common.models.provisioning import (
    ProvisioningMode,
    ProvisioningOutcome,
    RemovalOutcome,
    StepOutcome,
)

__all__ = [
    "AuditEvent",
    "ClerkDomain",
    "CnameTarget",
    "CommandsResult",
    "DnsRecord",
    "GithubMeta",
    "InstallResult",
    "ProjectEntry",
    "ProjectsSnapshot",
    "ProvisioningMode",
    "ProvisioningOutcome",
    "RemovalOutcome",
    "StepOutcome",
    "SnapshotStats",
    "VercelLink",
    "VercelProject",
]
