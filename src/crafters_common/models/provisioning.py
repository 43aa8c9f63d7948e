"""Outcome models for domain add / remove operations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr

from crafters_common.models.hosting import CnameTarget


class ProvisioningMode(str, Enum):
    DNS_ONLY = "dns-only"
    STANDARD = "standard"
    STANDARD_WITH_CLERK = "standard+clerk"
    CLERK_ONLY = "clerk-only"


class StepOutcome(BaseModel):
    """Steps completed, best-effort warnings and the aborting failure, if any."""

    full_domain: str
    project: str | None = None
    steps_completed: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None

    _exception: BaseException | None = PrivateAttr(default=None)

    @property
    def failed(self) -> bool:
        return self.failed_step is not None

    @property
    def ok(self) -> bool:
        """True when every step succeeded."""
        return not self.failed and not self.warnings

    def record_failure(self, step: str, exc: BaseException) -> None:
        self.failed_step = step
        self.error = str(exc)
        self._exception = exc

    def raise_for_failure(self) -> None:
        """Re-raise the error that aborted the operation."""
        if self._exception is not None:
            raise self._exception


class ProvisioningOutcome(StepOutcome):
    """Aggregate result of one ``add``. Display-only, never persisted."""

    cname_target: str = ""
    mode: ProvisioningMode = ProvisioningMode.STANDARD
    clerk_targets: list[CnameTarget] = Field(default_factory=list)


class RemovalOutcome(StepOutcome):
    pass
