"""Domain provisioning across Vercel, Spaceship DNS and Clerk.

Each operation is a fixed sequence of steps. A CRITICAL step's failure
stops the sequence and is recorded on the outcome (``failed_step``,
``error``, ``raise_for_failure()``); a BEST_EFFORT step's failure is
recorded as a warning and the sequence continues. Nothing already
committed is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

import httpx

from crafters_common import (
    DEFAULT_VERCEL_CNAME,
    DnsRecord,
    ProvisioningMode,
    ProvisioningOutcome,
    RemovalOutcome,
    ResolvedConfig,
    StepOutcome,
    VercelProject,
)
from crafters.errors import ConfigurationError
from crafters.services.clerk import ClerkClient
from crafters.services.spaceship import SpaceshipClient
from crafters.services.vercel import VercelClient

log = logging.getLogger(__name__)


class StepKind(str, Enum):
    CRITICAL = "critical"
    BEST_EFFORT = "best-effort"


@dataclass
class Step:
    name: str
    label: str
    kind: StepKind
    run: Callable[[], Awaitable[None]]
    hint: str | None = None


StepCallback = Callable[[int, int, Step], None]


async def run_steps(
    steps: list[Step],
    outcome: StepOutcome,
    on_step: StepCallback | None = None,
) -> list[Exception]:
    """Run ``steps`` in order; return the errors of failed best-effort steps.

    The first CRITICAL failure is recorded on ``outcome`` and ends the run.
    """
    errors: list[Exception] = []
    for index, step in enumerate(steps, start=1):
        if on_step:
            on_step(index, len(steps), step)
        try:
            await step.run()
        except Exception as exc:
            if step.kind is StepKind.CRITICAL:
                log.error("%s failed: %s", step.name, exc)
                outcome.record_failure(step.name, exc)
                break
            log.warning("%s failed: %s", step.name, exc)
            message = f"{step.label} failed: {exc}"
            if step.hint:
                message += f"\nRun manually: {step.hint}"
            outcome.warnings.append(message)
            errors.append(exc)
            continue
        outcome.steps_completed.append(step.name)
    return errors


def relative_name(host: str, base_domain: str) -> str:
    """DNS record name of ``host`` inside ``base_domain`` (``@`` for the apex)."""
    host = host.rstrip(".")
    if host == base_domain:
        return "@"
    suffix = f".{base_domain}"
    if host.endswith(suffix):
        return host[: -len(suffix)]
    return host


ClerkFactory = Callable[[str], ClerkClient]


class Provisioner:
    """Add, remove and list subdomains of the configured base domain."""

    def __init__(
        self,
        config: ResolvedConfig,
        spaceship: SpaceshipClient,
        vercel: VercelClient,
        clerk_factory: ClerkFactory = ClerkClient,
    ):
        self.config = config
        self.spaceship = spaceship
        self.vercel = vercel
        self.clerk_factory = clerk_factory

    @classmethod
    def from_config(
        cls,
        config: ResolvedConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Provisioner:
        return cls(
            config,
            SpaceshipClient(
                config.api_key,
                config.api_secret,
                config.base_domain,
                transport=transport,
            ),
            VercelClient(config.vercel_token, config.vercel_team_id, transport=transport),
            lambda key: ClerkClient(key, transport=transport),
        )

    async def __aenter__(self) -> Provisioner:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.spaceship.aclose()
        await self.vercel.aclose()

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    async def add(
        self,
        subdomain: str,
        project: str | None = None,
        *,
        target: str | None = None,
        clerk_secret_key: str | None = None,
        skip_vercel: bool = False,
        on_step: StepCallback | None = None,
    ) -> ProvisioningOutcome:
        """Point ``subdomain`` at a Vercel project (or a custom target).

        ``target`` selects DNS-only mode and bypasses Vercel and Clerk.
        Otherwise the domain is attached to ``project`` (default: the
        subdomain), Vercel's recommended CNAME is written, and, when a Clerk
        key is available, the domain is registered on Clerk with one CNAME
        per required target. ``skip_vercel`` keeps only the Clerk step and
        needs a Clerk key.
        """
        full_domain = self.config.full_domain(subdomain)

        if target:
            outcome = ProvisioningOutcome(
                full_domain=full_domain,
                cname_target=target,
                mode=ProvisioningMode.DNS_ONLY,
            )

            async def write_custom() -> None:
                await self.spaceship.add_cname(subdomain, target)

            await run_steps(
                [Step("dns", "Creating CNAME record", StepKind.CRITICAL, write_custom)],
                outcome,
                on_step,
            )
            return outcome

        clerk_key = clerk_secret_key or self.config.clerk_secret_key
        if skip_vercel:
            if not clerk_key:
                raise ConfigurationError(
                    "Nothing to do: skipping Vercel needs a Clerk secret key "
                    "(--clerk-key, CLERK_SECRET_KEY or a .env file)."
                )
            outcome = ProvisioningOutcome(full_domain=full_domain, mode=ProvisioningMode.CLERK_ONLY)
            step = self._clerk_step(clerk_key, outcome)
            errors = await run_steps([step], outcome, on_step)
            if errors:
                outcome.record_failure(step.name, errors[0])
            return outcome

        project = project or subdomain
        outcome = ProvisioningOutcome(
            full_domain=full_domain,
            project=project,
            mode=ProvisioningMode.STANDARD_WITH_CLERK if clerk_key else ProvisioningMode.STANDARD,
        )

        async def attach() -> None:
            await self.vercel.add_project_domain(project, full_domain)

        async def query_cname() -> None:
            outcome.cname_target = await self.vercel.get_recommended_cname(full_domain)

        async def write_cname() -> None:
            await self.spaceship.add_cname(subdomain, outcome.cname_target)

        steps = [
            Step("vercel", f"Adding {full_domain} to Vercel project {project}", StepKind.CRITICAL, attach),
            Step("cname", "Fetching recommended CNAME", StepKind.CRITICAL, query_cname),
            Step("dns", "Creating CNAME record", StepKind.CRITICAL, write_cname),
        ]
        if clerk_key:
            steps.append(self._clerk_step(clerk_key, outcome))

        await run_steps(steps, outcome, on_step)
        return outcome

    def _clerk_step(self, secret_key: str, outcome: ProvisioningOutcome) -> Step:
        async def register_clerk() -> None:
            await self._register_clerk(secret_key, outcome)

        return Step(
            "clerk",
            "Registering Clerk domain + DNS",
            StepKind.BEST_EFFORT,
            register_clerk,
            hint=f"clerk domains add --name {outcome.full_domain} --dotenv",
        )

    async def _register_clerk(self, secret_key: str, outcome: ProvisioningOutcome) -> None:
        clerk = self.clerk_factory(secret_key)
        try:
            domain = await clerk.add_domain(outcome.full_domain)
        finally:
            await clerk.aclose()
        # One write at a time, in Clerk's target order.
        for cname in domain.cname_targets:
            name = relative_name(cname.host, self.config.base_domain)
            await self.spaceship.add_cname(name, cname.value.rstrip("."))
            outcome.clerk_targets.append(cname)

    # ------------------------------------------------------------------
    # remove / list
    # ------------------------------------------------------------------

    async def remove(
        self,
        subdomain: str,
        project: str | None = None,
        *,
        on_step: StepCallback | None = None,
    ) -> RemovalOutcome:
        """Detach the domain from ``project`` then delete its CNAME.

        Both steps are attempted. A single failure is reported as a warning;
        if every attempted step fails the first error is recorded as the
        outcome's failure. A project removal is not restored when the DNS
        deletion fails afterwards.
        """
        full_domain = self.config.full_domain(subdomain)
        outcome = RemovalOutcome(full_domain=full_domain, project=project)
        steps: list[Step] = []

        if project:

            async def detach() -> None:
                await self.vercel.remove_project_domain(project, full_domain)

            steps.append(
                Step("vercel", f"Removing {full_domain} from Vercel project {project}", StepKind.BEST_EFFORT, detach)
            )

        async def delete_cname() -> None:
            target = await self._current_target(subdomain)
            await self.spaceship.remove_cname(subdomain, target)

        steps.append(
            Step(
                "dns",
                "Deleting CNAME record",
                StepKind.BEST_EFFORT,
                delete_cname,
                hint=f"delete the CNAME '{subdomain}' in the Spaceship dashboard",
            )
        )

        errors = await run_steps(steps, outcome, on_step)
        if errors and not outcome.steps_completed:
            outcome.record_failure(steps[0].name, errors[0])
        return outcome

    async def _current_target(self, subdomain: str) -> str:
        for record in await self.list_domains():
            if record.name == subdomain and record.cname:
                return record.cname
        return DEFAULT_VERCEL_CNAME

    async def list_domains(self) -> list[DnsRecord]:
        """CNAME records of the base domain, in provider order."""
        records = await self.spaceship.list_records()
        return [r for r in records if r.is_cname]

    async def list_projects(self, search: str | None = None) -> list[VercelProject]:
        return await self.vercel.list_projects(search)
