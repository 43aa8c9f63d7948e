"""Clerk Backend API client for instance domains."""

from __future__ import annotations

import logging

import httpx

from crafters_common import ClerkDomain
from crafters_common.constants import CLERK_API_URL
from crafters.errors import ClerkError
from crafters.services.http import VendorClient

log = logging.getLogger(__name__)


class ClerkClient(VendorClient):
    error_cls = ClerkError

    def __init__(self, secret_key: str, *, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(
            CLERK_API_URL,
            {"Authorization": f"Bearer {secret_key}"},
            transport=transport,
        )

    async def add_domain(self, name: str, *, satellite: bool = False) -> ClerkDomain:
        """Register ``name`` as an additional application domain.

        Secondary domains share the primary's root and are told apart by a
        cookie suffix. If the domain is already registered the existing
        entry is returned.
        """
        try:
            resp = await self._request(
                "POST",
                "/domains",
                json={"name": name, "is_satellite": satellite},
            )
        except ClerkError as exc:
            if exc.status not in (409, 422):
                raise
            existing = await self.find_domain(name)
            if existing is None:
                raise
            log.debug("Clerk domain %s already registered", name)
            return existing
        return ClerkDomain.model_validate(resp.json())

    async def list_domains(self) -> list[ClerkDomain]:
        resp = await self._request("GET", "/domains")
        data = resp.json()
        items = data.get("data", []) if isinstance(data, dict) else data
        return [ClerkDomain.model_validate(item) for item in items]

    async def find_domain(self, name: str) -> ClerkDomain | None:
        for domain in await self.list_domains():
            if domain.name == name:
                return domain
        return None
