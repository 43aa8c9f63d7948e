"""Vercel REST API client: project domains, DNS advisory and project listing."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from crafters_common import VercelProject
from crafters_common.constants import DEFAULT_VERCEL_CNAME, VERCEL_API_URL
from crafters.errors import VercelError
from crafters.services.http import VendorClient

log = logging.getLogger(__name__)


def _seg(value: str) -> str:
    return quote(value, safe="")


class VercelClient(VendorClient):
    error_cls = VercelError

    def __init__(
        self,
        token: str,
        team_id: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            VERCEL_API_URL,
            {"Authorization": f"Bearer {token}"},
            params={"teamId": team_id} if team_id else None,
            transport=transport,
        )
        self.team_id = team_id

    async def add_project_domain(self, project: str, domain: str) -> dict[str, Any]:
        """Attach ``domain`` to ``project``.

        A conflict for a domain already attached to the same project is
        treated as success so a retried ``add`` converges.
        """
        try:
            resp = await self._request(
                "POST",
                f"/v10/projects/{_seg(project)}/domains",
                json={"name": domain},
            )
        except VercelError as exc:
            if exc.status != 409:
                raise
            log.debug("%s already attached? checking %s", domain, project)
            try:
                return await self.get_project_domain(project, domain)
            except VercelError:
                raise exc from None
        return resp.json()

    async def remove_project_domain(self, project: str, domain: str) -> None:
        await self._request("DELETE", f"/v9/projects/{_seg(project)}/domains/{_seg(domain)}")

    async def get_project_domain(self, project: str, domain: str) -> dict[str, Any]:
        resp = await self._request("GET", f"/v9/projects/{_seg(project)}/domains/{_seg(domain)}")
        return resp.json()

    async def get_recommended_cname(self, domain: str) -> str:
        """Vercel's rank-1 recommended CNAME target for ``domain``."""
        resp = await self._request("GET", f"/v6/domains/{_seg(domain)}/config")
        data = resp.json()
        for entry in data.get("recommendedCNAME") or []:
            if entry.get("rank") == 1 and entry.get("value"):
                return entry["value"].rstrip(".")
        return DEFAULT_VERCEL_CNAME

    async def list_projects(self, search: str | None = None, limit: int = 100) -> list[VercelProject]:
        """One page of projects, most recently updated first."""
        projects, _ = await self._list_page(search=search, limit=limit)
        return projects

    async def list_all_projects(self, limit: int = 100) -> list[VercelProject]:
        """Every project of the account/team, following pagination."""
        projects: list[VercelProject] = []
        until: int | None = None
        while True:
            page, until = await self._list_page(limit=limit, until=until)
            projects.extend(page)
            if until is None or not page:
                return projects

    async def _list_page(
        self,
        *,
        search: str | None = None,
        limit: int = 100,
        until: int | None = None,
    ) -> tuple[list[VercelProject], int | None]:
        params: dict[str, Any] = {"limit": limit}
        if search:
            params["search"] = search
        if until is not None:
            params["until"] = until
        resp = await self._request("GET", "/v9/projects", params=params)
        data = resp.json()
        projects = [VercelProject.model_validate(p) for p in data.get("projects") or []]
        next_until = (data.get("pagination") or {}).get("next")
        return projects, next_until
