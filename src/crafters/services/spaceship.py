"""Spaceship DNS records API client."""

from __future__ import annotations

import httpx

from crafters_common import DnsRecord
from crafters_common.constants import DEFAULT_TTL, DEFAULT_VERCEL_CNAME, SPACESHIP_API_URL
from crafters.errors import SpaceshipError
from crafters.services.http import VendorClient

_PAGE_SIZE = 100


class SpaceshipClient(VendorClient):
    """CNAME management for a single base domain."""

    error_cls = SpaceshipError

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_domain: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            SPACESHIP_API_URL,
            {
                "X-Api-Key": api_key,
                "X-Api-Secret": api_secret,
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        self.base_domain = base_domain

    @property
    def _records_path(self) -> str:
        return f"/dns/records/{self.base_domain}"

    async def add_cname(self, name: str, target: str = DEFAULT_VERCEL_CNAME, ttl: int = DEFAULT_TTL) -> DnsRecord:
        """Create or replace a CNAME record (``force`` makes it last-write-wins)."""
        record = DnsRecord(type="CNAME", name=name, cname=target, ttl=ttl)
        await self._request(
            "PUT",
            self._records_path,
            json={"force": True, "items": [record.model_dump()]},
        )
        return record

    async def remove_cname(self, name: str, target: str = DEFAULT_VERCEL_CNAME) -> None:
        await self._request(
            "DELETE",
            self._records_path,
            json=[{"type": "CNAME", "name": name, "cname": target}],
        )

    async def list_records(self) -> list[DnsRecord]:
        """All records of the base domain, in provider order."""
        records: list[DnsRecord] = []
        skip = 0
        while True:
            resp = await self._request(
                "GET",
                self._records_path,
                params={"take": _PAGE_SIZE, "skip": skip},
            )
            data = resp.json()
            items = data.get("items") or []
            records.extend(DnsRecord.model_validate(item) for item in items)
            skip += len(items)
            total = data.get("total", 0)
            if not items or skip >= total:
                return records
