"""DNS record model."""

from __future__ import annotations

from pydantic import BaseModel

from crafters_common.constants import DEFAULT_TTL


class DnsRecord(BaseModel):
    """A single record as returned by the registrar.

    Only CNAME records are surfaced to the user; other types pass through
    untouched so callers can filter them.
    """

    type: str
    name: str
    cname: str | None = None
    ttl: int = DEFAULT_TTL

    @property
    def is_cname(self) -> bool:
        return self.type.upper() == "CNAME"

    def fqdn(self, base_domain: str) -> str:
        if self.name in ("", "@"):
            return base_domain
        return f"{self.name}.{base_domain}"
