"""Shared async HTTP plumbing for the vendor clients."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from crafters_common.constants import DEFAULT_HTTP_TIMEOUT
from crafters.errors import VendorApiError

log = logging.getLogger(__name__)


def error_body(resp: httpx.Response) -> str:
    """Raw vendor error body, JSON-compacted when possible."""
    try:
        return json.dumps(resp.json())
    except ValueError:
        return resp.text


class VendorClient:
    """Async client that turns every failure into ``error_cls``."""

    error_cls: type[VendorApiError] = VendorApiError

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        *,
        params: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            params=params,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        log.debug("%s %s %s", self.error_cls.vendor, method, path)
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise self.error_cls(None, str(exc)) from exc
        if resp.is_error:
            raise self.error_cls(resp.status_code, error_body(resp))
        return resp
