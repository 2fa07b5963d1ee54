"""Fetch compiler documents from a running webdocs server."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from catlnview.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpDocumentSource:
    """Serve documents from ``base_url`` joined with the requested path."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, path: str) -> Any:
        logger.debug("Fetching %s%s", self.base_url, path)
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(path)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise TransportError(path, str(exc) or type(exc).__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(path, f"invalid JSON: {exc}") from exc
