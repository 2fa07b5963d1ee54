"""Serve compiler documents from JSON dumps saved on disk."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from catlnview.errors import TransportError

logger = logging.getLogger(__name__)


class FileDocumentSource:
    """Map a request path such as ``/pages`` to ``<root>/pages.json``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        name = path.strip("/") or "index"
        return self.root / f"{name}.json"

    async def fetch(self, path: str) -> Any:
        file_path = self.resolve(path)
        logger.debug("Reading %s for %s", file_path, path)
        try:
            raw = await asyncio.to_thread(file_path.read_bytes)
        except OSError as exc:
            raise TransportError(path, f"cannot read {file_path}: {exc.strerror or exc}") from exc

        try:
            return json.loads(raw)
        except ValueError as exc:
            raise TransportError(path, f"invalid UTF-8 JSON in {file_path.name}: {exc}") from exc
