"""Tri-state loading of one document at a time.

A :class:`Loader` tracks the document for the most recently requested path.
Requests are never aborted; a response that resolves after a newer
``load`` call was issued is dropped, so the observed state only ever moves
forward for the latest path (``Pending`` then ``Failed`` or ``Ready``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from catlnview.errors import CatlnViewError

from .base import DocumentSource, unwrap_response

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Pending:
    path: str | None = None


@dataclass(frozen=True, slots=True)
class Failed:
    path: str
    error: CatlnViewError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True, slots=True)
class Ready:
    path: str
    data: Any = None
    notes: list[Any] = field(default_factory=list)


LoadState = Pending | Failed | Ready


class Loader:
    def __init__(self, source: DocumentSource) -> None:
        self._source = source
        self._state: LoadState = Pending()
        self._generation = 0

    @property
    def state(self) -> LoadState:
        return self._state

    async def load(self, path: str) -> LoadState:
        """Fetch ``path`` and return the state observed once it settles."""
        self._generation += 1
        generation = self._generation
        self._state = Pending(path)

        result: LoadState
        try:
            response = unwrap_response(await self._source.fetch(path))
        except CatlnViewError as exc:
            logger.warning("Loading %s failed: %s", path, exc)
            result = Failed(path, exc)
        else:
            result = Ready(path, response.data, response.notes)

        if generation != self._generation:
            logger.debug("Discarding stale response for %s", path)
            return self._state

        self._state = result
        return result


def render_state(
    state: LoadState,
    *,
    error: Callable[[Failed], T],
    pending: Callable[[Pending], T],
    ready: Callable[[Ready], T],
) -> T:
    """Pick exactly one of the three views for ``state``."""
    if isinstance(state, Failed):
        return error(state)
    if isinstance(state, Ready):
        return ready(state)
    return pending(state)
