"""Document source contract and response unwrapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from catlnview.errors import MalformedDocument


@dataclass(frozen=True, slots=True)
class Response:
    data: Any = None
    notes: list[Any] = field(default_factory=list)


class DocumentSource(Protocol):
    async def fetch(self, path: str) -> Any:  # pragma: no cover - structural protocol
        """Return the decoded JSON value served for ``path``.

        Raises :class:`~catlnview.errors.TransportError` when the document
        cannot be retrieved or is not valid JSON.
        """


def unwrap_response(payload: Any) -> Response:
    """Split a ``[data, notes]`` or ``[notes]`` response."""
    if not isinstance(payload, list) or not payload:
        raise MalformedDocument("response must be a non-empty JSON array")
    if len(payload) == 2:
        data, notes = payload
    elif len(payload) == 1:
        data, notes = None, payload[0]
    else:
        raise MalformedDocument(f"response array has {len(payload)} elements, expected 1 or 2")
    return Response(data=data, notes=_as_notes(notes))


def _as_notes(notes: Any) -> list[Any]:
    if notes is None:
        return []
    if isinstance(notes, list):
        return notes
    return [notes]
