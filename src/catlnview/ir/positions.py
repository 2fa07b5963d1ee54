"""Join out-of-band annotation results to the AST nodes that produced them."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping

from .base import Annotation, Position, Val


def position_key(position: Position) -> str:
    """Return the canonical lookup key for an opaque source position."""
    return json.dumps(position, sort_keys=True, separators=(",", ":"))


class PositionIndex(Mapping[str, Val]):
    """Annotation values keyed by :func:`position_key`.

    Later annotations for the same position replace earlier ones.
    Annotations without a position are never indexed.
    """

    def __init__(self, annotations: Iterable[Annotation] = ()) -> None:
        self._values: dict[str, Val] = {}
        for annotation in annotations:
            if annotation.position is None:
                continue
            self._values[position_key(annotation.position)] = annotation.value

    def lookup(self, position: Position) -> Val | None:
        if position is None:
            return None
        return self._values.get(position_key(position))

    def __getitem__(self, key: str) -> Val:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
