"""Map view routes to the document source paths that feed them."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote

from catlnview.errors import UnknownRoute

DOCS_ROUTE = "/docs"

_URI_COMPONENT_SAFE = "!~*'()"

# View name -> document source path. "/" shows the typechecked program.
VIEW_SOURCES: dict[str, str] = {
    "typecheck": "/typecheck",
    "desugar": "/desugar",
    "constrain": "/constrain",
    "llvm": "/llvm",
    "docs": "/pages",
}

VIEW_TITLES: dict[str, str] = {
    "typecheck": "Typecheck",
    "desugar": "Desugar",
    "constrain": "Constrain",
    "llvm": "LLVM",
    "docs": "Docs",
}


@dataclass(frozen=True, slots=True)
class Route:
    view: str
    source_path: str
    page: str | None = None

    @property
    def title(self) -> str:
        return VIEW_TITLES[self.view]


def parse_route(route: str) -> Route:
    """Resolve ``/typecheck``, ``/docs/<page id>`` and friends."""
    path = "/" + route.strip().strip("/")
    if path == "/":
        return Route("typecheck", VIEW_SOURCES["typecheck"])

    view, _, rest = path[1:].partition("/")
    if view not in VIEW_SOURCES:
        raise UnknownRoute(f"unknown route: {route!r}")
    if rest and view != "docs":
        raise UnknownRoute(f"view {view!r} has no sub-pages: {route!r}")

    page = unquote(rest) if rest else None
    return Route(view, VIEW_SOURCES[view], page)


def page_href(page_name: str, base: str = DOCS_ROUTE) -> str:
    """Link to a docs page, percent-encoding it like ``encodeURIComponent``."""
    return base.rstrip("/") + "/" + quote(page_name, safe=_URI_COMPONENT_SAFE)
