"""Assemble rendered views into a self-contained HTML page."""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from catlnview.errors import MalformedDocument, UnknownRoute
from catlnview.ir.base import Artifact, Document
from catlnview.ir.decoder import decode_document
from catlnview.ir.pages import build_page_tree, iter_toc
from catlnview.ir.positions import PositionIndex
from catlnview.routes import DOCS_ROUTE, Route, page_href
from catlnview.source.loader import Failed, LoadState, Pending, Ready, render_state

from .ast_renderer import AstRenderer
from .result_view import render_result

logger = logging.getLogger(__name__)

DEFAULT_LLVM_NAME = "main.ll"


class HTMLRenderer:
    """Render a loaded document for one route into the page template."""

    def __init__(self, template_path: Path | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "catln.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name

    def render(
        self,
        state: LoadState,
        route: Route,
        *,
        show_types: bool = True,
        details: bool = False,
        dark_mode: bool = False,
        link_base: str = DOCS_ROUTE,
    ) -> str:
        def on_error(failed: Failed) -> str:
            return self._page(route, dark_mode=dark_mode, error=failed.message)

        def on_pending(pending: Pending) -> str:
            return self._page(route, dark_mode=dark_mode, pending=True)

        def on_ready(ready: Ready) -> str:
            try:
                body, toc_items, page_title = self._render_view(
                    ready.data,
                    route,
                    show_types=show_types,
                    details=details,
                    link_base=link_base,
                )
            except MalformedDocument as exc:
                logger.error("Cannot render %s: %s", ready.path, exc)
                return self._page(route, dark_mode=dark_mode, error=str(exc))
            return self._page(
                route,
                dark_mode=dark_mode,
                body=body,
                toc_items=toc_items,
                page_title=page_title,
                notes=[_note_text(note) for note in ready.notes],
            )

        return render_state(state, error=on_error, pending=on_pending, ready=on_ready)

    def _page(
        self,
        route: Route,
        *,
        dark_mode: bool,
        body: str = "",
        toc_items: list[dict[str, Any]] | None = None,
        page_title: str | None = None,
        notes: list[str] | None = None,
        error: str | None = None,
        pending: bool = False,
    ) -> str:
        template = self._env.get_template(self._template_name)
        return template.render(
            view_title=route.title,
            page_title=page_title or route.title,
            body=body,
            toc_items=toc_items or [],
            notes=notes or [],
            error=error,
            pending=pending,
            dark_mode=dark_mode,
        )

    def _render_view(
        self,
        data: Any,
        route: Route,
        *,
        show_types: bool,
        details: bool,
        link_base: str,
    ) -> tuple[str, list[dict[str, Any]], str | None]:
        if route.view == "llvm":
            return render_llvm(data), [], None
        if route.view == "constrain":
            return render_outline(data) if data is not None else "", [], None
        if data is None:
            return "", [], None

        document = decode_document(data)
        renderer = AstRenderer(PositionIndex(document.annotations), show_types=show_types, details=details)

        if route.view == "docs":
            return self._render_docs(document, route.page, renderer, link_base=link_base)

        sections = [
            f'<section class="catln-page"><h2>{html.escape(page.name)}</h2>'
            f"{renderer.render_statements(page.statements)}</section>"
            for page in document.pages
        ]
        return "\n".join(sections), [], None

    def _render_docs(
        self,
        document: Document,
        page_name: str | None,
        renderer: AstRenderer,
        *,
        link_base: str,
    ) -> tuple[str, list[dict[str, Any]], str | None]:
        page = document.page(page_name) if page_name is not None else document.default_page
        if page is None:
            raise UnknownRoute(f"no documentation page named {page_name!r}")

        toc_items = [
            {
                "name": entry.name,
                "depth": entry.depth,
                "is_page": entry.is_page,
                "href": page_href(entry.path, link_base) if entry.is_page else None,
                "current": entry.path == page.name,
            }
            for entry in iter_toc(build_page_tree(document.page_names))
        ]
        return renderer.render_statements(page.statements), toc_items, page.name


def render_llvm(data: Any) -> str:
    """Render generated LLVM, given either one listing or a file mapping."""
    if data is None:
        return ""
    if isinstance(data, str):
        return render_result(Artifact(name=DEFAULT_LLVM_NAME, contents=data))
    if isinstance(data, dict):
        return "\n".join(
            f'<section class="catln-artifact"><h2>{html.escape(name)}</h2>'
            f"{render_result(Artifact(name=name, contents=str(contents)))}</section>"
            for name, contents in data.items()
        )

    logger.error("Unexpected LLVM payload of type %s", type(data).__name__)
    return ""


def render_outline(value: Any) -> str:
    """Render arbitrary tagged JSON as a nested, collapsible outline."""
    if isinstance(value, dict):
        tag = value.get("tag")
        if isinstance(tag, str):
            inner = {k: v for k, v in value.items() if k != "tag"}
            contents = inner["contents"] if set(inner) == {"contents"} else inner
            return (
                f'<details class="catln-outline" open><summary>{html.escape(tag)}</summary>'
                f"{render_outline(contents) if contents not in ({}, None) else ''}</details>"
            )
        rows = "".join(f"<dt>{html.escape(str(k))}</dt><dd>{render_outline(v)}</dd>" for k, v in value.items())
        return f'<dl class="catln-outline">{rows}</dl>'

    if isinstance(value, list):
        items = "".join(f"<li>{render_outline(item)}</li>" for item in value)
        return f'<ol class="catln-outline">{items}</ol>'

    if isinstance(value, str):
        return html.escape(value)
    return html.escape(json.dumps(value))


def _note_text(note: Any) -> str:
    if isinstance(note, dict) and "msg" in note:
        return str(note["msg"])
    if isinstance(note, str):
        return note
    return json.dumps(note)
