from __future__ import annotations

import logging

import pytest

from catlnview.errors import TransportError, UnknownRoute
from catlnview.renderer.html_renderer import HTMLRenderer, render_llvm, render_outline
from catlnview.routes import parse_route
from catlnview.source.loader import Failed, Pending, Ready

from .factories import comment, decl, document, obj, page, pos, print_document, strip_tags, value


def _docs_document() -> list:
    return document(
        [
            page("std/list.ct", [decl(obj("length"), expr=value("n"))]),
            page("std/main.ct", [comment("Standard *library*")]),
            page("main.ct", [decl(obj("main"), expr=value("run"))]),
        ]
    )


def test_docs_view_renders_toc_and_selected_page() -> None:
    state = Ready("/pages", _docs_document(), [{"msg": "unused variable"}])
    html = HTMLRenderer().render(state, parse_route("/docs/std%2Flist.ct"))

    assert "<h1>std/list.ct</h1>" in html
    assert "length = n" in strip_tags(html)
    assert 'href="/docs/std%2Flist.ct"' in html
    assert 'href="/docs/main.ct"' in html
    assert "unused variable" in html
    assert html.index('href="/docs/main.ct"') < html.index('href="/docs/std%2Fmain.ct"')
    assert html.index('href="/docs/std%2Fmain.ct"') < html.index('href="/docs/std%2Flist.ct"')


def test_docs_view_defaults_to_last_page() -> None:
    html = HTMLRenderer().render(Ready("/pages", _docs_document(), []), parse_route("/docs"))
    assert "<h1>main.ct</h1>" in html
    assert "main = run" in strip_tags(html)


def test_docs_view_unknown_page() -> None:
    with pytest.raises(UnknownRoute):
        HTMLRenderer().render(Ready("/pages", _docs_document(), []), parse_route("/docs/missing.ct"))


def test_docs_view_with_print_annotation() -> None:
    state = Ready("/pages", print_document(pos("main.ct", 3, 1), contents="hello"), [])
    html = HTMLRenderer().render(state, parse_route("/docs/main.ct"))
    assert '<pre class="catln-text">hello</pre>' in html


def test_program_view_renders_every_page() -> None:
    html = HTMLRenderer().render(Ready("/desugar", _docs_document(), []), parse_route("/desugar"))
    assert "<h2>std/list.ct</h2>" in html
    assert "<h2>main.ct</h2>" in html
    assert "<em>library</em>" in html


def test_notes_only_response_renders_notes() -> None:
    html = HTMLRenderer().render(Ready("/typecheck", None, ["Type error in main"]), parse_route("/typecheck"))
    assert "Type error in main" in html
    assert "catln-page" not in html


def test_error_and_pending_views() -> None:
    failed = Failed("/llvm", TransportError("/llvm", "connection refused"))
    error_html = HTMLRenderer().render(failed, parse_route("/llvm"))
    assert "Error: /llvm: connection refused" in error_html

    pending_html = HTMLRenderer().render(Pending("/llvm"), parse_route("/llvm"))
    assert "Loading..." in pending_html
    assert "Error:" not in pending_html


def test_malformed_document_renders_error_view(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    html = HTMLRenderer().render(Ready("/typecheck", {"not": "a document"}, []), parse_route("/typecheck"))

    assert '<div class="catln-error">Error: document payload must be a [pages, annotations] pair</div>' in html
    assert "catln-page" not in html
    assert len([r for r in caplog.records if r.levelno >= logging.ERROR]) == 1


def test_page_tree_conflict_renders_error_view() -> None:
    doc = document([page("lib", []), page("lib/list.ct", [])])
    html = HTMLRenderer().render(Ready("/pages", doc, []), parse_route("/docs/lib"))
    assert 'class="catln-error"' in html
    assert "both a page and a directory" in html


def test_dark_mode_switch() -> None:
    html = HTMLRenderer().render(Ready("/llvm", "ret i32 0", []), parse_route("/llvm"), dark_mode=True)
    assert 'class="catln-dark"' in html


def test_render_llvm_payloads() -> None:
    assert 'data-language="llvm"' in render_llvm("define i32 @main()")
    mapping = render_llvm({"a.ll": "ret", "notes.txt": "plain"})
    assert "<h2>a.ll</h2>" in mapping
    assert '<pre class="catln-text">plain</pre>' in mapping
    assert render_llvm(None) == ""


def test_render_outline_labels_tags() -> None:
    outline = render_outline([{"tag": "EqualsKnown", "contents": [{"tag": "TopType"}, 3]}, "x<y"])
    assert "<summary>EqualsKnown</summary>" in outline
    assert "<summary>TopType</summary>" in outline
    assert "x&lt;y" in outline
    assert "<li>3</li>" in outline
