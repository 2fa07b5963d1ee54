from __future__ import annotations

import pytest

from catlnview.ir.base import Artifact, StrVal, TupleVal
from catlnview.ir.decoder import decode_val
from catlnview.renderer.result_view import ResultKind, artifact_from_val, render_result, result_kind

from .factories import result_val


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("out.ll", ResultKind.CODE),
        ("out.html", ResultKind.EMBEDDED),
        ("out.txt", ResultKind.TEXT),
        ("out.ll.txt", ResultKind.TEXT),
        ("llvm", ResultKind.TEXT),
    ],
)
def test_result_kind_by_suffix(name: str, kind: ResultKind) -> None:
    assert result_kind(name) is kind


def test_llvm_renders_as_code_block() -> None:
    rendered = render_result(Artifact(name="out.ll", contents="ret i32 0"))
    assert rendered.startswith('<pre class="catln-code" data-language="llvm">')
    assert '<code class="language-llvm">ret i32 0</code>' in rendered


def test_html_renders_as_embedded_document() -> None:
    rendered = render_result(Artifact(name="out.html", contents="<b>x</b>"))
    assert rendered.startswith("<iframe")
    assert 'srcdoc="&lt;b&gt;x&lt;/b&gt;"' in rendered
    assert 'title="out.html"' in rendered


def test_other_files_render_as_plain_text() -> None:
    rendered = render_result(Artifact(name="out.txt", contents="a < b"))
    assert rendered == '<pre class="catln-text">a &lt; b</pre>'


def test_artifact_from_result_tuple() -> None:
    assert artifact_from_val(decode_val(result_val("out.ll", "ret"))) == Artifact(name="out.ll", contents="ret")
    assert artifact_from_val(TupleVal(name="#print", args={})) is None
    assert artifact_from_val(TupleVal(name="CatlnResult", args={"name": StrVal("a")})) is None
