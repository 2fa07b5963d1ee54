"""Render a single computed artifact according to its filename."""

from __future__ import annotations

import html
from enum import Enum

from catlnview.ir.base import Artifact, StrVal, TupleVal, Val

RESULT_TUPLE_NAME = "CatlnResult"


class ResultKind(Enum):
    CODE = "code"
    EMBEDDED = "embedded"
    TEXT = "text"


# Checked in order; the first matching suffix wins.
_SUFFIX_DISPATCH: tuple[tuple[str, ResultKind, str | None], ...] = (
    (".ll", ResultKind.CODE, "llvm"),
    (".html", ResultKind.EMBEDDED, None),
)


def result_kind(file_name: str) -> ResultKind:
    return _dispatch(file_name)[0]


def _dispatch(file_name: str) -> tuple[ResultKind, str | None]:
    for suffix, kind, language in _SUFFIX_DISPATCH:
        if file_name.endswith(suffix):
            return kind, language
    return ResultKind.TEXT, None


def artifact_from_val(val: Val) -> Artifact | None:
    """Extract the ``name``/``contents`` pair carried by a result tuple."""
    if not isinstance(val, TupleVal) or val.name != RESULT_TUPLE_NAME:
        return None
    name = val.args.get("name")
    contents = val.args.get("contents")
    if not isinstance(name, StrVal) or not isinstance(contents, StrVal):
        return None
    return Artifact(name=name.value, contents=contents.value)


def render_result(artifact: Artifact) -> str:
    kind, language = _dispatch(artifact.name)
    contents = html.escape(artifact.contents)

    if kind is ResultKind.CODE:
        return (
            f'<pre class="catln-code" data-language="{language}">'
            f'<code class="language-{language}">{contents}</code></pre>'
        )

    if kind is ResultKind.EMBEDDED:
        return (
            f'<iframe class="catln-embedded" srcdoc="{html.escape(artifact.contents, quote=True)}" '
            f'title="{html.escape(artifact.name)}"></iframe>'
        )

    return f'<pre class="catln-text">{contents}</pre>'
