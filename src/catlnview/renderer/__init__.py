"""HTML renderers for compiler dumps."""

from .ast_renderer import AstRenderer
from .html_renderer import HTMLRenderer, render_llvm, render_outline
from .result_view import ResultKind, render_result, result_kind

__all__ = [
    "AstRenderer",
    "HTMLRenderer",
    "render_llvm",
    "render_outline",
    "ResultKind",
    "render_result",
    "result_kind",
]
