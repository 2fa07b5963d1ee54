"""Render IR statements, expressions, types and objects as HTML fragments.

Every ``render_*`` method is total: a node it does not recognize is logged
once and rendered as an empty fragment, leaving its siblings intact.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Callable, Iterable

from markdown_it import MarkdownIt

from catlnview.ir.base import (
    Arm,
    Case,
    CExpr,
    ClassDecl,
    ClassInstance,
    Comment,
    Decl,
    DeclSubStatement,
    ElseGuard,
    Expr,
    FloatVal,
    GlobalAnnot,
    Guard,
    IfGuard,
    IfThenElse,
    IntVal,
    Match,
    Meta,
    Methods,
    MultiTypeDef,
    NamedArg,
    NoGuard,
    Obj,
    Paren,
    PositionalArg,
    Statement,
    StrVal,
    SubAnnot,
    SumType,
    TopType,
    TupleApply,
    TupleVal,
    Type,
    TypeDef,
    TypeVar,
    Val,
    Value,
    head_position,
)
from catlnview.ir.positions import PositionIndex

from .result_view import RESULT_TUPLE_NAME, artifact_from_val, render_result

logger = logging.getLogger(__name__)

PRINT_ANNOTATION = "#print"
PRINT_RESULT_ARG = "p"

MetaRenderer = Callable[[Meta], str]


class AstRenderer:
    """Render one document's AST, splicing in annotation results by position."""

    def __init__(
        self,
        index: PositionIndex | None = None,
        *,
        show_types: bool = True,
        details: bool = False,
    ) -> None:
        self._index = index if index is not None else PositionIndex()
        self._details = details
        self.meta_renderer: MetaRenderer = self.type_meta if show_types else self.declared_meta
        self._markdown = MarkdownIt("commonmark", {"html": False})

    # ------------------------------------------------------------------
    # Meta renderers
    # ------------------------------------------------------------------

    def type_meta(self, meta: Meta) -> str:
        """Show the type carried by a meta, including unconstrained ones."""
        return self.render_type(meta.type)

    def declared_meta(self, meta: Meta) -> str:
        """Show only types that were written down; ``TopType`` stays blank."""
        if isinstance(meta.type, TopType):
            return ""
        return self.render_type(meta.type)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def render_type(self, tp: Type) -> str:
        if isinstance(tp, TopType):
            return "TopType"
        if isinstance(tp, TypeVar):
            return html.escape(tp.name)
        if isinstance(tp, SumType):
            partials = []
            for partial in tp.partials:
                for option in partial.options:
                    show_vars = ""
                    if option.type_vars:
                        show_vars = "&lt;" + self._typed_names(option.type_vars) + "&gt;"
                    show_args = "(" + self._typed_names(option.type_args) + ")"
                    partials.append(f'<span class="catln-partial">{html.escape(partial.name)}{show_vars}{show_args}</span>')
            return " | ".join(partials)

        logger.error("Unknown type: %r", getattr(tp, "tag", tp))
        return ""

    def _typed_names(self, entries: dict[str, Type]) -> str:
        return ", ".join(f"{self.render_type(tp)} {html.escape(name)}" for name, tp in entries.items())

    def _type_vars(self, entries: dict[str, Type]) -> str:
        if not entries:
            return ""
        return "&lt;" + self._typed_names(entries) + "&gt;"

    # ------------------------------------------------------------------
    # Objects and guards
    # ------------------------------------------------------------------

    def render_obj(self, obj: Obj, meta_renderer: MetaRenderer | None = None, *, details: bool | None = None) -> str:
        meta_renderer = meta_renderer or self.meta_renderer
        want_details = self._details if details is None else details

        show_vars = ""
        if obj.vars:
            show_vars = "&lt;" + self._meta_names(obj.vars, meta_renderer) + "&gt;"

        show_args = ""
        if obj.args:
            show_args = "(" + self._meta_names(obj.args, meta_renderer) + ")"

        show_details = ""
        if want_details:
            show_details = (
                f'<span class="catln-obj-details">{html.escape(obj.basis)} - {meta_renderer(obj.meta)}</span> '
            )

        return f'<span class="catln-obj">{show_details}{html.escape(obj.name)}{show_vars}{show_args}</span>'

    @staticmethod
    def _meta_names(entries: dict[str, Meta], meta_renderer: MetaRenderer) -> str:
        parts = []
        for name, meta in entries.items():
            shown = meta_renderer(meta)
            parts.append(f"{shown} {html.escape(name)}" if shown else html.escape(name))
        return ", ".join(parts)

    def render_guard(self, guard: Guard) -> str:
        if isinstance(guard, IfGuard):
            return f" if {self.render_expr(guard.expr)}"
        if isinstance(guard, ElseGuard):
            return " else"
        if isinstance(guard, NoGuard):
            return ""

        logger.error("Unknown guard: %r", getattr(guard, "tag", guard))
        return ""

    def _render_arms(self, arms: Iterable[Arm]) -> str:
        return "".join(
            f'<div class="catln-arm">{self.render_obj(arm.obj)}{self.render_guard(arm.guard)}</div>' for arm in arms
        )

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def render_expr(self, expr: Expr) -> str:
        if isinstance(expr, CExpr):
            return html.escape(_constant_text(expr.constant))

        if isinstance(expr, Value):
            return html.escape(expr.name)

        if isinstance(expr, TupleApply):
            args = []
            for arg in expr.args:
                if isinstance(arg, NamedArg):
                    args.append(f"{html.escape(arg.name)} = {self.render_expr(arg.expr)}")
                elif isinstance(arg, PositionalArg):
                    args.append(self.render_expr(arg.expr))
                else:
                    logger.error("Unknown tuple argument: %r", getattr(arg, "tag", arg))
                    args.append("")
            return f"<span>{self.render_expr(expr.base)}({', '.join(args)})</span>"

        if isinstance(expr, Paren):
            return f"<span>({self.render_expr(expr.expr)})</span>"

        if isinstance(expr, Methods):
            methods = "".join(f".{self.render_expr(method)}" for method in expr.methods)
            return f"<span>{self.render_expr(expr.base)}{methods}</span>"

        if isinstance(expr, IfThenElse):
            return (
                f"<span>if {self.render_expr(expr.condition)} then {self.render_expr(expr.then)} "
                f"else {self.render_expr(expr.otherwise)}</span>"
            )

        if isinstance(expr, (Match, Case)):
            keyword = "match" if isinstance(expr, Match) else "case"
            return (
                f"<span>{keyword} {self.render_expr(expr.subject)} of"
                f'<div class="catln-indented">{self._render_arms(expr.arms)}</div></span>'
            )

        logger.error("Unknown expression: %r", getattr(expr, "tag", expr))
        return ""

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def render_statements(self, statements: Iterable[Statement]) -> str:
        return "\n".join(self.render_statement(statement) for statement in statements)

    def render_statement(self, statement: Statement) -> str:
        if isinstance(statement, Decl):
            return self._render_decl(statement)

        if isinstance(statement, MultiTypeDef):
            options = " | ".join(f"<span>{self.render_type(tp)}</span>" for tp in statement.options)
            return (
                f'<div class="catln-statement">class {html.escape(statement.name)}'
                f"{self._type_vars(statement.vars)} = {options}</div>"
            )

        if isinstance(statement, TypeDef):
            return f'<div class="catln-statement">data {self.render_type(statement.type)}</div>'

        if isinstance(statement, ClassInstance):
            return (
                f'<div class="catln-statement">instance {html.escape(statement.type_name)}'
                f"{self._type_vars(statement.vars)} of {html.escape(statement.class_name)}</div>"
            )

        if isinstance(statement, ClassDecl):
            return (
                f'<div class="catln-statement">class {html.escape(statement.name)}'
                f"{self._type_vars(statement.vars)}</div>"
            )

        if isinstance(statement, GlobalAnnot):
            return self._render_global_annot(statement)

        if isinstance(statement, Comment):
            return f'<div class="catln-comment">{self._markdown.render(statement.text)}</div>'

        logger.error("Unknown statement: %r", getattr(statement, "tag", statement))
        return ""

    def _render_decl(self, decl: Decl) -> str:
        show_expr = ""
        if decl.expr is not None:
            show_expr = f" = {self.render_expr(decl.expr)}"

        show_subs = ""
        if decl.sub_statements:
            subs = "".join(self._render_sub_statement(sub) for sub in decl.sub_statements)
            show_subs = f'<div class="catln-indented">{subs}</div>'

        return (
            f'<div class="catln-decl">{self.render_obj(decl.obj)}{self.render_guard(decl.guard)}'
            f"{show_expr}{show_subs}</div>"
        )

    def _render_sub_statement(self, sub: DeclSubStatement) -> str:
        if isinstance(sub, Decl):
            return self._render_decl(sub)
        if isinstance(sub, SubAnnot):
            return f'<div class="catln-annot">{self.render_expr(sub.expr)}</div>'

        logger.error("Unknown declaration sub-statement: %r", getattr(sub, "tag", sub))
        return ""

    def _render_global_annot(self, annot: GlobalAnnot) -> str:
        show_expr = self.render_expr(annot.expr)
        position = head_position(annot.expr)
        val = self._index.lookup(position)

        if val is None:
            logger.error("No annotation result recorded at position %r", position)
            return f'<div class="catln-annot catln-annot-missing">{show_expr}</div>'

        if isinstance(val, TupleVal) and val.name == PRINT_ANNOTATION:
            printed = val.args.get(PRINT_RESULT_ARG)
            if printed is None:
                logger.error("Print annotation at %r has no %r argument", position, PRINT_RESULT_ARG)
                return f'<div class="catln-annot">{show_expr}</div>'
            return f'<div class="catln-annot">{show_expr}<br />{self.render_val(printed)}</div>'

        return f'<div class="catln-annot">{show_expr}</div>'

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def render_val(self, val: Val) -> str:
        if isinstance(val, TupleVal):
            artifact = artifact_from_val(val)
            if artifact is not None:
                return render_result(artifact)
            if val.name == RESULT_TUPLE_NAME:
                logger.error("Result tuple without string name and contents: %r", val)
            else:
                logger.error("Unknown value tuple name: %r", val.name)
            return ""

        if isinstance(val, StrVal):
            return f'<pre class="catln-text">{html.escape(val.value)}</pre>'

        if isinstance(val, (IntVal, FloatVal)):
            return f'<pre class="catln-text">{val.value}</pre>'

        logger.error("Unknown value: %r", getattr(val, "tag", val))
        return ""


def _constant_text(constant: object) -> str:
    if isinstance(constant, bool):
        return "true" if constant else "false"
    return str(constant)
