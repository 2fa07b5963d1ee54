"""Decode tag-discriminated compiler JSON into the typed IR.

The compiler serializes every sum type as ``{"tag": ..., "contents": ...}``.
Decoding is lenient at node level: an unrecognized tag, or a payload that
does not have the expected arity, becomes the grammar's ``Unknown*`` variant
so that a renderer can report it and carry on with the siblings. Only a
document whose outer shape is wrong raises :class:`MalformedDocument`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from catlnview.errors import MalformedDocument

from .base import (
    Annotation,
    Arm,
    Case,
    CExpr,
    ClassDecl,
    ClassInstance,
    Comment,
    Decl,
    DeclSubStatement,
    Document,
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
    Page,
    Paren,
    Partial,
    PartialOption,
    PositionalArg,
    Statement,
    StrVal,
    SubAnnot,
    SumType,
    TopType,
    TupleApply,
    TupleArg,
    TupleVal,
    Type,
    TypeDef,
    TypeVar,
    UnknownArg,
    UnknownExpr,
    UnknownGuard,
    UnknownStatement,
    UnknownSubStatement,
    UnknownType,
    UnknownVal,
    Val,
    Value,
    head_position,
)

# Payload shape errors that demote a single node to its Unknown variant.
_SHAPE_ERRORS = (TypeError, ValueError, IndexError, KeyError, AttributeError)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def decode_document(data: Any) -> Document:
    """Decode a ``[pages, annotations]`` payload."""
    if not isinstance(data, list) or len(data) != 2:
        raise MalformedDocument("document payload must be a [pages, annotations] pair")
    raw_pages, raw_annots = data
    if not isinstance(raw_pages, list) or not isinstance(raw_annots, list):
        raise MalformedDocument("document pages and annotations must be lists")

    pages = tuple(decode_page(raw) for raw in raw_pages)
    seen: set[str] = set()
    for page in pages:
        if page.name in seen:
            raise MalformedDocument(f"duplicate page name: {page.name!r}")
        seen.add(page.name)

    return Document(pages=pages, annotations=tuple(decode_annotation(raw) for raw in raw_annots))


def decode_page(raw: Any) -> Page:
    try:
        page_data, name, deps = raw
        _, raw_statements = page_data
    except _SHAPE_ERRORS as exc:
        raise MalformedDocument(f"malformed page entry: {exc}") from exc
    if not isinstance(name, str) or not isinstance(raw_statements, list):
        raise MalformedDocument(f"malformed page entry for {name!r}")
    return Page(
        name=name,
        statements=tuple(decode_statement(s) for s in raw_statements),
        deps=tuple(str(d) for d in deps or ()),
    )


def decode_annotation(raw: Any) -> Annotation:
    try:
        raw_expr, raw_val = raw
    except _SHAPE_ERRORS as exc:
        raise MalformedDocument(f"malformed annotation entry: {exc}") from exc
    expr = decode_expr(raw_expr)
    return Annotation(position=head_position(expr), expr=expr, value=decode_val(raw_val))


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _tag(raw: Any) -> str | None:
    if isinstance(raw, dict):
        tag = raw.get("tag")
        return tag if isinstance(tag, str) else None
    return None


def _dispatch(raw: Any, table: dict[str, Callable[[Any], Any]], unknown: Callable[[str | None, Any], Any]) -> Any:
    tag = _tag(raw)
    decode = table.get(tag) if tag is not None else None
    if decode is None:
        return unknown(tag, raw)
    try:
        return decode(raw.get("contents"))
    except _SHAPE_ERRORS:
        return unknown(tag, raw)


def _name(raw: Any) -> str:
    """Names arrive either as plain strings or wrapped as ``{"contents": name}``."""
    if isinstance(raw, dict):
        return _name(raw["contents"])
    if isinstance(raw, str):
        return raw
    raise TypeError(f"expected a name, got {raw!r}")


def _mapping(raw: Any) -> dict[str, Any]:
    """Accept both JSON objects and lists of key/value pairs."""
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    return {_name(key): value for key, value in raw}


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

def decode_type(raw: Any) -> Type:
    return _dispatch(raw, _TYPE_TAGS, UnknownType)


def _decode_sum_type(contents: Any) -> SumType:
    partials = []
    for partial_name, raw_options in contents:
        options = []
        for raw_option in raw_options:
            raw_vars, _, raw_args = raw_option
            options.append(
                PartialOption(
                    type_vars={k: decode_type(v) for k, v in _mapping(raw_vars).items()},
                    type_args={k: decode_type(v) for k, v in _mapping(raw_args).items()},
                )
            )
        partials.append(Partial(name=_name(partial_name), options=tuple(options)))
    return SumType(partials=tuple(partials))


_TYPE_TAGS: dict[str, Callable[[Any], Type]] = {
    "TopType": lambda _: TopType(),
    "TypeVar": lambda contents: TypeVar(_name(contents)),
    "SumType": _decode_sum_type,
}


def decode_meta(raw: Any) -> Meta:
    if isinstance(raw, list) and raw:
        return Meta(type=decode_type(raw[0]), position=raw[1] if len(raw) > 1 else None)
    return Meta(type=decode_type(raw))


# ---------------------------------------------------------------------------
# Objects and guards
# ---------------------------------------------------------------------------

def decode_obj(raw: Any) -> Obj:
    meta, basis, name, raw_vars, raw_args = raw
    return Obj(
        meta=decode_meta(meta),
        basis=str(basis),
        name=_name(name),
        vars={k: decode_meta(v) for k, v in _mapping(raw_vars).items()},
        args={k: decode_meta(v[0]) for k, v in _mapping(raw_args).items()},
    )


def decode_guard(raw: Any) -> Guard:
    return _dispatch(raw, _GUARD_TAGS, UnknownGuard)


_GUARD_TAGS: dict[str, Callable[[Any], Guard]] = {
    "IfGuard": lambda contents: IfGuard(decode_expr(contents)),
    "ElseGuard": lambda _: ElseGuard(),
    "NoGuard": lambda _: NoGuard(),
}


def _decode_arms(raw_arms: Any) -> tuple[Arm, ...]:
    return tuple(Arm(obj=decode_obj(obj), guard=decode_guard(guard)) for obj, guard in raw_arms)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def decode_expr(raw: Any) -> Expr:
    return _dispatch(raw, _EXPR_TAGS, UnknownExpr)


def decode_tuple_arg(raw: Any) -> TupleArg:
    return _dispatch(raw, _ARG_TAGS, UnknownArg)


def _constant(raw: Any) -> Any:
    return raw["contents"] if isinstance(raw, dict) else raw


def _decode_tuple_apply(contents: Any) -> TupleApply:
    meta, (_, base), args = contents
    return TupleApply(
        meta=decode_meta(meta),
        base=decode_expr(base),
        args=tuple(decode_tuple_arg(arg) for arg in args),
    )


def _decode_if_then_else(contents: Any) -> IfThenElse:
    meta, condition, then, otherwise = contents
    return IfThenElse(
        meta=decode_meta(meta),
        condition=decode_expr(condition),
        then=decode_expr(then),
        otherwise=decode_expr(otherwise),
    )


def _decode_match(contents: Any) -> Match:
    meta, subject, arms = contents
    return Match(meta=decode_meta(meta), subject=decode_expr(subject), arms=_decode_arms(arms))


def _decode_case(contents: Any) -> Case:
    meta, subject, arms = contents
    return Case(meta=decode_meta(meta), subject=decode_expr(subject), arms=_decode_arms(arms))


def _decode_methods(contents: Any) -> Methods:
    base, methods = contents
    return Methods(base=decode_expr(base), methods=tuple(decode_expr(m) for m in methods))


def _decode_named_arg(contents: Any) -> NamedArg:
    name, expr = contents
    return NamedArg(name=_name(name), expr=decode_expr(expr))


def _with_raw_spelling(table: dict[str, Callable[[Any], Any]]) -> dict[str, Callable[[Any], Any]]:
    """Register every tag under both ``Name`` and the dump's ``RawName`` spelling."""
    expanded = dict(table)
    for tag, decode in table.items():
        expanded.setdefault(f"Raw{tag}", decode)
    return expanded


_EXPR_TAGS: dict[str, Callable[[Any], Expr]] = _with_raw_spelling(
    {
        "CExpr": lambda contents: CExpr(meta=decode_meta(contents[0]), constant=_constant(contents[1])),
        "Value": lambda contents: Value(meta=decode_meta(contents[0]), name=_name(contents[1])),
        "TupleApply": _decode_tuple_apply,
        "Paren": lambda contents: Paren(decode_expr(contents)),
        "Methods": _decode_methods,
        "IfThenElse": _decode_if_then_else,
        "Match": _decode_match,
        "Case": _decode_case,
    }
)

_ARG_TAGS: dict[str, Callable[[Any], TupleArg]] = _with_raw_spelling(
    {
        "TupleArgNamed": _decode_named_arg,
        "Named": _decode_named_arg,
        "TupleArgInfer": lambda contents: PositionalArg(decode_expr(contents)),
        "Positional": lambda contents: PositionalArg(decode_expr(contents)),
    }
)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def decode_statement(raw: Any) -> Statement:
    return _dispatch(raw, _STATEMENT_TAGS, UnknownStatement)


def decode_sub_statement(raw: Any) -> DeclSubStatement:
    return _dispatch(raw, _SUB_STATEMENT_TAGS, UnknownSubStatement)


def _decode_decl(contents: Any) -> Decl:
    lhs, sub_statements, maybe_expr = contents
    _, (obj, guard) = lhs
    return Decl(
        obj=decode_obj(obj),
        guard=decode_guard(guard),
        sub_statements=tuple(decode_sub_statement(s) for s in sub_statements or ()),
        expr=decode_expr(maybe_expr) if maybe_expr is not None else None,
    )


def _decode_type_vars(raw: Any) -> dict[str, Type]:
    return {k: decode_type(v) for k, v in _mapping(raw).items()}


def _decode_multi_type_def(contents: Any) -> MultiTypeDef:
    name, raw_vars, datas = contents
    return MultiTypeDef(
        name=_name(name),
        vars=_decode_type_vars(raw_vars),
        options=tuple(decode_type(d[0]) for d in datas),
    )


def _decode_type_def(contents: Any) -> TypeDef:
    raw_type = contents[0] if isinstance(contents, list) else contents
    return TypeDef(type=decode_type(raw_type))


def _decode_class_instance(contents: Any) -> ClassInstance:
    (type_name, raw_vars), class_name = contents
    return ClassInstance(type_name=_name(type_name), vars=_decode_type_vars(raw_vars), class_name=_name(class_name))


def _decode_class_decl(contents: Any) -> ClassDecl:
    name, raw_vars = contents
    return ClassDecl(name=_name(name), vars=_decode_type_vars(raw_vars))


def _decode_comment(contents: Any) -> Comment:
    if not isinstance(contents, str):
        raise TypeError("comment contents must be text")
    return Comment(contents)


_STATEMENT_TAGS: dict[str, Callable[[Any], Statement]] = {
    "RawDeclStatement": _decode_decl,
    "Decl": _decode_decl,
    "MultiTypeDefStatement": _decode_multi_type_def,
    "MultiTypeDef": _decode_multi_type_def,
    "TypeDefStatement": _decode_type_def,
    "TypeDef": _decode_type_def,
    "RawClassDefStatement": _decode_class_instance,
    "ClassInstance": _decode_class_instance,
    "RawClassDeclStatement": _decode_class_decl,
    "ClassDecl": _decode_class_decl,
    "RawGlobalAnnot": lambda contents: GlobalAnnot(decode_expr(contents)),
    "GlobalAnnot": lambda contents: GlobalAnnot(decode_expr(contents)),
    "RawComment": _decode_comment,
    "Comment": _decode_comment,
}

_SUB_STATEMENT_TAGS: dict[str, Callable[[Any], DeclSubStatement]] = {
    "RawDeclSubStatementDecl": _decode_decl,
    "Decl": _decode_decl,
    "RawDeclSubStatementAnnot": lambda contents: SubAnnot(decode_expr(contents)),
    "Annot": lambda contents: SubAnnot(decode_expr(contents)),
}


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def decode_val(raw: Any) -> Val:
    tag = _tag(raw)
    try:
        if tag == "TupleVal":
            return TupleVal(name=str(raw["name"]), args={k: decode_val(v) for k, v in _mapping(raw.get("args")).items()})
        if tag == "StrVal":
            return StrVal(str(raw["contents"]))
        if tag == "IntVal":
            return IntVal(int(raw["contents"]))
        if tag == "FloatVal":
            return FloatVal(float(raw["contents"]))
    except _SHAPE_ERRORS:
        pass
    return UnknownVal(tag, raw)
