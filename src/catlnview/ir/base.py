"""Core intermediate representation (IR) for Catln compiler dumps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# A source position is kept exactly as the compiler serialized it.
Position = Any


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TopType:
    pass


@dataclass(frozen=True, slots=True)
class TypeVar:
    name: str


@dataclass(frozen=True, slots=True)
class PartialOption:
    type_vars: dict[str, Type] = field(default_factory=dict)
    type_args: dict[str, Type] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Partial:
    name: str
    options: tuple[PartialOption, ...] = ()


@dataclass(frozen=True, slots=True)
class SumType:
    partials: tuple[Partial, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownType:
    tag: str | None
    raw: Any = None


Type = TopType | TypeVar | SumType | UnknownType


@dataclass(frozen=True, slots=True)
class Meta:
    type: Type
    position: Position = None


# ---------------------------------------------------------------------------
# Objects and guards
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Obj:
    meta: Meta
    basis: str
    name: str
    vars: dict[str, Meta] = field(default_factory=dict)
    args: dict[str, Meta] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IfGuard:
    expr: Expr


@dataclass(frozen=True, slots=True)
class ElseGuard:
    pass


@dataclass(frozen=True, slots=True)
class NoGuard:
    pass


@dataclass(frozen=True, slots=True)
class UnknownGuard:
    tag: str | None
    raw: Any = None


Guard = IfGuard | ElseGuard | NoGuard | UnknownGuard


@dataclass(frozen=True, slots=True)
class Arm:
    obj: Obj
    guard: Guard


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CExpr:
    meta: Meta
    constant: Any


@dataclass(frozen=True, slots=True)
class Value:
    meta: Meta
    name: str


@dataclass(frozen=True, slots=True)
class NamedArg:
    name: str
    expr: Expr


@dataclass(frozen=True, slots=True)
class PositionalArg:
    expr: Expr


@dataclass(frozen=True, slots=True)
class UnknownArg:
    tag: str | None
    raw: Any = None


TupleArg = NamedArg | PositionalArg | UnknownArg


@dataclass(frozen=True, slots=True)
class TupleApply:
    meta: Meta
    base: Expr
    args: tuple[TupleArg, ...] = ()


@dataclass(frozen=True, slots=True)
class Paren:
    expr: Expr


@dataclass(frozen=True, slots=True)
class Methods:
    base: Expr
    methods: tuple[Expr, ...] = ()


@dataclass(frozen=True, slots=True)
class IfThenElse:
    meta: Meta
    condition: Expr
    then: Expr
    otherwise: Expr


@dataclass(frozen=True, slots=True)
class Match:
    meta: Meta
    subject: Expr
    arms: tuple[Arm, ...] = ()


@dataclass(frozen=True, slots=True)
class Case:
    meta: Meta
    subject: Expr
    arms: tuple[Arm, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownExpr:
    tag: str | None
    raw: Any = None


Expr = CExpr | Value | TupleApply | Paren | Methods | IfThenElse | Match | Case | UnknownExpr


def head_position(expr: Expr) -> Position:
    """Return the position of the node an expression is rooted at."""
    if isinstance(expr, Paren):
        return head_position(expr.expr)
    if isinstance(expr, Methods):
        return head_position(expr.base)
    meta = getattr(expr, "meta", None)
    return meta.position if meta is not None else None


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Decl:
    obj: Obj
    guard: Guard
    sub_statements: tuple[DeclSubStatement, ...] = ()
    expr: Expr | None = None


@dataclass(frozen=True, slots=True)
class SubAnnot:
    expr: Expr


@dataclass(frozen=True, slots=True)
class UnknownSubStatement:
    tag: str | None
    raw: Any = None


DeclSubStatement = Decl | SubAnnot | UnknownSubStatement


@dataclass(frozen=True, slots=True)
class MultiTypeDef:
    name: str
    vars: dict[str, Type] = field(default_factory=dict)
    options: tuple[Type, ...] = ()


@dataclass(frozen=True, slots=True)
class TypeDef:
    type: Type


@dataclass(frozen=True, slots=True)
class ClassInstance:
    type_name: str
    vars: dict[str, Type] = field(default_factory=dict)
    class_name: str = ""


@dataclass(frozen=True, slots=True)
class ClassDecl:
    name: str
    vars: dict[str, Type] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GlobalAnnot:
    expr: Expr


@dataclass(frozen=True, slots=True)
class Comment:
    text: str


@dataclass(frozen=True, slots=True)
class UnknownStatement:
    tag: str | None
    raw: Any = None


Statement = Decl | MultiTypeDef | TypeDef | ClassInstance | ClassDecl | GlobalAnnot | Comment | UnknownStatement


# ---------------------------------------------------------------------------
# Computed values and annotations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TupleVal:
    name: str
    args: dict[str, Val] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class StrVal:
    value: str


@dataclass(frozen=True, slots=True)
class IntVal:
    value: int


@dataclass(frozen=True, slots=True)
class FloatVal:
    value: float


@dataclass(frozen=True, slots=True)
class UnknownVal:
    tag: str | None
    raw: Any = None


Val = TupleVal | StrVal | IntVal | FloatVal | UnknownVal


@dataclass(frozen=True, slots=True)
class Artifact:
    """A file produced by running a program, e.g. an LLVM listing."""

    name: str
    contents: str


@dataclass(frozen=True, slots=True)
class Annotation:
    position: Position
    expr: Expr
    value: Val


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Page:
    name: str
    statements: tuple[Statement, ...] = ()
    deps: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Document:
    pages: tuple[Page, ...] = ()
    annotations: tuple[Annotation, ...] = ()

    def page(self, name: str) -> Page | None:
        for page in self.pages:
            if page.name == name:
                return page
        return None

    @property
    def page_names(self) -> list[str]:
        return [page.name for page in self.pages]

    @property
    def default_page(self) -> Page | None:
        return self.pages[-1] if self.pages else None
