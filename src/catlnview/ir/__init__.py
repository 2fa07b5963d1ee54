"""Typed IR for compiler dumps."""

from .base import Annotation, Artifact, Document, Page, Statement, Expr, Type, Val
from .decoder import decode_document, decode_expr, decode_statement, decode_type, decode_val
from .pages import PAGE, PageTree, TocEntry, build_page_tree, iter_toc, ordered_children
from .positions import PositionIndex, position_key

__all__ = [
    "Annotation",
    "Artifact",
    "Document",
    "Page",
    "Statement",
    "Expr",
    "Type",
    "Val",
    "decode_document",
    "decode_expr",
    "decode_statement",
    "decode_type",
    "decode_val",
    "PAGE",
    "PageTree",
    "TocEntry",
    "build_page_tree",
    "iter_toc",
    "ordered_children",
    "PositionIndex",
    "position_key",
]
