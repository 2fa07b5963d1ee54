"""Build the documentation navigation tree from flat page names."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

from catlnview.errors import PageTreeConflict

# Leaf marker. Directories are dicts; anything else is a page.
PAGE = 1

# The entry module is always listed first among its siblings.
MAIN_PAGE = "main.ct"

PageTree = dict[str, Union["PageTree", int]]


@dataclass(slots=True)
class TocEntry:
    name: str
    path: str
    depth: int
    is_page: bool


def build_page_tree(page_names: Iterable[str]) -> PageTree:
    """Nest slash-delimited page names into directories and page leaves."""
    tree: PageTree = {}
    for page_name in sorted(set(page_names)):
        *dirs, leaf = page_name.split("/")
        node = tree
        for depth, segment in enumerate(dirs):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise PageTreeConflict(f"{'/'.join(dirs[: depth + 1])!r} is both a page and a directory")
            node = child
        if isinstance(node.get(leaf), dict):
            raise PageTreeConflict(f"{page_name!r} is both a page and a directory")
        node[leaf] = PAGE
    return tree


def is_directory(node: PageTree | int) -> bool:
    return isinstance(node, dict)


def ordered_children(tree: PageTree) -> list[str]:
    children = sorted(tree)
    if MAIN_PAGE in tree:
        children.remove(MAIN_PAGE)
        children.insert(0, MAIN_PAGE)
    return children


def iter_toc(tree: PageTree, prefix: str = "", depth: int = 0) -> Iterator[TocEntry]:
    """Walk the tree in display order, directories before their contents."""
    for name in ordered_children(tree):
        path = f"{prefix}/{name}" if prefix else name
        node = tree[name]
        if is_directory(node):
            yield TocEntry(name=name, path=path, depth=depth, is_page=False)
            yield from iter_toc(node, path, depth + 1)
        else:
            yield TocEntry(name=name, path=path, depth=depth, is_page=True)
