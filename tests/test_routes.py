from __future__ import annotations

import pytest

from catlnview.errors import UnknownRoute
from catlnview.routes import Route, page_href, parse_route


@pytest.mark.parametrize(
    ("route", "expected"),
    [
        ("/", Route("typecheck", "/typecheck")),
        ("/typecheck", Route("typecheck", "/typecheck")),
        ("/desugar/", Route("desugar", "/desugar")),
        ("/constrain", Route("constrain", "/constrain")),
        ("llvm", Route("llvm", "/llvm")),
        ("/docs", Route("docs", "/pages")),
        ("/docs/std%2Flist.ct", Route("docs", "/pages", "std/list.ct")),
    ],
)
def test_parse_route(route: str, expected: Route) -> None:
    assert parse_route(route) == expected


@pytest.mark.parametrize("route", ["/nope", "/llvm/main.ll"])
def test_unknown_routes(route: str) -> None:
    with pytest.raises(UnknownRoute):
        parse_route(route)


def test_page_href_round_trips_through_parse_route() -> None:
    href = page_href("std/data maybe.ct")
    assert href == "/docs/std%2Fdata%20maybe.ct"
    assert parse_route(href).page == "std/data maybe.ct"
