"""Tests for document sources and the tri-state loader."""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from pathlib import Path
from typing import Any

import httpx
import pytest

from catlnview.errors import MalformedDocument, TransportError
from catlnview.source.base import Response, unwrap_response
from catlnview.source.file_source import FileDocumentSource
from catlnview.source.http_source import HttpDocumentSource
from catlnview.source.loader import Failed, Loader, Pending, Ready, render_state


class _GatedSource:
    """Holds every fetch until the test releases its path."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.gates: defaultdict[str, asyncio.Event] = defaultdict(asyncio.Event)

    def release(self, path: str) -> None:
        self.gates[path].set()

    async def fetch(self, path: str) -> Any:
        await self.gates[path].wait()
        response = self.responses[path]
        if isinstance(response, Exception):
            raise response
        return response


# ---------------------------------------------------------------------------
# Response unwrapping
# ---------------------------------------------------------------------------

def test_unwrap_data_and_notes() -> None:
    assert unwrap_response([{"a": 1}, ["note"]]) == Response(data={"a": 1}, notes=["note"])


def test_unwrap_notes_only() -> None:
    response = unwrap_response([["compile failed"]])
    assert response.data is None
    assert response.notes == ["compile failed"]


@pytest.mark.parametrize("payload", [[], [1, 2, 3], {"data": 1}, "text"])
def test_unwrap_rejects_other_shapes(payload: Any) -> None:
    with pytest.raises(MalformedDocument):
        unwrap_response(payload)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def test_loader_moves_from_pending_to_ready() -> None:
    async def scenario() -> None:
        source = _GatedSource({"/pages": [[1, 2], []]})
        loader = Loader(source)
        task = asyncio.create_task(loader.load("/pages"))
        await asyncio.sleep(0)
        assert loader.state == Pending("/pages")

        source.release("/pages")
        state = await task
        assert state == Ready("/pages", [1, 2], [])
        assert loader.state is state

    asyncio.run(scenario())


def test_loader_reports_transport_errors() -> None:
    async def scenario() -> None:
        source = _GatedSource({"/llvm": TransportError("/llvm", "connection refused")})
        source.release("/llvm")
        state = await Loader(source).load("/llvm")
        assert isinstance(state, Failed)
        assert "connection refused" in state.message

    asyncio.run(scenario())


def test_loader_reports_malformed_responses() -> None:
    async def scenario() -> None:
        source = _GatedSource({"/llvm": [1, 2, 3]})
        source.release("/llvm")
        state = await Loader(source).load("/llvm")
        assert isinstance(state, Failed)
        assert isinstance(state.error, MalformedDocument)

    asyncio.run(scenario())


def test_late_response_for_previous_path_is_ignored() -> None:
    async def scenario() -> None:
        source = _GatedSource({"/typecheck": [["old"], []], "/desugar": [["new"], []]})
        loader = Loader(source)
        first = asyncio.create_task(loader.load("/typecheck"))
        await asyncio.sleep(0)
        second = asyncio.create_task(loader.load("/desugar"))
        await asyncio.sleep(0)

        source.release("/desugar")
        latest = await second
        assert latest == Ready("/desugar", ["new"], [])

        source.release("/typecheck")
        assert await first is latest
        assert loader.state is latest

    asyncio.run(scenario())


def test_render_state_picks_exactly_one_view() -> None:
    views = {"error": lambda s: "error", "pending": lambda s: "pending", "ready": lambda s: "ready"}
    assert render_state(Pending("/x"), **views) == "pending"
    assert render_state(Failed("/x", TransportError("/x", "boom")), **views) == "error"
    assert render_state(Ready("/x"), **views) == "ready"


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def test_http_source_fetches_json() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[["page"], []])

    source = HttpDocumentSource("http://catln.test/", transport=httpx.MockTransport(handler))
    assert asyncio.run(source.fetch("/pages")) == [["page"], []]
    assert seen == ["/pages"]


@pytest.mark.parametrize(
    "response",
    [httpx.Response(500, text="oops"), httpx.Response(200, content=b"not json")],
)
def test_http_source_wraps_failures(response: httpx.Response) -> None:
    source = HttpDocumentSource("http://catln.test", transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(TransportError) as excinfo:
        asyncio.run(source.fetch("/typecheck"))
    assert excinfo.value.path == "/typecheck"


def test_file_source_reads_dumps(tmp_path: Path) -> None:
    (tmp_path / "pages.json").write_text(json.dumps([[[], []], []]), encoding="utf-8")
    source = FileDocumentSource(tmp_path)

    assert asyncio.run(source.fetch("/pages")) == [[[], []], []]

    with pytest.raises(TransportError):
        asyncio.run(source.fetch("/llvm"))

    (tmp_path / "desugar.json").write_text("{broken", encoding="utf-8")
    with pytest.raises(TransportError):
        asyncio.run(source.fetch("/desugar"))


def test_file_source_rejects_invalid_utf8(tmp_path: Path) -> None:
    (tmp_path / "pages.json").write_bytes(b'[[], ["\xff\xfe"]]')

    state = asyncio.run(Loader(FileDocumentSource(tmp_path)).load("/pages"))

    assert isinstance(state, Failed)
    assert isinstance(state.error, TransportError)
    assert "pages.json" in state.message
