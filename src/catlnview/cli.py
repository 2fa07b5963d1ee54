"""catlnview CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click

from catlnview.errors import CatlnViewError
from catlnview.renderer.html_renderer import HTMLRenderer
from catlnview.routes import parse_route
from catlnview.source.file_source import FileDocumentSource
from catlnview.source.http_source import DEFAULT_TIMEOUT, HttpDocumentSource
from catlnview.source.loader import Failed, Loader


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("route", default="/docs")
@click.option(
    "--source",
    "-s",
    envvar="CATLNVIEW_SOURCE",
    default="http://localhost:8080",
    show_default=True,
    help="Webdocs server URL or directory of JSON dumps",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), required=True, help="Output HTML path")
@click.option(
    "--timeout",
    envvar="CATLNVIEW_TIMEOUT",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="HTTP timeout in seconds",
)
@click.option("--types/--no-types", default=True, show_default=True, help="Show unconstrained types on objects")
@click.option("--details", is_flag=True, help="Show object basis and meta")
@click.option("--dark-mode", is_flag=True, help="Enable dark mode stylesheet")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    route: str,
    source: str,
    output: Path,
    timeout: float,
    types: bool,
    details: bool,
    dark_mode: bool,
    verbose: bool,
) -> None:
    """Render a view of a Catln compiler dump, e.g. /typecheck or /docs/main.ct."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        parsed = parse_route(route)
    except CatlnViewError as exc:
        raise click.ClickException(str(exc)) from exc

    loader = Loader(_select_source(source, timeout=timeout))
    state = asyncio.run(loader.load(parsed.source_path))
    if isinstance(state, Failed):
        raise click.ClickException(f"Could not load {parsed.source_path}: {state.message}")

    try:
        html = HTMLRenderer().render(state, parsed, show_types=types, details=details, dark_mode=dark_mode)
    except CatlnViewError as exc:
        raise click.ClickException(str(exc)) from exc

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")

    click.echo(f"Rendered: {output}")


def _select_source(source: str, *, timeout: float):
    if source.startswith(("http://", "https://")):
        return HttpDocumentSource(source, timeout=timeout)
    path = Path(source)
    if path.is_dir():
        return FileDocumentSource(path)
    raise click.ClickException(f"Unsupported source: {source} (expected an http(s) URL or a directory of JSON dumps)")


if __name__ == "__main__":  # pragma: no cover
    main()
