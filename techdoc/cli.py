"""Cyclopts CLI entrypoint for decoding, fetching, and rendering documentation pages.

The ``techdoc`` console script can inspect a saved technology-detail JSON file,
download a page from the documentation service, and render a page to static
HTML. Decode failures are reported with their error kind and path and exit
with status 1; a failed page is not retried.

Examples
--------
Print the outline of a saved page:

>>> from techdoc.cli import app
>>> app(["inspect", "swiftui.json"])  # doctest: +SKIP

Fetch and render a page into a custom directory:

>>> app(["render", "swiftui/view", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import collections
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .client import DocumentationClient, DocumentationFetchError
from .config import DEFAULT_CONFIG, load_settings
from .decode import decode_technology_detail
from .errors import DecodeError
from .logging import configure_logging
from .model import (
    Aside,
    Emphasis,
    InlineHead,
    Paragraph,
    Strong,
    UnknownBlock,
    UnknownInline,
    UnorderedList,
)
from .render import HtmlPageRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import TechdocConfig
    from .model import BlockContent, InlineContent, TechnologyDetail

app = App(name="techdoc", config=cyclopts.config.Env("TECHDOC_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _client(config: TechdocConfig) -> DocumentationClient:
    return DocumentationClient(
        api_base=config.client.api_base,
        timeout=config.client.timeout,
        retries=config.client.retries,
    )


@app.command(help="Decode a saved technology-detail JSON file and print its outline.")
def inspect(
    file: Path,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to techdoc config", env_var="TECHDOC_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Decode ``file`` and print a human-readable outline.

    Parameters
    ----------
    file : Path
        JSON document saved from the documentation service.
    config : Path, optional
        Path to ``techdoc.yaml``; defaults are used when it does not exist.
    verbose : bool, optional
        Emit debug logging, including unrecognised content kinds.

    Raises
    ------
    SystemExit
        With status 1 when the file cannot be read or decoded.
    """
    configure_logging(verbose=verbose)
    settings = load_settings(config)
    try:
        data = file.read_bytes()
    except OSError as exc:
        _fail(f"cannot read {_format_path(file)}: {exc}")
    try:
        detail = decode_technology_detail(data, settings=settings.decoder)
    except DecodeError as exc:
        _fail(f"{type(exc).__name__}: {exc}")
    for line in outline(detail):
        print(line)


@app.command(help="Download a documentation page and print its outline.")
def fetch(
    page: str,
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Save the raw JSON to this file")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to techdoc config", env_var="TECHDOC_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Fetch ``page``, validate it by decoding, and optionally save the bytes."""
    configure_logging(verbose=verbose)
    settings = load_settings(config)
    client = _client(settings)
    try:
        data = client.fetch(page)
        detail = decode_technology_detail(data, settings=settings.decoder)
    except (DocumentationFetchError, DecodeError) as exc:
        _fail(f"{type(exc).__name__}: {exc}")
    finally:
        client.close()
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        print(f"wrote {_format_path(output)}")
    for line in outline(detail):
        print(line)


@app.command(help="Render a saved file or remote page to static HTML.")
def render(
    source: str,
    *,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to techdoc config", env_var="TECHDOC_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Render ``source`` to HTML.

    ``source`` is read from disk when it names an existing file; otherwise it
    is treated as a documentation page path and fetched.
    """
    configure_logging(verbose=verbose)
    settings = load_settings(config)
    detail = _load_detail(source, settings)
    renderer = HtmlPageRenderer(
        settings.render.pygments_style,
        page_title_suffix=settings.render.page_title_suffix,
    )
    written = renderer.write(detail, output_dir or settings.render.output_dir)
    print(f"wrote {_format_path(written)}")


def _load_detail(source: str, settings: TechdocConfig) -> TechnologyDetail:
    path = Path(source)
    try:
        if path.is_file():
            return decode_technology_detail(path.read_bytes(), settings=settings.decoder)
        client = _client(settings)
        try:
            return client.fetch_technology_detail(source, settings=settings.decoder)
        finally:
            client.close()
    except (DocumentationFetchError, DecodeError) as exc:
        _fail(f"{type(exc).__name__}: {exc}")


def outline(detail: TechnologyDetail) -> list[str]:
    """Summarise a decoded page as printable lines."""
    metadata = detail.metadata
    lines = [f"{metadata.title} ({metadata.role_heading or metadata.role})"]
    if metadata.platforms:
        platforms = ", ".join(
            f"{item.name} {item.introduced_at}+{' beta' if item.beta else ''}"
            for item in metadata.platforms
        )
        lines.append(f"platforms: {platforms}")
    lines.append(f"sections: {len(detail.primary_contents)}")
    lines.append(f"topics: {len(detail.topics)}")
    lines.extend(f"  - {group.title} ({len(group.identifiers)})" for group in detail.topics)
    lines.append(f"see also: {len(detail.see_also)}")
    lines.append(f"references: {len(detail.references)}")
    unknown = unknown_kinds(detail)
    if unknown:
        summary = ", ".join(f"{kind} x{count}" for kind, count in sorted(unknown.items()))
        lines.append(f"unknown content: {summary}")
    return lines


def unknown_kinds(detail: TechnologyDetail) -> collections.Counter[str]:
    """Count unrecognised block and inline kinds across the whole page."""
    counts: collections.Counter[str] = collections.Counter()
    blocks: list[BlockContent] = [
        block for section in detail.primary_contents for block in section.content
    ]
    inlines: list[InlineContent] = list(detail.abstract)
    for reference in detail.references.values():
        inlines.extend(reference.abstract)
    while blocks:
        match blocks.pop():
            case Paragraph(contents=children):
                inlines.extend(children)
            case Aside(contents=children):
                blocks.extend(children)
            case UnorderedList(items=items):
                blocks.extend(block for item in items for block in item.content)
            case UnknownBlock(type=kind):
                counts[kind] += 1
            case _:
                continue
    while inlines:
        match inlines.pop():
            case Strong(contents=children) | Emphasis(contents=children) | InlineHead(
                contents=children
            ):
                inlines.extend(children)
            case UnknownInline(type=kind):
                counts[kind] += 1
            case _:
                continue
    return counts


def main(argv: cabc.Sequence[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers the ``techdoc`` console command.

    Parameters
    ----------
    argv : Sequence[str], optional
        Arguments to parse instead of ``sys.argv``.

    Examples
    --------
    >>> main(["inspect", "page.json"])  # doctest: +SKIP
    """
    app(argv)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
