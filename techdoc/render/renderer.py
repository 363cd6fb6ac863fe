"""Render decoded technology-detail pages into standalone HTML.

The renderer walks the block and inline trees with ``match`` and resolves
identifiers through the page's reference table; the decoder itself never
resolves references. Declaration fragments are highlighted with Pygments by
mapping each fragment kind onto a Pygments token type.

Example
-------
>>> from techdoc.model import Paragraph, Strong, Text
>>> from techdoc.render import HtmlPageRenderer
>>> renderer = HtmlPageRenderer()
>>> renderer.render_blocks((Paragraph((Strong((Text("Hi"),)),)),), {})
'<p><strong>Hi</strong></p>'
"""

from __future__ import annotations

import io
import re
import typing as typ
from html import escape
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pygments.formatters.html import HtmlFormatter
from pygments.token import Token

from techdoc.model import (
    Aside,
    CodeVoice,
    Emphasis,
    FragmentKind,
    Heading,
    Image,
    InlineHead,
    InlineReference,
    Paragraph,
    Strong,
    Text,
    UnknownBlock,
    UnknownInline,
    UnorderedList,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pygments.token import _TokenType

    from techdoc.model import (
        BlockContent,
        Fragment,
        Identifier,
        InlineContent,
        Reference,
        TechnologyDetail,
    )

    References = cabc.Mapping[Identifier, Reference]

FRAGMENT_TOKENS: dict[FragmentKind, _TokenType] = {
    FragmentKind.TEXT: Token.Text,
    FragmentKind.KEYWORD: Token.Keyword,
    FragmentKind.IDENTIFIER: Token.Name,
    FragmentKind.LABEL: Token.Name.Label,
    FragmentKind.TYPE_IDENTIFIER: Token.Name.Class,
    FragmentKind.GENERIC_PARAMETER: Token.Name.Variable,
    FragmentKind.EXTERNAL_PARAM: Token.Name.Attribute,
    FragmentKind.ATTRIBUTE: Token.Name.Decorator,
}

_EMPTY = ""


class HtmlPageRenderer:
    """Render :class:`TechnologyDetail` trees with a shared page template."""

    def __init__(
        self,
        pygments_style: str = "xcode",
        *,
        page_title_suffix: str = "Documentation",
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer with a Pygments style and template directory.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style used for declaration highlighting. Defaults to
            ``"xcode"``.
        page_title_suffix : str, optional
            Text appended to the HTML ``<title>``.
        templates_dir : Path, optional
            Directory containing ``technology.jinja``. Defaults to the
            package templates.
        """
        self.pygments_style = pygments_style
        self.page_title_suffix = page_title_suffix
        self._formatter = HtmlFormatter(style=pygments_style, nowrap=True)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("technology.jinja")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted declarations."""
        return self._formatter.get_style_defs(".declaration")

    def render(self, detail: TechnologyDetail) -> str:
        """Render ``detail`` into a complete HTML document.

        Fragments produced by the ``render_*`` helpers are already escaped
        HTML; the template marks them ``safe`` and autoescapes everything else.
        """
        references = detail.references
        context = {
            "html_title": f"{detail.metadata.title} | {self.page_title_suffix}",
            "stylesheet": self.stylesheet,
            "metadata": detail.metadata,
            "abstract": self.render_inlines(detail.abstract, references),
            "sections": [
                self.render_blocks(section.content, references)
                for section in detail.primary_contents
            ],
            "topics": [
                {
                    "title": group.title,
                    "anchor": group.anchor,
                    "entries": self._entries(group.identifiers, references),
                }
                for group in detail.topics
            ],
            "see_also": [
                {
                    "title": group.title,
                    "entries": self._entries(group.identifiers, references),
                }
                for group in detail.see_also
            ],
        }
        return self.template.render(**context)

    def write(
        self, detail: TechnologyDetail, output_dir: Path, slug: str | None = None
    ) -> Path:
        """Render ``detail`` and write it to ``output_dir/<slug>.html``."""
        output_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{slug or _slugify(detail.metadata.title)}.html"
        output_path = output_dir / filename
        output_path.write_text(self.render(detail), encoding="utf-8")
        return output_path

    # Block content ----------------------------------------------------------

    def render_blocks(
        self, blocks: cabc.Iterable[BlockContent], references: References
    ) -> str:
        return _EMPTY.join(self._block(block, references) for block in blocks)

    def _block(self, block: BlockContent, references: References) -> str:
        match block:
            case Paragraph(contents=children):
                return f"<p>{self.render_inlines(children, references)}</p>"
            case Heading(level=level, anchor=anchor, text=text):
                clamped = min(max(level, 1), 6)
                return (
                    f'<h{clamped} id="{escape(anchor, quote=True)}">'
                    f"{escape(text)}</h{clamped}>"
                )
            case Aside(style=style, name=name, contents=children):
                modifier = escape(style.lower(), quote=True)
                label = escape(name or style.capitalize())
                body = self.render_blocks(children, references)
                return (
                    f'<aside class="aside aside--{modifier}">'
                    f'<p class="aside__label">{label}</p>{body}</aside>'
                )
            case UnorderedList(items=items):
                rendered = _EMPTY.join(
                    f"<li>{self.render_blocks(item.content, references)}</li>"
                    for item in items
                )
                return f"<ul>{rendered}</ul>"
            case UnknownBlock(type=kind):
                return f"<!-- unsupported block: {escape(kind)} -->"
            case _:
                typ.assert_never(block)

    # Inline content ---------------------------------------------------------

    def render_inlines(
        self, contents: cabc.Iterable[InlineContent], references: References
    ) -> str:
        return _EMPTY.join(self._inline(node, references) for node in contents)

    def _inline(self, node: InlineContent, references: References) -> str:
        match node:
            case Text(text=text):
                return escape(text, quote=False)
            case CodeVoice(code=code):
                return f"<code>{escape(code, quote=False)}</code>"
            case Image(identifier=identifier):
                return self._image(identifier, references)
            case InlineReference(identifier=identifier, is_active=is_active):
                return self._link(identifier, references, active=is_active)
            case Strong(contents=children):
                return f"<strong>{self.render_inlines(children, references)}</strong>"
            case Emphasis(contents=children):
                return f"<em>{self.render_inlines(children, references)}</em>"
            case InlineHead(contents=children):
                body = self.render_inlines(children, references)
                return f'<span class="inline-head">{body}</span>'
            case UnknownInline(type=kind):
                return f"<!-- unsupported inline: {escape(kind)} -->"
            case _:
                typ.assert_never(node)

    @staticmethod
    def _image(identifier: Identifier, references: References) -> str:
        reference = references.get(identifier)
        if reference is None or not reference.url:
            safe_id = escape(identifier, quote=True)
            return f'<span class="image-missing" data-identifier="{safe_id}"></span>'
        src = escape(reference.url, quote=True)
        alt = escape(reference.title or "", quote=True)
        return f'<img src="{src}" alt="{alt}">'

    @staticmethod
    def _link(identifier: Identifier, references: References, *, active: bool = True) -> str:
        """Resolve ``identifier`` to a link, a plain label, or the raw identifier."""
        reference = references.get(identifier)
        if reference is None:
            return f'<span class="reference is-unresolved">{escape(identifier)}</span>'
        label = escape(reference.title or identifier)
        body = f"<code>{label}</code>" if reference.kind == "symbol" else label
        if active and reference.url:
            return f'<a href="{escape(reference.url, quote=True)}">{body}</a>'
        return f'<span class="reference">{body}</span>'

    # Declarations -----------------------------------------------------------

    def render_declaration(self, fragments: cabc.Sequence[Fragment]) -> str:
        """Highlight declaration fragments as a ``<code class="declaration">``."""
        if not fragments:
            return _EMPTY
        tokens = ((FRAGMENT_TOKENS[fragment.kind], fragment.text) for fragment in fragments)
        buffer = io.StringIO()
        self._formatter.format(tokens, buffer)
        return f'<code class="declaration">{buffer.getvalue()}</code>'

    def _entries(
        self, identifiers: cabc.Iterable[Identifier], references: References
    ) -> list[dict[str, str]]:
        entries: list[dict[str, str]] = []
        for identifier in identifiers:
            reference = references.get(identifier)
            entry = {
                "link": self._link(identifier, references),
                "declaration": _EMPTY,
                "abstract": _EMPTY,
            }
            if reference is not None:
                entry["declaration"] = self.render_declaration(
                    reference.navigator_title or reference.fragments
                )
                entry["abstract"] = self.render_inlines(reference.abstract, references)
            entries.append(entry)
        return entries


def _slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "page"


__all__ = ["FRAGMENT_TOKENS", "HtmlPageRenderer"]
