"""Lower classified raw shapes into the closed :mod:`techdoc.model`.

The :class:`Normalizer` applies the page's default-value policy (absent
``beta`` is ``False``; absent ``abstract``, ``fragments``, ``navigatorTitle``
and optional section lists are empty) and recurses through nested content.

Block and inline content each have exactly one recursive entry point
(:meth:`Normalizer.block` and :meth:`Normalizer.inline`). Asides, list items,
paragraphs, and the strong/emphasis/inline-head wrappers all recurse through
them with an explicit depth counter, so arbitrarily nested payloads are
handled uniformly and anything deeper than ``max_depth`` fails with
:class:`~techdoc.errors.NestingTooDeep`.

Example
-------
>>> import msgspec
>>> from techdoc.normalize import Normalizer
>>> raw = msgspec.Raw(b'{"type": "strong", "inlineContent": [{"type": "text", "text": "hi"}]}')
>>> Normalizer().inline(raw, "$.abstract[0]")
Strong(contents=(Text(text='hi'),))
"""

from __future__ import annotations

import typing as typ

from ._constants import DEFAULT_MAX_DEPTH
from .classify import classify_block, classify_fragment, classify_inline, classify_topic
from .errors import NestingTooDeep
from .model import (
    Aside,
    BlockContent,
    CodeVoice,
    ContentSection,
    DiffAvailability,
    DocumentTopic,
    Emphasis,
    Fragment,
    Heading,
    Identifier,
    Image,
    InlineContent,
    InlineHead,
    InlineReference,
    ListItem,
    Metadata,
    Paragraph,
    Platform,
    Reference,
    SeeAlso,
    Strong,
    TaskGroup,
    Text,
    Topic,
    UnknownBlock,
    UnknownInline,
    UnorderedList,
)
from .raw import (
    RawAside,
    RawCodeVoice,
    RawDiffAvailability,
    RawDocumentTopic,
    RawEmphasis,
    RawHeading,
    RawImage,
    RawInlineHead,
    RawInlineReference,
    RawParagraph,
    RawReference,
    RawStrong,
    RawTaskGroupTopic,
    RawText,
    RawUnknownContent,
    RawUnorderedList,
    decode_raw,
    key_path,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import msgspec

    from .raw import (
        RawContentSection,
        RawFragment,
        RawMetadata,
        RawPlatform,
        RawSeeAlso,
    )


class Normalizer:
    """Recursively convert raw shapes into immutable model values."""

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            msg = f"max_depth must be at least 1, got {max_depth}"
            raise ValueError(msg)
        self.max_depth = max_depth

    # Block content ----------------------------------------------------------

    def blocks(
        self, raws: cabc.Sequence[msgspec.Raw], path: str, depth: int = 1
    ) -> tuple[BlockContent, ...]:
        """Normalize a block sequence whose elements sit at ``depth``."""
        return tuple(
            self.block(raw, f"{path}[{index}]", depth) for index, raw in enumerate(raws)
        )

    def block(self, raw: msgspec.Raw, path: str, depth: int = 1) -> BlockContent:
        """Normalize one block element located at ``path``."""
        self._guard(path, depth)
        variant = classify_block(raw, path)
        match variant:
            case RawParagraph(inline_content=children):
                return Paragraph(
                    contents=self.inlines(children, f"{path}.inlineContent", depth + 1)
                )
            case RawHeading(level=level, anchor=anchor, text=text):
                return Heading(level=level, anchor=anchor, text=text)
            case RawAside(style=style, name=name, content=children):
                return Aside(
                    style=style,
                    name=name,
                    contents=self.blocks(children, f"{path}.content", depth + 1),
                )
            case RawUnorderedList(items=items):
                return UnorderedList(
                    items=tuple(
                        ListItem(
                            content=self.blocks(
                                item.content, f"{path}.items[{index}].content", depth + 1
                            )
                        )
                        for index, item in enumerate(items)
                    )
                )
            case RawUnknownContent(type=kind):
                return UnknownBlock(type=kind)
            case _:
                typ.assert_never(variant)

    # Inline content ---------------------------------------------------------

    def inlines(
        self, raws: cabc.Sequence[msgspec.Raw], path: str, depth: int = 1
    ) -> tuple[InlineContent, ...]:
        """Normalize an inline sequence whose elements sit at ``depth``."""
        return tuple(
            self.inline(raw, f"{path}[{index}]", depth)
            for index, raw in enumerate(raws)
        )

    def inline(self, raw: msgspec.Raw, path: str, depth: int = 1) -> InlineContent:
        """Normalize one inline element located at ``path``."""
        self._guard(path, depth)
        variant = classify_inline(raw, path)
        children_path = f"{path}.inlineContent"
        match variant:
            case RawText(text=text):
                return Text(text=text)
            case RawCodeVoice(code=code):
                return CodeVoice(code=code)
            case RawImage(identifier=identifier):
                return Image(identifier=Identifier(identifier))
            case RawInlineReference(identifier=identifier, is_active=is_active):
                return InlineReference(
                    identifier=Identifier(identifier), is_active=is_active
                )
            case RawStrong(inline_content=children):
                return Strong(contents=self.inlines(children, children_path, depth + 1))
            case RawEmphasis(inline_content=children):
                return Emphasis(
                    contents=self.inlines(children, children_path, depth + 1)
                )
            case RawInlineHead(inline_content=children):
                return InlineHead(
                    contents=self.inlines(children, children_path, depth + 1)
                )
            case RawUnknownContent(type=kind):
                return UnknownInline(type=kind)
            case _:
                typ.assert_never(variant)

    def _guard(self, path: str, depth: int) -> None:
        if depth > self.max_depth:
            raise NestingTooDeep(path, self.max_depth)

    # Page components --------------------------------------------------------

    def metadata(self, raw: RawMetadata) -> Metadata:
        """Normalize page metadata; absent ``platforms`` become empty."""
        return Metadata(
            title=raw.title,
            role=raw.role,
            role_heading=raw.role_heading,
            platforms=tuple(self.platform(item) for item in raw.platforms or ()),
            external_id=raw.external_id,
        )

    @staticmethod
    def platform(raw: RawPlatform) -> Platform:
        """Normalize one platform record; absent ``beta`` means ``False``."""
        return Platform(
            name=raw.name,
            introduced_at=raw.introduced_at,
            current=raw.current,
            beta=bool(raw.beta),
        )

    def section(self, raw: RawContentSection, path: str) -> ContentSection:
        return ContentSection(content=self.blocks(raw.content, f"{path}.content"))

    def topic(self, raw: msgspec.Raw, path: str) -> Topic:
        """Normalize one topic section into a document or task-group topic."""
        variant = classify_topic(raw, path)
        identifiers = tuple(Identifier(item) for item in variant.identifiers)
        match variant:
            case RawTaskGroupTopic(title=title, anchor=anchor):
                return TaskGroup(title=title, identifiers=identifiers, anchor=anchor)
            case RawDocumentTopic(title=title):
                return DocumentTopic(title=title, identifiers=identifiers)
            case _:
                typ.assert_never(variant)

    @staticmethod
    def see_also(raw: RawSeeAlso) -> SeeAlso:
        return SeeAlso(
            title=raw.title,
            generated=raw.generated,
            identifiers=tuple(Identifier(item) for item in raw.identifiers),
        )

    def references(
        self, raws: cabc.Mapping[str, msgspec.Raw], path: str
    ) -> dict[Identifier, Reference]:
        """Normalize the reference table, keyed by the raw identifier string.

        Duplicate keys in the source object have already collapsed to the last
        occurrence when the JSON was parsed, so the last entry wins.
        """
        table: dict[Identifier, Reference] = {}
        for key, raw in raws.items():
            table[Identifier(key)] = self.reference(raw, key_path(path, key))
        return table

    def reference(self, raw: msgspec.Raw, path: str) -> Reference:
        """Normalize one reference entry with empty-sequence defaults."""
        entry = decode_raw(raw, RawReference, path)
        return Reference(
            identifier=Identifier(entry.identifier),
            type=entry.type,
            title=entry.title,
            url=entry.url,
            kind=entry.kind,
            role=entry.role,
            abstract=self.inlines(entry.abstract or (), f"{path}.abstract"),
            fragments=self.fragments(entry.fragments or (), f"{path}.fragments"),
            navigator_title=self.fragments(
                entry.navigator_title or (), f"{path}.navigatorTitle"
            ),
        )

    @staticmethod
    def fragments(
        raws: cabc.Sequence[RawFragment], path: str
    ) -> tuple[Fragment, ...]:
        return tuple(
            Fragment(text=raw.text, kind=classify_fragment(raw, f"{path}[{index}]"))
            for index, raw in enumerate(raws)
        )

    @staticmethod
    def diff_availability(raw: msgspec.Raw, path: str) -> DiffAvailability:
        entry = decode_raw(raw, RawDiffAvailability, path)
        return DiffAvailability(
            change=entry.change,
            platform=entry.platform,
            versions=tuple(entry.versions),
        )


__all__ = ["Normalizer"]
