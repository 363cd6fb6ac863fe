"""Closed, renderer-agnostic content model for one technology-detail page.

Everything here is produced by :func:`techdoc.decode_technology_detail` in a
single call and never mutated afterwards: dataclasses are frozen and every
sequence is a ``tuple``. Polymorphic content is expressed as one dataclass per
variant joined by a type alias, so renderers can dispatch with ``match``:

>>> from techdoc.model import Strong, Text
>>> node = Strong(contents=(Text("bold"),))
>>> match node:
...     case Strong(contents=children):
...         [child.text for child in children]
['bold']

Block and inline content each carry an ``Unknown*`` arm holding only the
original discriminator string; payloads of unrecognised kinds are discarded.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

Identifier = typ.NewType("Identifier", str)


@dc.dataclass(frozen=True, slots=True)
class Platform:
    """Availability record for one platform.

    Attributes
    ----------
    name : str
        Platform name, for example ``"iOS"``.
    introduced_at : str
        Version string in which the technology first appeared.
    current : str | None
        Current platform version reported by the producer, if any.
    beta : bool
        Whether the availability is beta-only. Absent in the payload means
        ``False``.
    """

    name: str
    introduced_at: str
    current: str | None = None
    beta: bool = False


@dc.dataclass(frozen=True, slots=True)
class Metadata:
    """Page-level metadata shown in headers and navigation."""

    title: str
    role: str
    role_heading: str | None
    platforms: tuple[Platform, ...]
    external_id: str | None = None


# Inline content -------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Text:
    """Plain text run."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class CodeVoice:
    """Inline code span."""

    code: str


@dc.dataclass(frozen=True, slots=True)
class Image:
    """Inline image, resolved through the page reference table."""

    identifier: Identifier


@dc.dataclass(frozen=True, slots=True)
class InlineReference:
    """Link to another documentation entity, resolved by the renderer."""

    identifier: Identifier
    is_active: bool


@dc.dataclass(frozen=True, slots=True)
class Strong:
    contents: tuple[InlineContent, ...]


@dc.dataclass(frozen=True, slots=True)
class Emphasis:
    contents: tuple[InlineContent, ...]


@dc.dataclass(frozen=True, slots=True)
class InlineHead:
    contents: tuple[InlineContent, ...]


@dc.dataclass(frozen=True, slots=True)
class UnknownInline:
    """Inline kind this model does not define yet."""

    type: str


InlineContent: typ.TypeAlias = (
    Text
    | CodeVoice
    | Image
    | InlineReference
    | Strong
    | Emphasis
    | InlineHead
    | UnknownInline
)


# Block content --------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    contents: tuple[InlineContent, ...]


@dc.dataclass(frozen=True, slots=True)
class Heading:
    level: int
    anchor: str
    text: str


@dc.dataclass(frozen=True, slots=True)
class Aside:
    """Callout box such as a note, tip, or warning.

    Attributes
    ----------
    style : str
        Producer style name (``"note"``, ``"warning"``, ...).
    name : str | None
        Optional display label overriding the style name.
    contents : tuple[BlockContent, ...]
        Nested block content.
    """

    style: str
    name: str | None
    contents: tuple[BlockContent, ...]


@dc.dataclass(frozen=True, slots=True)
class ListItem:
    content: tuple[BlockContent, ...]


@dc.dataclass(frozen=True, slots=True)
class UnorderedList:
    items: tuple[ListItem, ...]


@dc.dataclass(frozen=True, slots=True)
class UnknownBlock:
    """Block kind this model does not define yet."""

    type: str


BlockContent: typ.TypeAlias = (
    Paragraph | Heading | Aside | UnorderedList | UnknownBlock
)


@dc.dataclass(frozen=True, slots=True)
class ContentSection:
    """One primary content section: an ordered run of blocks."""

    content: tuple[BlockContent, ...]


# Topics, see-also, references ----------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class DocumentTopic:
    """Topic section without a ``kind``; dropped when the page is assembled."""

    title: str
    identifiers: tuple[Identifier, ...]


@dc.dataclass(frozen=True, slots=True)
class TaskGroup:
    """Topic section with ``kind: "taskGroup"``."""

    title: str
    identifiers: tuple[Identifier, ...]
    anchor: str


Topic: typ.TypeAlias = DocumentTopic | TaskGroup


@dc.dataclass(frozen=True, slots=True)
class SeeAlso:
    title: str
    generated: bool
    identifiers: tuple[Identifier, ...]


class FragmentKind(enum.StrEnum):
    """Closed vocabulary of declaration tokens used for syntax highlighting."""

    TEXT = "text"
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    LABEL = "label"
    TYPE_IDENTIFIER = "typeIdentifier"
    GENERIC_PARAMETER = "genericParameter"
    EXTERNAL_PARAM = "externalParam"
    ATTRIBUTE = "attribute"


@dc.dataclass(frozen=True, slots=True)
class Fragment:
    text: str
    kind: FragmentKind


@dc.dataclass(frozen=True, slots=True)
class Reference:
    """Metadata for one identifier in the page reference table.

    Attributes
    ----------
    identifier : Identifier
        Identifier the entry describes.
    type : str
        Producer entry type, for example ``"topic"``, ``"image"``, ``"link"``.
    title, url, kind, role : str | None
        Optional display and navigation metadata.
    abstract : tuple[InlineContent, ...]
        Short summary; empty when absent in the payload.
    fragments : tuple[Fragment, ...]
        Declaration tokens; empty when absent in the payload.
    navigator_title : tuple[Fragment, ...]
        Compact declaration tokens for navigation; empty when absent.
    """

    identifier: Identifier
    type: str
    title: str | None = None
    url: str | None = None
    kind: str | None = None
    role: str | None = None
    abstract: tuple[InlineContent, ...] = ()
    fragments: tuple[Fragment, ...] = ()
    navigator_title: tuple[Fragment, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class DiffAvailability:
    """Availability delta between two releases, keyed by release track."""

    change: str
    platform: str
    versions: tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class TechnologyDetail:
    """Root aggregate for one documentation page.

    Attributes
    ----------
    metadata : Metadata
        Title, role, and platform availability.
    abstract : tuple[InlineContent, ...]
        Page summary.
    primary_contents : tuple[ContentSection, ...]
        Main body sections in source order.
    topics : tuple[TaskGroup, ...]
        Task-group topic sections in source order; document topics are
        filtered out during assembly.
    see_also : tuple[SeeAlso, ...]
        Related-page groups.
    references : dict[Identifier, Reference]
        Reference table keyed by identifier; order is not meaningful.
    diff_availability : dict[str, DiffAvailability]
        Availability deltas keyed by release track; empty when absent.
    """

    metadata: Metadata
    abstract: tuple[InlineContent, ...]
    primary_contents: tuple[ContentSection, ...]
    topics: tuple[TaskGroup, ...]
    see_also: tuple[SeeAlso, ...]
    references: dict[Identifier, Reference]
    diff_availability: dict[str, DiffAvailability]


__all__ = [
    "Aside",
    "BlockContent",
    "CodeVoice",
    "ContentSection",
    "DiffAvailability",
    "DocumentTopic",
    "Emphasis",
    "Fragment",
    "FragmentKind",
    "Heading",
    "Identifier",
    "Image",
    "InlineContent",
    "InlineHead",
    "InlineReference",
    "ListItem",
    "Metadata",
    "Paragraph",
    "Platform",
    "Reference",
    "SeeAlso",
    "Strong",
    "TaskGroup",
    "TechnologyDetail",
    "Text",
    "Topic",
    "UnknownBlock",
    "UnknownInline",
    "UnorderedList",
]
