"""Typed mirror of the technology-detail JSON wire format.

Each JSON object shape is a :class:`msgspec.Struct` whose fields match the
producer's wire names (``rename="camel"`` plus explicit names where the wire
spelling is not camel case) and whose optional fields are exactly the ones the
producer may omit. Nothing here interprets content: nested block and inline
unions are captured as :class:`msgspec.Raw` and handed to
:mod:`techdoc.classify`, which decides what each element is.

msgspec validation failures are translated into the flat
:mod:`techdoc.errors` taxonomy with a path rooted at the page document, so a
failure deep in a lazily decoded element still reports where it happened:

>>> from techdoc.raw import RawHeading, decode_raw
>>> decode_raw(b'{"level": 2, "anchor": "a"}', RawHeading, "$.content[0]")
Traceback (most recent call last):
  ...
techdoc.errors.MissingField: Missing required field at $.content[0].text
"""

from __future__ import annotations

import re
import typing as typ

import msgspec

from .errors import DecodeError, MalformedInput, MissingField, NestingTooDeep, TypeMismatch

T = typ.TypeVar("T")

Payload: typ.TypeAlias = bytes | bytearray | memoryview | str

_MISSING_FIELD = re.compile(r"^Object missing required field `(?P<field>[^`]*)`")
_TYPE_MISMATCH = re.compile(r"^Expected `(?P<expected>[^`]*)`, got `(?P<found>[^`]*)`")
_LOCATION = re.compile(r" - at `(?P<path>\$[^`]*)`$")


class RawPlatform(msgspec.Struct, rename="camel", frozen=True):
    name: str
    introduced_at: str
    current: str | None = None
    beta: bool | None = None


class RawMetadata(msgspec.Struct, rename="camel", frozen=True):
    title: str
    role: str
    role_heading: str | None = None
    platforms: list[RawPlatform] | None = None
    external_id: str | None = msgspec.field(default=None, name="externalID")


class RawContentSection(msgspec.Struct, frozen=True):
    content: list[msgspec.Raw]


class RawSeeAlso(msgspec.Struct, frozen=True):
    title: str
    generated: bool
    identifiers: list[str]


class RawTechnologyDetail(msgspec.Struct, rename="camel", frozen=True):
    """Root page object; nested unions stay undecoded until classified."""

    metadata: RawMetadata
    abstract: list[msgspec.Raw]
    topic_sections: list[msgspec.Raw]
    references: dict[str, msgspec.Raw]
    primary_content_sections: list[RawContentSection] | None = None
    see_also_sections: list[RawSeeAlso] | None = None
    diff_availability: dict[str, msgspec.Raw] | None = None


# Block content shapes -------------------------------------------------------


class RawParagraph(msgspec.Struct, rename="camel", frozen=True):
    inline_content: list[msgspec.Raw]


class RawHeading(msgspec.Struct, frozen=True):
    level: int
    anchor: str
    text: str


class RawAside(msgspec.Struct, frozen=True):
    style: str
    content: list[msgspec.Raw]
    name: str | None = None


class RawListItem(msgspec.Struct, frozen=True):
    content: list[msgspec.Raw]


class RawUnorderedList(msgspec.Struct, frozen=True):
    items: list[RawListItem]


# Inline content shapes ------------------------------------------------------


class RawText(msgspec.Struct, frozen=True):
    text: str


class RawCodeVoice(msgspec.Struct, frozen=True):
    code: str


class RawImage(msgspec.Struct, frozen=True):
    identifier: str


class RawInlineReference(msgspec.Struct, rename="camel", frozen=True):
    identifier: str
    is_active: bool


class RawStrong(msgspec.Struct, rename="camel", frozen=True):
    inline_content: list[msgspec.Raw]


class RawEmphasis(msgspec.Struct, rename="camel", frozen=True):
    inline_content: list[msgspec.Raw]


class RawInlineHead(msgspec.Struct, rename="camel", frozen=True):
    inline_content: list[msgspec.Raw]


class RawUnknownContent(msgspec.Struct, frozen=True):
    """Classifier marker for a block or inline kind with no known shape."""

    type: str


RawBlockContent: typ.TypeAlias = (
    RawParagraph | RawHeading | RawAside | RawUnorderedList | RawUnknownContent
)
RawInlineContent: typ.TypeAlias = (
    RawText
    | RawCodeVoice
    | RawImage
    | RawInlineReference
    | RawStrong
    | RawEmphasis
    | RawInlineHead
    | RawUnknownContent
)


# Topics, references, availability ------------------------------------------


class RawDocumentTopic(msgspec.Struct, frozen=True):
    title: str
    identifiers: list[str]


class RawTaskGroupTopic(msgspec.Struct, frozen=True):
    title: str
    identifiers: list[str]
    anchor: str


RawTopic: typ.TypeAlias = RawDocumentTopic | RawTaskGroupTopic


class RawFragment(msgspec.Struct, frozen=True):
    text: str
    kind: str


class RawReference(msgspec.Struct, rename="camel", frozen=True):
    identifier: str
    type: str
    title: str | None = None
    url: str | None = None
    kind: str | None = None
    role: str | None = None
    abstract: list[msgspec.Raw] | None = None
    fragments: list[RawFragment] | None = None
    navigator_title: list[RawFragment] | None = None


class RawDiffAvailability(msgspec.Struct, frozen=True):
    change: str
    platform: str
    versions: list[str]


# Discriminator probes: only the tag is read, every other field is ignored.


class ContentTag(msgspec.Struct, frozen=True):
    type: str


class TopicTag(msgspec.Struct, frozen=True):
    kind: str | None = None


def parse_technology_detail(data: Payload) -> RawTechnologyDetail:
    """Parse a whole page document into its raw root shape.

    Parameters
    ----------
    data : Payload
        UTF-8 JSON document. The buffer is only read, never modified.

    Returns
    -------
    RawTechnologyDetail
        Root shape with nested unions still held as :class:`msgspec.Raw`.

    Raises
    ------
    MalformedInput
        If ``data`` is not valid JSON.
    MissingField, TypeMismatch
        If the root shape does not match the schema.
    NestingTooDeep
        If the document nests deeper than the JSON parser can follow.
    """
    try:
        return msgspec.json.decode(data, type=RawTechnologyDetail)
    except msgspec.ValidationError as exc:
        raise translate_validation_error(exc, "$") from exc
    except msgspec.DecodeError as exc:
        msg = f"Payload is not valid JSON: {exc}"
        raise MalformedInput(msg) from exc
    except RecursionError as exc:
        raise NestingTooDeep("$", limit=None) from exc


def decode_raw(raw: msgspec.Raw | bytes, shape: type[T], path: str) -> T:
    """Decode one lazily captured element into ``shape``.

    ``path`` is the element's location in the page document and prefixes any
    location msgspec reports.
    """
    try:
        return msgspec.json.decode(raw, type=shape)
    except msgspec.ValidationError as exc:
        raise translate_validation_error(exc, path) from exc


def translate_validation_error(exc: msgspec.ValidationError, base: str) -> DecodeError:
    """Map a msgspec validation message onto the decode error taxonomy."""
    message = str(exc)
    location = _LOCATION.search(message)
    path = join_path(base, location.group("path")) if location else base
    if missing := _MISSING_FIELD.match(message):
        return MissingField(f"{path}.{missing.group('field')}")
    if mismatch := _TYPE_MISMATCH.match(message):
        return TypeMismatch(path, mismatch.group("expected"), mismatch.group("found"))
    detail = message[: location.start()] if location else message
    return TypeMismatch(path, "valid value", detail)


def join_path(base: str, relative: str) -> str:
    """Append a ``$``-rooted msgspec location to ``base``."""
    return base + relative.removeprefix("$")


def key_path(base: str, key: str) -> str:
    """Return the path of mapping entry ``key`` below ``base``."""
    escaped = key.replace("\\", "\\\\").replace("'", "\\'")
    return f"{base}['{escaped}']"


__all__ = [
    "ContentTag",
    "Payload",
    "RawAside",
    "RawBlockContent",
    "RawCodeVoice",
    "RawContentSection",
    "RawDiffAvailability",
    "RawDocumentTopic",
    "RawEmphasis",
    "RawFragment",
    "RawHeading",
    "RawImage",
    "RawInlineContent",
    "RawInlineHead",
    "RawInlineReference",
    "RawListItem",
    "RawMetadata",
    "RawParagraph",
    "RawPlatform",
    "RawReference",
    "RawSeeAlso",
    "RawStrong",
    "RawTaskGroupTopic",
    "RawTechnologyDetail",
    "RawText",
    "RawTopic",
    "RawUnknownContent",
    "RawUnorderedList",
    "TopicTag",
    "decode_raw",
    "join_path",
    "key_path",
    "parse_technology_detail",
    "translate_validation_error",
]
