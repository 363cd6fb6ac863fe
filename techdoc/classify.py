"""Discriminator dispatch for the tagged unions in a technology-detail page.

Two decode strategies coexist and are deliberately kept apart:

Open unions (block and inline content)
    The ``type`` field selects a raw shape. An unrecognised ``type`` succeeds
    and yields :class:`~techdoc.raw.RawUnknownContent` carrying only the
    discriminator string; no other field of that element is read.

Closed unions (topic ``kind`` and fragment ``kind``)
    An unrecognised value raises :class:`~techdoc.errors.UnknownTag`. For
    topics the *presence* of ``kind`` is the tie-break: absent (or ``null``)
    means a document topic, ``"taskGroup"`` means a task group.

All functions are pure: they read one element and return one raw variant.
"""

from __future__ import annotations

import typing as typ

from ._constants import CONTENT_DISCRIMINATOR, TASK_GROUP_KIND, TOPIC_DISCRIMINATOR
from .errors import UnknownTag
from .logging import get_logger
from .model import FragmentKind
from .raw import (
    ContentTag,
    RawAside,
    RawBlockContent,
    RawCodeVoice,
    RawDocumentTopic,
    RawEmphasis,
    RawHeading,
    RawImage,
    RawInlineContent,
    RawInlineHead,
    RawInlineReference,
    RawParagraph,
    RawStrong,
    RawTaskGroupTopic,
    RawText,
    RawTopic,
    RawUnknownContent,
    RawUnorderedList,
    TopicTag,
    decode_raw,
)

if typ.TYPE_CHECKING:
    import msgspec

    from .raw import RawFragment

logger = get_logger("classify")

# Open union: block content.
BLOCK_SHAPES: typ.Final[dict[str, type[RawBlockContent]]] = {
    "paragraph": RawParagraph,
    "heading": RawHeading,
    "aside": RawAside,
    "unorderedList": RawUnorderedList,
}

# Open union: inline content.
INLINE_SHAPES: typ.Final[dict[str, type[RawInlineContent]]] = {
    "text": RawText,
    "codeVoice": RawCodeVoice,
    "image": RawImage,
    "reference": RawInlineReference,
    "strong": RawStrong,
    "emphasis": RawEmphasis,
    "inlineHead": RawInlineHead,
}


def classify_block(raw: msgspec.Raw, path: str) -> RawBlockContent:
    """Return the raw block variant for ``raw``, or an unknown marker."""
    return typ.cast(
        "RawBlockContent", _classify_open(raw, path, BLOCK_SHAPES, "block")
    )


def classify_inline(raw: msgspec.Raw, path: str) -> RawInlineContent:
    """Return the raw inline variant for ``raw``, or an unknown marker."""
    return typ.cast(
        "RawInlineContent", _classify_open(raw, path, INLINE_SHAPES, "inline")
    )


def _classify_open(
    raw: msgspec.Raw,
    path: str,
    shapes: typ.Mapping[str, type[typ.Any]],
    family: str,
) -> typ.Any:
    tag = decode_raw(raw, ContentTag, path).type
    shape = shapes.get(tag)
    if shape is None:
        logger.debug(
            "unrecognised %s content %s %r at %s",
            family,
            CONTENT_DISCRIMINATOR,
            tag,
            path,
        )
        return RawUnknownContent(type=tag)
    return decode_raw(raw, shape, path)


def classify_topic(raw: msgspec.Raw, path: str) -> RawTopic:
    """Return the document or task-group shape for a topic section.

    Raises
    ------
    UnknownTag
        If ``kind`` is present with any value other than ``"taskGroup"``.
    """
    kind = decode_raw(raw, TopicTag, path).kind
    if kind is None:
        return decode_raw(raw, RawDocumentTopic, path)
    if kind == TASK_GROUP_KIND:
        return decode_raw(raw, RawTaskGroupTopic, path)
    raise UnknownTag(TOPIC_DISCRIMINATOR, kind, path=f"{path}.{TOPIC_DISCRIMINATOR}")


def classify_fragment(fragment: RawFragment, path: str) -> FragmentKind:
    """Return the closed fragment kind for ``fragment``.

    Raises
    ------
    UnknownTag
        If the fragment ``kind`` is outside the fixed vocabulary.
    """
    try:
        return FragmentKind(fragment.kind)
    except ValueError as exc:
        raise UnknownTag("kind", fragment.kind, path=f"{path}.kind") from exc


__all__ = [
    "BLOCK_SHAPES",
    "INLINE_SHAPES",
    "classify_block",
    "classify_fragment",
    "classify_inline",
    "classify_topic",
]
