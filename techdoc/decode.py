"""Top-level entry point turning page bytes into a :class:`TechnologyDetail`.

Decoding is a single synchronous, deterministic pass: parse the JSON into the
raw root shape, classify and normalize every nested union, then assemble the
page. Identical input always yields an equal tree; the input buffer is only
read. A failure anywhere aborts the whole page with a
:class:`~techdoc.errors.DecodeError` subclass.

Examples
--------
>>> from techdoc.decode import DecoderSettings, decode_technology_detail
>>> payload = b'''{
...   "metadata": {"title": "SwiftUI", "role": "collection"},
...   "abstract": [{"type": "text", "text": "Declare UI."}],
...   "topicSections": [],
...   "references": {}
... }'''
>>> detail = decode_technology_detail(payload)
>>> detail.metadata.title, detail.abstract[0].text
('SwiftUI', 'Declare UI.')
>>> decode_technology_detail(payload, settings=DecoderSettings(max_depth=8)).topics
()

The module carries no shared state, so separate threads may decode pages
concurrently with their own or a shared :class:`TechnologyDetailDecoder`.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_MAX_DEPTH, DIFF_AVAILABILITY_POLICIES
from .assemble import DiffAvailabilityPolicy, assemble_technology_detail
from .errors import NestingTooDeep
from .logging import get_logger
from .normalize import Normalizer
from .raw import parse_technology_detail

if typ.TYPE_CHECKING:
    from .model import TechnologyDetail
    from .raw import Payload

logger = get_logger("decode")


@dc.dataclass(frozen=True, slots=True)
class DecoderSettings:
    """Tunable limits and policies for decoding.

    Attributes
    ----------
    max_depth : int
        Maximum number of nested content nodes on any path of the block or
        inline tree. Defaults to ``64``.
    diff_availability : {"strict", "skip"}
        Whether a malformed ``diffAvailability`` entry fails the page or is
        skipped. Defaults to ``"strict"``.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    diff_availability: DiffAvailabilityPolicy = "strict"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be at least 1, got {self.max_depth}"
            raise ValueError(msg)
        if self.diff_availability not in DIFF_AVAILABILITY_POLICIES:
            allowed = ", ".join(DIFF_AVAILABILITY_POLICIES)
            msg = (
                f"diff_availability must be one of {allowed}, "
                f"got {self.diff_availability!r}"
            )
            raise ValueError(msg)


class TechnologyDetailDecoder:
    """Reusable decoder bound to one :class:`DecoderSettings`."""

    def __init__(self, settings: DecoderSettings | None = None) -> None:
        self.settings = settings or DecoderSettings()

    def decode(self, data: Payload) -> TechnologyDetail:
        """Decode one page document.

        Parameters
        ----------
        data : bytes | bytearray | memoryview | str
            JSON document describing one technology-detail page.

        Returns
        -------
        TechnologyDetail
            Immutable page tree.

        Raises
        ------
        MalformedInput
            If ``data`` is not valid JSON.
        MissingField, TypeMismatch
            If a required field is absent or has the wrong JSON type.
        UnknownTag
            If a topic or fragment ``kind`` is outside its closed vocabulary.
        NestingTooDeep
            If nested content exceeds ``settings.max_depth``.
        """
        raw = parse_technology_detail(data)
        normalizer = Normalizer(max_depth=self.settings.max_depth)
        try:
            detail = assemble_technology_detail(
                raw,
                normalizer,
                diff_availability=self.settings.diff_availability,
            )
        except RecursionError as exc:
            raise NestingTooDeep("$", self.settings.max_depth) from exc
        logger.debug(
            "decoded %r: %d sections, %d topics, %d references",
            detail.metadata.title,
            len(detail.primary_contents),
            len(detail.topics),
            len(detail.references),
        )
        return detail


def decode_technology_detail(
    data: Payload, *, settings: DecoderSettings | None = None
) -> TechnologyDetail:
    """Decode ``data`` into a :class:`TechnologyDetail` or raise ``DecodeError``."""
    return TechnologyDetailDecoder(settings).decode(data)


__all__ = [
    "DecoderSettings",
    "TechnologyDetailDecoder",
    "decode_technology_detail",
]
