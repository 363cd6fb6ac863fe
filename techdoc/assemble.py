"""Combine normalized page components into a :class:`TechnologyDetail`.

Beyond copying fields, assembly applies three page-level policies:

* document topics are dropped and task groups kept in source order;
* absent optional section lists and ``diffAvailability`` become empty;
* malformed ``diffAvailability`` entries either fail the page (``"strict"``)
  or are skipped with a warning (``"skip"``).

Assembly raises nothing of its own beyond what the normalizer propagates.
"""

from __future__ import annotations

import typing as typ

from .errors import DecodeError
from .logging import get_logger
from .model import DiffAvailability, TaskGroup, TechnologyDetail
from .raw import key_path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import msgspec

    from .model import Topic
    from .normalize import Normalizer
    from .raw import RawTechnologyDetail

DiffAvailabilityPolicy = typ.Literal["strict", "skip"]

logger = get_logger("assemble")


def assemble_technology_detail(
    raw: RawTechnologyDetail,
    normalizer: Normalizer,
    *,
    diff_availability: DiffAvailabilityPolicy = "strict",
) -> TechnologyDetail:
    """Build the page aggregate from its raw root shape.

    Parameters
    ----------
    raw : RawTechnologyDetail
        Root shape produced by :func:`techdoc.raw.parse_technology_detail`.
    normalizer : Normalizer
        Normalizer carrying the depth guard for nested content.
    diff_availability : {"strict", "skip"}, optional
        Policy for malformed ``diffAvailability`` entries. Defaults to
        ``"strict"``.

    Returns
    -------
    TechnologyDetail
        Immutable page tree.
    """
    sections = raw.primary_content_sections or ()
    topics = (
        normalizer.topic(item, f"$.topicSections[{index}]")
        for index, item in enumerate(raw.topic_sections)
    )
    return TechnologyDetail(
        metadata=normalizer.metadata(raw.metadata),
        abstract=normalizer.inlines(raw.abstract, "$.abstract"),
        primary_contents=tuple(
            normalizer.section(section, f"$.primaryContentSections[{index}]")
            for index, section in enumerate(sections)
        ),
        topics=select_task_groups(topics),
        see_also=tuple(normalizer.see_also(item) for item in raw.see_also_sections or ()),
        references=normalizer.references(raw.references, "$.references"),
        diff_availability=_assemble_diff_availability(
            raw.diff_availability or {}, normalizer, diff_availability
        ),
    )


def select_task_groups(topics: cabc.Iterable[Topic]) -> tuple[TaskGroup, ...]:
    """Keep task-group topics in order and drop document topics."""
    return tuple(topic for topic in topics if isinstance(topic, TaskGroup))


def _assemble_diff_availability(
    entries: cabc.Mapping[str, msgspec.Raw],
    normalizer: Normalizer,
    policy: DiffAvailabilityPolicy,
) -> dict[str, DiffAvailability]:
    table: dict[str, DiffAvailability] = {}
    for key, entry in entries.items():
        path = key_path("$.diffAvailability", key)
        try:
            table[key] = normalizer.diff_availability(entry, path)
        except DecodeError as exc:
            if policy == "strict":
                raise
            logger.warning("skipping malformed diffAvailability entry: %s", exc)
    return table


__all__ = ["DiffAvailabilityPolicy", "assemble_technology_detail", "select_task_groups"]
