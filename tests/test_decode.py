"""End-to-end tests for :func:`techdoc.decode.decode_technology_detail`.

These tests feed whole page documents through the public entry point and
check the resulting tree, the default-value policy, the topic filter, the
error taxonomy, and determinism.

Usage
-----
Run with pytest::

    pytest tests/test_decode.py
"""

from __future__ import annotations

import copy
import typing as typ

import pytest

from techdoc import DecodeError, DecoderSettings, TechnologyDetailDecoder
from techdoc import decode_technology_detail
from techdoc.errors import MalformedInput, MissingField, TypeMismatch, UnknownTag
from techdoc.model import (
    Aside,
    CodeVoice,
    ContentSection,
    Emphasis,
    Heading,
    Image,
    InlineHead,
    InlineReference,
    Paragraph,
    Platform,
    SeeAlso,
    Strong,
    TaskGroup,
    TechnologyDetail,
    Text,
    UnknownBlock,
    UnorderedList,
)

from .payloads import HERO_IMAGE, UIKIT_ID, VIEW_ID, encode, minimal_page

if typ.TYPE_CHECKING:
    from techdoc.model import BlockContent


def _content(detail: TechnologyDetail) -> tuple[BlockContent, ...]:
    section = detail.primary_contents[0]
    assert isinstance(section, ContentSection), "expected a content section"
    return section.content


def test_decodes_representative_page(page_payload: dict[str, typ.Any]) -> None:
    """A realistic page decodes into the expected tree."""
    detail = decode_technology_detail(encode(page_payload))

    assert detail.metadata.title == "SwiftUI"
    assert detail.metadata.role == "collection"
    assert detail.metadata.role_heading == "Framework"
    assert detail.metadata.external_id == "swiftui"
    assert detail.metadata.platforms == (
        Platform(name="iOS", introduced_at="13.0", current=None, beta=False),
        Platform(name="macOS", introduced_at="10.15", current="15.0", beta=True),
    )
    assert detail.abstract == (
        Text(text="Declare the user interface with "),
        CodeVoice(code="View"),
    )
    assert detail.see_also == (
        SeeAlso(title="Related Frameworks", generated=True, identifiers=(UIKIT_ID,)),
    )
    assert set(detail.references) == {VIEW_ID, UIKIT_ID, HERO_IMAGE}
    assert detail.diff_availability["major"].versions == ("15.4", "16.0")


def test_nested_content_keeps_source_order(page_payload: dict[str, typ.Any]) -> None:
    """Every known block kind decodes, in order, with its children."""
    blocks = _content(decode_technology_detail(encode(page_payload)))

    assert blocks[0] == Heading(level=2, anchor="overview", text="Overview")
    assert blocks[1] == Paragraph(
        contents=(
            Text(text="Compose "),
            InlineReference(identifier=VIEW_ID, is_active=True),
            Text(text=" values."),
        )
    )
    aside = blocks[2]
    assert isinstance(aside, Aside), f"expected Aside, got {aside!r}"
    assert (aside.style, aside.name) == ("note", "Tip")
    assert aside.contents == (
        Paragraph(contents=(Emphasis(contents=(Text(text="Preview often."),)),)),
    )
    listing = blocks[3]
    assert isinstance(listing, UnorderedList), f"expected UnorderedList, got {listing!r}"
    assert [item.content for item in listing.items] == [
        (Paragraph(contents=(Image(identifier=HERO_IMAGE),)),),
        (
            Paragraph(
                contents=(
                    InlineHead(contents=(Text(text="Layout"),)),
                    Strong(contents=(Text(text="stacks"),)),
                )
            ),
        ),
    ]


def test_unknown_block_kind_is_tolerated(page_payload: dict[str, typ.Any]) -> None:
    """An unrecognised block ``type`` yields a placeholder and decoding succeeds."""
    blocks = _content(decode_technology_detail(encode(page_payload)))

    assert blocks[-1] == UnknownBlock(type="links"), (
        f"expected UnknownBlock('links'), got {blocks[-1]!r}"
    )


def test_unknown_kind_between_known_siblings() -> None:
    """Siblings around an unknown element decode normally."""
    payload = minimal_page(
        primaryContentSections=[
            {
                "kind": "content",
                "content": [
                    {"type": "paragraph", "inlineContent": [{"type": "text", "text": "a"}]},
                    {"type": "futureWidget", "payload": {"anything": [1, 2, 3]}},
                    {"type": "heading", "level": 3, "anchor": "b", "text": "B"},
                ],
            }
        ]
    )

    blocks = _content(decode_technology_detail(encode(payload)))

    assert blocks == (
        Paragraph(contents=(Text(text="a"),)),
        UnknownBlock(type="futureWidget"),
        Heading(level=3, anchor="b", text="B"),
    )


def test_only_task_groups_survive(page_payload: dict[str, typ.Any]) -> None:
    """Document topics are dropped and task groups keep their order."""
    page_payload["topicSections"].append(
        {"title": "Advanced", "identifiers": [], "anchor": "Advanced", "kind": "taskGroup"}
    )

    detail = decode_technology_detail(encode(page_payload))

    assert detail.topics == (
        TaskGroup(title="Essentials", identifiers=(VIEW_ID,), anchor="Essentials"),
        TaskGroup(title="Advanced", identifiers=(), anchor="Advanced"),
    )


def test_all_document_topics_yield_empty_topics() -> None:
    """A page whose topics are all documents has no topics after assembly."""
    payload = minimal_page(
        topicSections=[
            {"title": "One", "identifiers": ["doc://A"]},
            {"title": "Two", "identifiers": ["doc://B"], "kind": None},
        ]
    )

    assert decode_technology_detail(encode(payload)).topics == ()


def test_unknown_topic_kind_fails_page() -> None:
    """A topic ``kind`` other than ``taskGroup`` is fatal."""
    payload = minimal_page(
        topicSections=[
            {"title": "Essentials", "identifiers": [], "anchor": "e", "kind": "taskGroup"},
            {"title": "Odd", "identifiers": [], "kind": "somethingElse"},
        ]
    )

    with pytest.raises(UnknownTag) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.field == "kind"
    assert excinfo.value.value == "somethingElse"
    assert excinfo.value.path == "$.topicSections[1].kind"


def test_optional_sections_default_to_empty() -> None:
    """Absent optional lists and tables become empty values."""
    detail = decode_technology_detail(encode(minimal_page()))

    assert detail.primary_contents == ()
    assert detail.see_also == ()
    assert detail.diff_availability == {}
    assert detail.metadata.platforms == ()
    assert detail.metadata.role_heading is None


def test_null_optional_fields_count_as_absent() -> None:
    """JSON ``null`` in an optional field behaves like omission."""
    payload = minimal_page(
        primaryContentSections=None,
        seeAlsoSections=None,
        diffAvailability=None,
        metadata={"title": "T", "role": "article", "roleHeading": None, "platforms": None},
    )

    detail = decode_technology_detail(encode(payload))

    assert detail.primary_contents == ()
    assert detail.see_also == ()
    assert detail.metadata.platforms == ()


def test_platform_beta_defaults_to_false() -> None:
    """An absent ``beta`` flag decodes as ``False``."""
    payload = minimal_page(
        metadata={
            "title": "T",
            "role": "article",
            "platforms": [{"name": "iOS", "introducedAt": "17.0"}],
        }
    )

    platform = decode_technology_detail(encode(payload)).metadata.platforms[0]

    assert platform.beta is False, f"expected beta False, got {platform.beta!r}"


def test_reference_table_defaults() -> None:
    """References are keyed by identifier and absent sequences are empty."""
    payload = minimal_page(
        references={
            "doc://A": {"type": "topic", "identifier": "doc://A", "title": "A"},
            "doc://B": {"type": "topic", "identifier": "doc://B", "title": "B"},
        }
    )

    references = decode_technology_detail(encode(payload)).references

    assert sorted(references) == ["doc://A", "doc://B"]
    assert references["doc://A"].title == "A"
    assert references["doc://A"].fragments == ()
    assert references["doc://B"].abstract == ()
    assert references["doc://B"].navigator_title == ()


def test_duplicate_reference_keys_last_wins() -> None:
    """When a reference key repeats, the later entry replaces the earlier one."""
    payload = (
        b'{"metadata": {"title": "T", "role": "article"}, "abstract": [],'
        b' "topicSections": [], "references": {'
        b'"doc://A": {"type": "topic", "identifier": "doc://A", "title": "First"},'
        b'"doc://A": {"type": "topic", "identifier": "doc://A", "title": "Second"}}}'
    )

    references = decode_technology_detail(payload).references

    assert len(references) == 1
    assert references["doc://A"].title == "Second"


def test_decoding_is_deterministic(page_payload: dict[str, typ.Any]) -> None:
    """Decoding the same bytes twice yields equal trees."""
    data = encode(page_payload)

    assert decode_technology_detail(data) == decode_technology_detail(data)


def test_input_buffer_is_not_modified(page_payload: dict[str, typ.Any]) -> None:
    """The caller's buffer is only read."""
    data = bytearray(encode(page_payload))
    snapshot = bytes(data)

    decode_technology_detail(data)

    assert bytes(data) == snapshot


def test_accepts_text_input(page_payload: dict[str, typ.Any]) -> None:
    """A ``str`` document decodes the same as its UTF-8 bytes."""
    data = encode(page_payload)

    assert decode_technology_detail(data.decode("utf-8")) == decode_technology_detail(data)


def test_tree_is_immutable(page_payload: dict[str, typ.Any]) -> None:
    """Model values reject attribute assignment."""
    detail = decode_technology_detail(encode(page_payload))

    with pytest.raises(AttributeError):
        detail.metadata.title = "Changed"  # type: ignore[misc]


def test_decoder_instance_is_reusable(page_payload: dict[str, typ.Any]) -> None:
    """One decoder decodes several pages independently."""
    decoder = TechnologyDetailDecoder(DecoderSettings(max_depth=16))
    first = decoder.decode(encode(page_payload))
    second = decoder.decode(encode(minimal_page()))

    assert first.metadata.title == "SwiftUI"
    assert second.metadata.title == "Minimal"


@pytest.mark.parametrize(
    "data",
    [b"", b"{not json", b'{"metadata": ', b"\xff\xfe"],
    ids=["empty", "garbage", "truncated", "not-utf8"],
)
def test_invalid_json_is_malformed_input(data: bytes) -> None:
    """Bytes that are not a JSON document raise ``MalformedInput``."""
    with pytest.raises(MalformedInput):
        decode_technology_detail(data)


def test_missing_top_level_field() -> None:
    """Omitting ``metadata`` reports its path."""
    payload = minimal_page()
    del payload["metadata"]

    with pytest.raises(MissingField) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.metadata"


def test_missing_nested_metadata_field() -> None:
    """A missing metadata title reports the nested path."""
    payload = minimal_page(metadata={"role": "article"})

    with pytest.raises(MissingField) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.metadata.title"


def test_missing_field_inside_lazy_block(page_payload: dict[str, typ.Any]) -> None:
    """Failures in lazily decoded content carry the full document path."""
    del page_payload["primaryContentSections"][0]["content"][0]["text"]

    with pytest.raises(MissingField) as excinfo:
        decode_technology_detail(encode(page_payload))

    assert excinfo.value.path == "$.primaryContentSections[0].content[0].text"


def test_missing_content_discriminator() -> None:
    """A content element without ``type`` is a missing field, not unknown content."""
    payload = minimal_page(abstract=[{"text": "untyped"}])

    with pytest.raises(MissingField) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.abstract[0].type"


def test_wrong_json_type_in_lazy_block(page_payload: dict[str, typ.Any]) -> None:
    """A heading level given as a string is a type mismatch."""
    page_payload["primaryContentSections"][0]["content"][0]["level"] = "2"

    with pytest.raises(TypeMismatch) as excinfo:
        decode_technology_detail(encode(page_payload))

    error = excinfo.value
    assert error.path == "$.primaryContentSections[0].content[0].level"
    assert (error.expected, error.found) == ("int", "str")


def test_wrong_json_type_for_platform_flag() -> None:
    """A non-boolean ``beta`` reports its location and JSON types."""
    payload = minimal_page(
        metadata={
            "title": "T",
            "role": "article",
            "platforms": [{"name": "iOS", "introducedAt": "17.0", "beta": "yes"}],
        }
    )

    with pytest.raises(TypeMismatch) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.metadata.platforms[0].beta"
    assert excinfo.value.found == "str"
    assert "bool" in excinfo.value.expected


def test_content_element_must_be_object() -> None:
    """A bare string in a content array is a type mismatch at that index."""
    payload = minimal_page(abstract=["not an object"])

    with pytest.raises(TypeMismatch) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.abstract[0]"
    assert excinfo.value.found == "str"


def test_reference_fragment_kind_is_closed() -> None:
    """An unknown fragment kind fails the page with its location."""
    payload = minimal_page(
        references={
            "doc://A": {
                "type": "topic",
                "identifier": "doc://A",
                "fragments": [
                    {"text": "func", "kind": "keyword"},
                    {"text": "x", "kind": "unknownKind"},
                ],
            }
        }
    )

    with pytest.raises(UnknownTag) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.value == "unknownKind"
    assert excinfo.value.path == "$.references['doc://A'].fragments[1].kind"


def test_reference_type_is_required() -> None:
    """Reference entries must carry their ``type``."""
    payload = minimal_page(references={"doc://A": {"identifier": "doc://A"}})

    with pytest.raises(MissingField) as excinfo:
        decode_technology_detail(encode(payload))

    assert excinfo.value.path == "$.references['doc://A'].type"


def test_every_failure_is_a_decode_error() -> None:
    """Callers can catch the base class for any failure kind."""
    payload = minimal_page(topicSections=[{"title": "x", "identifiers": [], "kind": "?"}])

    with pytest.raises(DecodeError):
        decode_technology_detail(encode(payload))


def test_failure_does_not_depend_on_prior_success(
    page_payload: dict[str, typ.Any],
) -> None:
    """A failed decode leaves later decodes of good input unaffected."""
    broken = copy.deepcopy(page_payload)
    broken["metadata"]["title"] = 5

    with pytest.raises(TypeMismatch):
        decode_technology_detail(encode(broken))

    assert decode_technology_detail(encode(page_payload)).metadata.title == "SwiftUI"


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"max_depth": 0}, "max_depth"),
        ({"diff_availability": "lenient"}, "diff_availability"),
    ],
)
def test_settings_are_validated(kwargs: dict[str, typ.Any], message: str) -> None:
    """Invalid decoder settings are rejected at construction."""
    with pytest.raises(ValueError, match=message):
        DecoderSettings(**kwargs)
