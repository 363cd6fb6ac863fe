"""Shared fixtures for the techdoc test suite.

``page_payload`` is a representative technology-detail page as the
documentation service emits it: every known block and inline kind, one
unrecognised block kind, a task group plus a document topic, see-also groups,
a reference table, and a diff-availability table. Tests mutate their own copy
and serialise it with :func:`tests.payloads.encode`.
"""

from __future__ import annotations

import logging
import typing as typ

import pytest

from .payloads import HERO_IMAGE, TUTORIAL_ID, UIKIT_ID, VIEW_ID


@pytest.fixture
def page_payload() -> dict[str, typ.Any]:
    """Return a representative technology-detail payload."""
    return {
        "schemaVersion": {"major": 0, "minor": 3, "patch": 0},
        "kind": "symbol",
        "metadata": {
            "title": "SwiftUI",
            "role": "collection",
            "roleHeading": "Framework",
            "externalID": "swiftui",
            "platforms": [
                {"name": "iOS", "introducedAt": "13.0"},
                {"name": "macOS", "introducedAt": "10.15", "current": "15.0", "beta": True},
            ],
        },
        "abstract": [
            {"type": "text", "text": "Declare the user interface with "},
            {"type": "codeVoice", "code": "View"},
        ],
        "primaryContentSections": [
            {
                "kind": "content",
                "content": [
                    {"type": "heading", "level": 2, "anchor": "overview", "text": "Overview"},
                    {
                        "type": "paragraph",
                        "inlineContent": [
                            {"type": "text", "text": "Compose "},
                            {"type": "reference", "identifier": VIEW_ID, "isActive": True},
                            {"type": "text", "text": " values."},
                        ],
                    },
                    {
                        "type": "aside",
                        "style": "note",
                        "name": "Tip",
                        "content": [
                            {
                                "type": "paragraph",
                                "inlineContent": [
                                    {
                                        "type": "emphasis",
                                        "inlineContent": [
                                            {"type": "text", "text": "Preview often."}
                                        ],
                                    }
                                ],
                            }
                        ],
                    },
                    {
                        "type": "unorderedList",
                        "items": [
                            {
                                "content": [
                                    {
                                        "type": "paragraph",
                                        "inlineContent": [
                                            {"type": "image", "identifier": HERO_IMAGE}
                                        ],
                                    }
                                ]
                            },
                            {
                                "content": [
                                    {
                                        "type": "paragraph",
                                        "inlineContent": [
                                            {
                                                "type": "inlineHead",
                                                "inlineContent": [
                                                    {"type": "text", "text": "Layout"}
                                                ],
                                            },
                                            {
                                                "type": "strong",
                                                "inlineContent": [
                                                    {"type": "text", "text": "stacks"}
                                                ],
                                            },
                                        ],
                                    }
                                ]
                            },
                        ],
                    },
                    {"type": "links", "style": "compactGrid", "items": [UIKIT_ID]},
                ],
            }
        ],
        "topicSections": [
            {
                "title": "Essentials",
                "identifiers": [VIEW_ID],
                "anchor": "Essentials",
                "kind": "taskGroup",
            },
            {"title": "Tutorials", "identifiers": [TUTORIAL_ID]},
        ],
        "seeAlsoSections": [
            {"title": "Related Frameworks", "generated": True, "identifiers": [UIKIT_ID]}
        ],
        "references": {
            VIEW_ID: {
                "type": "topic",
                "identifier": VIEW_ID,
                "title": "View",
                "url": "/documentation/swiftui/view",
                "kind": "symbol",
                "role": "symbol",
                "abstract": [
                    {"type": "text", "text": "A type that represents part of your UI."}
                ],
                "fragments": [
                    {"text": "protocol", "kind": "keyword"},
                    {"text": " ", "kind": "text"},
                    {"text": "View", "kind": "identifier"},
                ],
                "navigatorTitle": [{"text": "View", "kind": "identifier"}],
            },
            UIKIT_ID: {
                "type": "topic",
                "identifier": UIKIT_ID,
                "title": "UIKit",
                "url": "/documentation/uikit",
                "kind": "symbol",
                "role": "collection",
            },
            HERO_IMAGE: {
                "type": "image",
                "identifier": HERO_IMAGE,
                "alt": "SwiftUI hero",
                "variants": [{"url": "/images/hero.png", "traits": ["1x", "light"]}],
            },
        },
        "diffAvailability": {
            "major": {"change": "modified", "platform": "Xcode", "versions": ["15.4", "16.0"]}
        },
    }


@pytest.fixture(autouse=True)
def _reset_techdoc_logger() -> typ.Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("techdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
