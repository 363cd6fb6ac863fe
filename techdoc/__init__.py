"""Decode technology-detail documentation pages into a typed content tree.

The core of this package turns one JSON page from the documentation service
into an immutable, renderer-agnostic :class:`~techdoc.model.TechnologyDetail`.
Unknown block and inline kinds decode to placeholders instead of failing, while
structurally malformed pages raise a :class:`~techdoc.errors.DecodeError`.
Around the core sit an HTTP client, an HTML renderer, and the ``techdoc`` CLI.

Exports
-------
- ``decode_technology_detail``: Decode bytes into a ``TechnologyDetail``.
- ``TechnologyDetailDecoder`` / ``DecoderSettings``: Reusable configured decoder.
- ``DecodeError``: Base class of every decode failure.
- ``app`` / ``main``: Cyclopts application and its console entry point.

Examples
--------
>>> from techdoc import decode_technology_detail
>>> page = b'{"metadata": {"title": "T", "role": "article"}, "abstract": [],'
>>> page += b' "topicSections": [], "references": {}}'
>>> decode_technology_detail(page).metadata.role
'article'
"""

from __future__ import annotations

from .cli import app, main
from .decode import DecoderSettings, TechnologyDetailDecoder, decode_technology_detail
from .errors import DecodeError
from .model import TechnologyDetail

__all__ = [
    "DecodeError",
    "DecoderSettings",
    "TechnologyDetail",
    "TechnologyDetailDecoder",
    "app",
    "decode_technology_detail",
    "main",
]
