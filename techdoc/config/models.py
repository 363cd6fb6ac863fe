"""Typed dataclasses describing techdoc configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from techdoc._constants import DEFAULT_API_BASE
from techdoc.decode import DecoderSettings


class ConfigError(ValueError):
    """Raised when the techdoc configuration is invalid."""


@dc.dataclass(slots=True)
class ClientConfig:
    """Connection settings for the documentation HTTP client."""

    api_base: str = DEFAULT_API_BASE
    timeout: float = 15.0
    retries: int = 3


@dc.dataclass(slots=True)
class RenderConfig:
    """Output settings for rendered HTML pages."""

    output_dir: Path = Path("public")
    pygments_style: str = "xcode"
    page_title_suffix: str = "Documentation"


@dc.dataclass(slots=True)
class TechdocConfig:
    """Aggregated settings sourced from ``techdoc.yaml``.

    Attributes
    ----------
    decoder : DecoderSettings
        Depth guard and ``diffAvailability`` policy passed to the decoder.
    client : ClientConfig
        Base URL, timeout, and retry budget for page fetches.
    render : RenderConfig
        Output directory, Pygments style, and title suffix for HTML output.
    """

    decoder: DecoderSettings = dc.field(default_factory=DecoderSettings)
    client: ClientConfig = dc.field(default_factory=ClientConfig)
    render: RenderConfig = dc.field(default_factory=RenderConfig)


__all__ = ["ClientConfig", "ConfigError", "RenderConfig", "TechdocConfig"]
