"""Load techdoc configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from techdoc._constants import DEFAULT_API_BASE, DIFF_AVAILABILITY_POLICIES
from techdoc.decode import DecoderSettings

from .helpers import (
    _non_negative_int,
    _optional_str,
    _positive_float,
    _positive_int,
    _section,
)
from .models import ClientConfig, ConfigError, RenderConfig, TechdocConfig

DEFAULT_CONFIG = Path("techdoc.yaml")


def load_settings(path: Path = DEFAULT_CONFIG) -> TechdocConfig:
    """Load the YAML configuration describing decoder, client, and render settings.

    Parameters
    ----------
    path : Path, optional
        Filesystem path to the YAML configuration file. Defaults to
        ``techdoc.yaml`` in the working directory.

    Returns
    -------
    TechdocConfig
        Parsed configuration. Every section and key is optional; a missing
        file yields the defaults.

    Raises
    ------
    ConfigError
        If the top-level structure is not a mapping or a value is invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from techdoc.config import load_settings
    >>> config = load_settings(Path("techdoc.yaml"))  # doctest: +SKIP
    >>> config.decoder.max_depth  # doctest: +SKIP
    64
    """
    if not path.exists():
        return TechdocConfig()

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    return TechdocConfig(
        decoder=_build_decoder_settings(_section(raw, "decoder")),
        client=_build_client_config(_section(raw, "client")),
        render=_build_render_config(_section(raw, "render")),
    )


def _build_decoder_settings(payload: typ.Mapping[str, typ.Any]) -> DecoderSettings:
    """Build DecoderSettings from the ``decoder`` mapping, applying defaults."""
    base = DecoderSettings()
    max_depth = _positive_int(
        payload.get("max_depth", base.max_depth), key="decoder.max_depth"
    )
    policy = payload.get("diff_availability", base.diff_availability)
    if policy not in DIFF_AVAILABILITY_POLICIES:
        allowed = ", ".join(DIFF_AVAILABILITY_POLICIES)
        msg = f"'decoder.diff_availability' must be one of {allowed}, got {policy!r}."
        raise ConfigError(msg)
    return DecoderSettings(max_depth=max_depth, diff_availability=policy)


def _build_client_config(payload: typ.Mapping[str, typ.Any]) -> ClientConfig:
    """Build ClientConfig from the ``client`` mapping, applying defaults."""
    base = ClientConfig()
    api_base = _optional_str(payload.get("api_base")) or DEFAULT_API_BASE
    return ClientConfig(
        api_base=api_base.rstrip("/"),
        timeout=_positive_float(
            payload.get("timeout", base.timeout), key="client.timeout"
        ),
        retries=_non_negative_int(
            payload.get("retries", base.retries), key="client.retries"
        ),
    )


def _build_render_config(payload: typ.Mapping[str, typ.Any]) -> RenderConfig:
    """Build RenderConfig from the ``render`` mapping, applying defaults."""
    base = RenderConfig()
    output_dir = _optional_str(payload.get("output_dir"))
    return RenderConfig(
        output_dir=Path(output_dir) if output_dir else base.output_dir,
        pygments_style=_optional_str(payload.get("pygments_style"))
        or base.pygments_style,
        page_title_suffix=_optional_str(payload.get("page_title_suffix"))
        or base.page_title_suffix,
    )


__all__ = ["DEFAULT_CONFIG", "load_settings"]
