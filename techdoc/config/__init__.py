"""Load and validate techdoc configuration YAML.

This subpackage parses ``techdoc.yaml``, applies defaults for every missing
section or key, and produces strongly typed dataclasses
(:class:`TechdocConfig`, :class:`ClientConfig`, :class:`RenderConfig`) plus
the :class:`~techdoc.decode.DecoderSettings` handed to the decoder. The
primary entry point is :func:`load_settings`.

Examples
--------
>>> from pathlib import Path
>>> from techdoc.config import load_settings
>>> config = load_settings(Path("does-not-exist.yaml"))
>>> config.decoder.diff_availability
'strict'
"""

from .loader import DEFAULT_CONFIG, load_settings
from .models import ClientConfig, ConfigError, RenderConfig, TechdocConfig

__all__ = [
    "DEFAULT_CONFIG",
    "ClientConfig",
    "ConfigError",
    "RenderConfig",
    "TechdocConfig",
    "load_settings",
]
