"""HTML rendering for decoded technology-detail pages."""

from .renderer import FRAGMENT_TOKENS, HtmlPageRenderer

__all__ = ["FRAGMENT_TOKENS", "HtmlPageRenderer"]
