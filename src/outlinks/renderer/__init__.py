"""Markdown rendering with external link handling."""

from outlinks.renderer.engine import MarkdownRenderer
from outlinks.renderer.extensions import ExternalLinkExtension, ExternalLinkProcessor

__all__ = ["MarkdownRenderer", "ExternalLinkExtension", "ExternalLinkProcessor"]
