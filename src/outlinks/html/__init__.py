"""Streaming HTML tag scanning for outlinks."""

from outlinks.html.tag_processor import RAWTEXT_ELEMENTS, TagProcessor

__all__ = ["TagProcessor", "RAWTEXT_ELEMENTS"]
