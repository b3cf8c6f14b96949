"""External link detection and rewriting."""

from outlinks.links.rewriter import LinkRewriter, rewrite_external_links
from outlinks.links.urls import get_host, is_absolute_url, resolve_site_host

__all__ = [
    "LinkRewriter",
    "rewrite_external_links",
    "is_absolute_url",
    "get_host",
    "resolve_site_host",
]
