"""Open external links in a new browsing context.

Anchors whose ``href`` points off-site get ``target="_blank"`` and
``rel="noopener noreferrer"`` so the new tab cannot reach back into the
opening page. Every other byte of the document is left alone.
"""

import logging
from functools import partial
from typing import Callable

from outlinks.config.models import DEFAULT_REL, DEFAULT_TARGET, RewriteConfig
from outlinks.html import TagProcessor
from outlinks.links.urls import is_absolute_url

logger = logging.getLogger(__name__)


def rewrite_external_links(
    html: str,
    site_host: str | None,
    *,
    is_valid_url: Callable[[str], bool] = is_absolute_url,
    target: str = DEFAULT_TARGET,
    rel: str = DEFAULT_REL,
) -> str:
    """
    Add ``target`` and ``rel`` to every anchor that links off-site.

    An anchor is left alone when its ``href`` is missing or empty, when the
    ``href`` contains ``site_host`` anywhere in it, or when ``is_valid_url``
    rejects it. Existing ``target`` and ``rel`` values on external anchors
    are overwritten, not merged.

    Args:
        html: HTML document or fragment
        site_host: The site's own host name; empty or None disables rewriting
        is_valid_url: Predicate accepting well-formed absolute URLs
        target: Value for the ``target`` attribute
        rel: Value for the ``rel`` attribute

    Returns:
        The document with external anchors updated
    """
    if not html or not site_host:
        return html

    tags = TagProcessor(html)
    rewritten = 0

    while tags.next_tag("a"):
        href = tags.get_attribute("href")

        # Substring match: any href mentioning the host counts as internal
        if not href or site_host in href:
            continue

        # Relative paths and malformed values are never external
        if not is_valid_url(href):
            continue

        tags.set_attribute("target", target)
        tags.set_attribute("rel", rel)
        rewritten += 1

    if tags.paused_at_incomplete_token:
        logger.debug("Stopped at an incomplete tag; the remainder was left as-is")
    logger.debug(f"Rewrote {rewritten} external link(s) for host {site_host}")

    return tags.get_updated_html()


class LinkRewriter:
    """Rewrites external links with a fixed configuration.

    Instances hold no per-document state, so one rewriter can be shared
    by concurrent renders.
    """

    def __init__(self, config: RewriteConfig | None = None) -> None:
        """Initialize rewriter with configuration."""
        self.config = config or RewriteConfig()
        self.config.validate()
        self._is_valid_url = partial(is_absolute_url, policy=self.config.url_policy)

    def rewrite(self, html: str, site_host: str | None = None) -> str:
        """
        Rewrite external links in ``html``.

        Args:
            html: HTML document or fragment
            site_host: Host for this call; falls back to the configured one

        Returns:
            Rewritten HTML
        """
        host = self.config.site_host if site_host is None else site_host
        return rewrite_external_links(
            html,
            host,
            is_valid_url=self._is_valid_url,
            target=self.config.target,
            rel=self.config.rel,
        )

    __call__ = rewrite
