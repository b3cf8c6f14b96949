"""Application settings and configuration."""

import os

from outlinks.config.models import (
    DEFAULT_REL,
    DEFAULT_TARGET,
    VALID_LOG_LEVELS,
    RewriteConfig,
)

# Default settings
DEFAULT_HOST = os.getenv("OUTLINKS_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("OUTLINKS_PORT", "8000"))
DEFAULT_LOG_LEVEL = os.getenv("OUTLINKS_LOG_LEVEL", "INFO")

# Host of the site being rendered; links containing it are treated as internal
DEFAULT_SITE_HOST = os.getenv("OUTLINKS_SITE_HOST", "")


def get_default_rewrite_config(site_host: str | None = None) -> RewriteConfig:
    """Get default rewrite configuration."""
    return RewriteConfig(
        site_host=DEFAULT_SITE_HOST if site_host is None else site_host,
        target=DEFAULT_TARGET,
        rel=DEFAULT_REL,
    )


# File types the preview server will serve
MARKDOWN_SUFFIXES = (".md", ".markdown")
HTML_SUFFIXES = (".html", ".htm")

# Cache settings
RENDER_CACHE_SIZE = 128  # Max number of rendered documents to cache

__all__ = [
    "VALID_LOG_LEVELS",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_SITE_HOST",
    "get_default_rewrite_config",
    "MARKDOWN_SUFFIXES",
    "HTML_SUFFIXES",
    "RENDER_CACHE_SIZE",
]
