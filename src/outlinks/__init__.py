"""outlinks: open external links in a new tab, safely."""

__version__ = "0.1.0"
__author__ = "outlinks contributors"
__license__ = "MIT"

from outlinks.config.models import RenderConfig, RewriteConfig, ServerConfig, UrlPolicy
from outlinks.html import TagProcessor
from outlinks.links import LinkRewriter, is_absolute_url, rewrite_external_links

__all__ = [
    "rewrite_external_links",
    "LinkRewriter",
    "TagProcessor",
    "is_absolute_url",
    "RewriteConfig",
    "RenderConfig",
    "ServerConfig",
    "UrlPolicy",
    "__version__",
]
