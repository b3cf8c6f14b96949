"""Markdown rendering engine."""

from functools import lru_cache

import markdown

from outlinks.config.models import RenderConfig, RewriteConfig
from outlinks.config.settings import RENDER_CACHE_SIZE
from outlinks.links import LinkRewriter
from outlinks.renderer.extensions import ExternalLinkExtension


class MarkdownRenderer:
    """Renders Markdown to HTML with external links opened in a new tab."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        rewrite_config: RewriteConfig | None = None,
    ) -> None:
        """Initialize renderer with configuration."""
        self.config = config or RenderConfig.default()
        self.rewrite_config = rewrite_config or RewriteConfig()
        self.rewriter = LinkRewriter(self.rewrite_config)
        self._md = self._create_markdown_instance()

    def _create_markdown_instance(self) -> markdown.Markdown:
        """Create configured markdown instance."""
        external_links = ExternalLinkExtension(
            site_host=self.rewrite_config.site_host,
            target=self.rewrite_config.target,
            rel=self.rewrite_config.rel,
            url_policy=self.rewrite_config.url_policy,
        )
        return markdown.Markdown(
            extensions=[*self.config.extensions, external_links],
            extension_configs=self.config.extension_configs,
        )

    @lru_cache(maxsize=RENDER_CACHE_SIZE)
    def render(self, content: str) -> str:
        """
        Render Markdown content to HTML.

        Args:
            content: Raw Markdown string

        Returns:
            Rendered HTML string
        """
        # Reset the markdown instance for fresh render
        self._md.reset()
        return self._md.convert(content)

    def render_html(self, html: str, site_host: str | None = None) -> str:
        """Run the external link pass over already-rendered HTML."""
        return self.rewriter.rewrite(html, site_host)
