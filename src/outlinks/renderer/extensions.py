"""Markdown extension that opens external links in a new tab."""

from markdown import Markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor

from outlinks.config.models import DEFAULT_REL, DEFAULT_TARGET, RewriteConfig, UrlPolicy
from outlinks.links import LinkRewriter


class ExternalLinkProcessor(Postprocessor):
    """Add target and rel attributes to external links in rendered HTML."""

    def __init__(self, md: Markdown, rewriter: LinkRewriter) -> None:
        super().__init__(md)
        self.rewriter = rewriter

    def run(self, text: str) -> str:
        """Process HTML to add attributes to external links."""
        return self.rewriter.rewrite(text)


class ExternalLinkExtension(Extension):
    """Extension to handle external links."""

    def __init__(self, **kwargs):  # type: ignore
        self.config = {
            "site_host": ["", "Host of the site; hrefs containing it stay untouched"],
            "target": [DEFAULT_TARGET, "Value for the target attribute"],
            "rel": [DEFAULT_REL, "Value for the rel attribute"],
            "url_policy": [UrlPolicy(), "UrlPolicy used to validate hrefs"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # type: ignore
        """Register the postprocessor."""
        rewriter = LinkRewriter(
            RewriteConfig(
                site_host=self.getConfig("site_host"),
                target=self.getConfig("target"),
                rel=self.getConfig("rel"),
                url_policy=self.getConfig("url_policy"),
            )
        )
        # Runs after raw_html (30) and amp_substitute (20) so it sees final markup
        md.postprocessors.register(
            ExternalLinkProcessor(md, rewriter),
            "external_links",
            5,  # Priority
        )


def makeExtension(**kwargs):  # type: ignore
    """Create extension instance."""
    return ExternalLinkExtension(**kwargs)
