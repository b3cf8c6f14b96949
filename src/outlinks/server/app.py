"""FastAPI application factory for the link preview server."""

import logging
from html import escape
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse

from outlinks.config.models import RewriteConfig, ServerConfig
from outlinks.config.settings import HTML_SUFFIXES, MARKDOWN_SUFFIXES
from outlinks.links import LinkRewriter
from outlinks.renderer import MarkdownRenderer
from outlinks.security.path_validator import SecurityError, validate_path
from outlinks.server.middleware import ExternalLinksMiddleware

logger = logging.getLogger(__name__)

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<main>
{content}
</main>
</body>
</html>
"""


def _render_page(title: str, content: str) -> str:
    return _PAGE_TEMPLATE.format(title=escape(title), content=content)


def _list_documents(root: Path) -> list[str]:
    """List servable files under root as POSIX paths relative to it."""
    suffixes = MARKDOWN_SUFFIXES + HTML_SUFFIXES
    return sorted(
        path.relative_to(root).as_posix()
        for path in root.rglob("*")
        if path.is_file()
        and path.suffix.lower() in suffixes
        and not any(part.startswith(".") for part in path.relative_to(root).parts)
    )


def create_app(config: ServerConfig) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Server configuration

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="outlinks",
        description="Preview server that opens external links in a new tab",
        version="0.1.0",
    )

    # Store config on app state
    app.state.config = config
    # Links are rewritten once, by the middleware, against the request host
    app.state.renderer = MarkdownRenderer()

    rewriter = LinkRewriter(RewriteConfig(site_host=config.site_host))
    app.add_middleware(ExternalLinksMiddleware, rewriter=rewriter)

    # Add security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if "text/html" in response.headers.get("content-type", ""):
            # HTML pages: no cache (always fresh)
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response

    # Root endpoint
    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        """List servable documents."""
        serve_path = app.state.config.serve_path
        items = "\n".join(
            f'<li><a href="/view/{quote(name)}">{escape(name)}</a></li>'
            for name in _list_documents(serve_path)
        )
        return _render_page(serve_path.name or "outlinks", f"<ul>\n{items}\n</ul>")

    # View specific file endpoint
    @app.get("/view/{file_path:path}", response_class=HTMLResponse)
    async def view_file(file_path: str) -> str:
        """Render a Markdown file or return an HTML file as-is."""
        serve_path = app.state.config.serve_path

        try:
            abs_path = validate_path(Path(file_path), serve_path)
        except SecurityError as e:
            logger.warning(f"Blocked request: {e}")
            raise HTTPException(status_code=403, detail="Access forbidden")
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="File not found")

        suffix = abs_path.suffix.lower()
        if suffix in MARKDOWN_SUFFIXES:
            content = abs_path.read_text(encoding="utf-8")
            return _render_page(abs_path.name, app.state.renderer.render(content))
        if suffix in HTML_SUFFIXES:
            return abs_path.read_text(encoding="utf-8")

        raise HTTPException(status_code=400, detail="Unsupported file type")

    logger.debug(f"Serving documents from {config.serve_path}")
    return app
