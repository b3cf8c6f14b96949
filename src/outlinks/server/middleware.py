"""ASGI middleware that rewrites external links in HTML responses."""

import logging
import re

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from outlinks.links import LinkRewriter

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)

# Requests that fetch page fragments rather than a full document
_FRAGMENT_HEADERS = ("hx-request", "x-up-version")


class ExternalLinksMiddleware(BaseHTTPMiddleware):
    """Rewrite external anchors in full-page HTML responses.

    The site host comes from the rewriter's configuration when set, and
    from the request's ``Host`` header otherwise. Only the main document
    render is rewritten: non-GET/HEAD requests, non-200 responses, non-HTML
    or compressed bodies, and fragment requests pass through untouched.
    HEAD is rewritten like GET so both report the same Content-Length.
    """

    def __init__(self, app: ASGIApp, rewriter: LinkRewriter | None = None) -> None:
        super().__init__(app)
        self.rewriter = rewriter or LinkRewriter()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        if not _is_main_document(request, response):
            return response

        site_host = self.rewriter.config.site_host or request.url.hostname or ""
        body = b"".join([chunk async for chunk in response.body_iterator])
        if not body:
            # Header-only HEAD response; keep the upstream length
            return _rebuild_response(response, body, keep_length=True)

        charset = _get_charset(response.headers.get("content-type", ""))

        try:
            html = body.decode(charset)
        except (LookupError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping link rewrite for {request.url.path}: {e}")
            return _rebuild_response(response, body)

        rewritten = self.rewriter.rewrite(html, site_host)
        return _rebuild_response(response, rewritten.encode(charset))


def _is_main_document(request: Request, response: Response) -> bool:
    if request.method not in ("GET", "HEAD") or response.status_code != 200:
        return False
    if not response.headers.get("content-type", "").lower().startswith("text/html"):
        return False
    if response.headers.get("content-encoding"):
        return False
    if any(request.headers.get(name) for name in _FRAGMENT_HEADERS):
        return False
    return request.headers.get("x-requested-with", "").lower() != "xmlhttprequest"


def _get_charset(content_type: str) -> str:
    match = _CHARSET_RE.search(content_type)
    return match.group(1) if match else "utf-8"


def _rebuild_response(response: Response, body: bytes, *, keep_length: bool = False) -> Response:
    """Copy status and headers onto a new response, recomputing Content-Length."""
    raw_headers = [
        (key, value)
        for key, value in response.raw_headers
        if keep_length or key.lower() != b"content-length"
    ]
    return Response(
        content=body,
        status_code=response.status_code,
        headers=Headers(raw=raw_headers),
        background=response.background,
    )
