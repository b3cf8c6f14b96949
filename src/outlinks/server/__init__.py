"""FastAPI server components for outlinks."""

from .app import create_app
from .middleware import ExternalLinksMiddleware

__all__ = ["create_app", "ExternalLinksMiddleware"]
