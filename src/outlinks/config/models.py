"""Core configuration models for outlinks."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Attribute values written onto external anchors
DEFAULT_TARGET = "_blank"
DEFAULT_REL = "noopener noreferrer"


@dataclass(frozen=True)
class UrlPolicy:
    """Rules deciding which hrefs count as valid absolute URLs."""

    schemes: frozenset[str] = frozenset({"http", "https"})  # Accepted URL schemes
    allowed_ports: frozenset[int] = frozenset({80, 443, 8080})  # Explicit ports allowed
    allow_private_hosts: bool = False  # Accept loopback/private IPv4 literals


@dataclass
class RewriteConfig:
    """Configuration for the external link rewriter."""

    site_host: str = ""  # The site's own host; empty disables rewriting
    target: str = DEFAULT_TARGET  # Value written to the target attribute
    rel: str = DEFAULT_REL  # Value written to the rel attribute
    url_policy: UrlPolicy = field(default_factory=UrlPolicy)

    def validate(self) -> None:
        """Validate configuration values."""
        if "://" in self.site_host or "/" in self.site_host:
            raise ValueError(f"Site host must be a bare host name: {self.site_host}")
        if not self.target.strip():
            raise ValueError("Target must not be empty")
        if not self.rel.strip():
            raise ValueError("Rel must not be empty")


@dataclass
class RenderConfig:
    """Configuration for Markdown renderer."""

    extensions: list[str] = field(default_factory=list)  # Markdown extensions to enable
    extension_configs: dict[str, Any] = field(
        default_factory=dict
    )  # Extension-specific settings

    @classmethod
    def default(cls) -> "RenderConfig":
        """Create default configuration with common Markdown + pymdownx support."""
        return cls(
            extensions=[
                # --- Core markdown extensions ---
                "markdown.extensions.abbr",
                "markdown.extensions.attr_list",
                "markdown.extensions.def_list",
                "markdown.extensions.footnotes",
                "markdown.extensions.sane_lists",
                "markdown.extensions.tables",
                "markdown.extensions.fenced_code",
                "markdown.extensions.toc",
                # --- pymdownx extensions ---
                "pymdownx.magiclink",
                "pymdownx.tasklist",
                "pymdownx.tilde",
                "pymdownx.mark",
            ],
            extension_configs={
                "markdown.extensions.toc": {
                    "permalink": True,
                },
                "pymdownx.tasklist": {
                    "custom_checkbox": True,
                },
                "pymdownx.magiclink": {
                    "repo_url_shortener": True,
                },
            },
        )


@dataclass
class ServerConfig:
    """Configuration for the preview server."""

    host: str = "127.0.0.1"  # Bind address
    port: int = 8000  # Port number
    serve_path: Path = Path(".")  # Directory of .md/.html files to serve
    site_host: str = ""  # Fixed site host; empty uses the request Host header
    log_level: str = "INFO"  # Logging level

    def validate(self) -> None:
        """Validate configuration values."""
        if not (1024 <= self.port <= 65535):
            raise ValueError("Port must be 1024-65535")
        if not self.serve_path.exists():
            raise ValueError(f"Path does not exist: {self.serve_path}")
        if not self.serve_path.is_dir():
            raise ValueError(f"Path is not a directory: {self.serve_path}")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
        RewriteConfig(site_host=self.site_host).validate()
