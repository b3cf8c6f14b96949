# tests/test_config.py
from pathlib import Path

import pytest

from outlinks.config.models import RenderConfig, RewriteConfig, ServerConfig
from outlinks.config.settings import get_default_rewrite_config
from outlinks.security.path_validator import SecurityError, validate_path


def test_rewrite_config_defaults():
    config = RewriteConfig()

    assert config.site_host == ""
    assert config.target == "_blank"
    assert config.rel == "noopener noreferrer"
    config.validate()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"site_host": "https://example.com"},
        {"site_host": "example.com/blog"},
        {"target": ""},
        {"rel": "  "},
    ],
)
def test_rewrite_config_validation(kwargs):
    with pytest.raises(ValueError):
        RewriteConfig(**kwargs).validate()


def test_default_rewrite_config_takes_explicit_host():
    assert get_default_rewrite_config("example.com").site_host == "example.com"
    assert get_default_rewrite_config("").site_host == ""


def test_render_config_default_includes_pymdownx():
    config = RenderConfig.default()

    assert "pymdownx.magiclink" in config.extensions
    assert "markdown.extensions.toc" in config.extension_configs


def test_server_config_validation(tmp_path):
    ServerConfig(serve_path=tmp_path).validate()

    with pytest.raises(ValueError, match="Port"):
        ServerConfig(serve_path=tmp_path, port=80).validate()
    with pytest.raises(ValueError, match="does not exist"):
        ServerConfig(serve_path=tmp_path / "missing").validate()
    with pytest.raises(ValueError, match="log level"):
        ServerConfig(serve_path=tmp_path, log_level="LOUD").validate()
    with pytest.raises(ValueError):
        ServerConfig(serve_path=tmp_path, site_host="http://example.com").validate()


def test_server_config_requires_a_directory(tmp_path):
    file_path = tmp_path / "page.html"
    file_path.write_text("<p></p>")

    with pytest.raises(ValueError, match="not a directory"):
        ServerConfig(serve_path=file_path).validate()


# --- Path validation ---

def test_validate_path_resolves_files_inside_root(tmp_path):
    (tmp_path / "docs").mkdir()
    target = tmp_path / "docs" / "a.md"
    target.write_text("# A")

    assert validate_path(Path("docs/a.md"), tmp_path) == target.resolve()


@pytest.mark.parametrize("requested", ["../secret.md", "docs/../../secret.md", "/etc/passwd"])
def test_validate_path_blocks_escapes(tmp_path, requested):
    (tmp_path / "docs").mkdir()

    with pytest.raises(SecurityError):
        validate_path(Path(requested), tmp_path / "docs")


def test_validate_path_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        validate_path(Path("missing.md"), tmp_path)
