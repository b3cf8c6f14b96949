"""Path validation for the preview server."""

from pathlib import Path


class SecurityError(Exception):
    """Raised when a requested path escapes the served directory."""

    pass


def validate_path(requested_path: Path, root_path: Path) -> Path:
    """
    Resolve a requested file path inside the served directory.

    Args:
        requested_path: Path taken from the request URL
        root_path: Directory being served

    Returns:
        The resolved absolute path

    Raises:
        SecurityError: If the path resolves outside ``root_path``
        FileNotFoundError: If the path does not name an existing file
    """
    if requested_path.is_absolute():
        raise SecurityError(f"Absolute paths are not allowed: {requested_path}")

    try:
        abs_root = root_path.resolve(strict=False)
        abs_requested = (abs_root / requested_path).resolve(strict=False)
    except (OSError, ValueError) as e:
        raise SecurityError(f"Invalid path: {requested_path}") from e

    if not abs_requested.is_relative_to(abs_root):
        raise SecurityError(f"Access denied: {requested_path} is outside serve root")

    if not abs_requested.is_file():
        raise FileNotFoundError(f"File not found: {requested_path}")

    return abs_requested
