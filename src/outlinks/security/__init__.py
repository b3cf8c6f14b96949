"""Request path checks for the preview server."""
