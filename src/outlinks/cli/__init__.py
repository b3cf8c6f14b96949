"""Command line interface for outlinks."""
