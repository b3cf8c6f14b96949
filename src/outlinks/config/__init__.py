"""Configuration models and settings for outlinks."""
