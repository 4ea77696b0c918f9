"""Data models for spanfmt."""
