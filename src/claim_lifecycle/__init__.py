"""Claim lifecycle orchestration: submission, fraud screening, and verdict processing."""

__version__ = "0.1.0"
