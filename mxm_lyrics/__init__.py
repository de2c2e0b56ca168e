"""Musixmatch lyrics lookup and normalization."""

__version__ = "0.1.0"
