"""Loader, validator and renderer for agent skill and command documents."""

__version__ = "0.1.0"
