"""Utilities module."""
from .html import (
    escape,
    bold,
    italic,
    code,
    pre,
    chunk_html,
    chunk_text,
    balance_tags,
    truncate,
)

__all__ = [
    "escape",
    "bold",
    "italic",
    "code",
    "pre",
    "chunk_html",
    "chunk_text",
    "balance_tags",
    "truncate",
]
