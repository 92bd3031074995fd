"""Markdown document primitives."""
from .frontmatter import Frontmatter, split_frontmatter
from .markdown import check_structure, extract_links, is_local_target

__all__ = [
    "Frontmatter",
    "split_frontmatter",
    "check_structure",
    "extract_links",
    "is_local_target",
]
