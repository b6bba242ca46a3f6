"""
Input parsing utilities.

This package contains code for discovering source documents on disk and
parsing their front-matter into records.
"""

from .frontmatter import parse_date, parse_source, slug_from_path, split_front_matter
from .sources import list_source_files, read_sources

__all__ = [
    "list_source_files",
    "parse_date",
    "parse_source",
    "read_sources",
    "slug_from_path",
    "split_front_matter",
]
