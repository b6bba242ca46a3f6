"""
Core domain models and business logic.

This package contains the record types, the error hierarchy, the snapshot
store and the publication resolver.
"""

from .errors import (
    ConfigError,
    ContentStoreError,
    DuplicateAlias,
    DuplicateSlug,
    LoadError,
    MalformedMetadata,
)
from .types import (
    DocumentRecord,
    NotFound,
    Redirect,
    ResolveContext,
    ResolvedContent,
    SourceDocument,
    normalize_path,
    slug_url,
)
from .store import (
    ContentStore,
    Snapshot,
    build_snapshot,
    get_by_slug,
    list_published,
    list_visible,
    load,
)
from .resolver import follow, resolve

__all__ = [
    "ConfigError",
    "ContentStore",
    "ContentStoreError",
    "DocumentRecord",
    "DuplicateAlias",
    "DuplicateSlug",
    "LoadError",
    "MalformedMetadata",
    "NotFound",
    "Redirect",
    "ResolveContext",
    "ResolvedContent",
    "Snapshot",
    "SourceDocument",
    "build_snapshot",
    "follow",
    "get_by_slug",
    "list_published",
    "list_visible",
    "load",
    "normalize_path",
    "resolve",
    "slug_url",
]
