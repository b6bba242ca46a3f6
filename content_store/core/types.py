"""
Core data types for the content store.

This module defines the fundamental data structures shared by the store
and the resolver:
- SourceDocument: A raw source file (path plus text) before parsing
- DocumentRecord: One validated article with its front-matter and body
- ResolveContext: Request context for visibility decisions
- ResolvedContent / Redirect / NotFound: Resolution outcomes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class SourceDocument:
    """A raw source document as read from storage.

    Attributes:
        path: Path relative to the content root, POSIX separators
        text: Full file content (front-matter followed by body)
    """
    path: str
    text: str


@dataclass(frozen=True)
class DocumentRecord:
    """Represents one article after front-matter validation.

    Attributes:
        slug: Canonical identifier derived from the storage path
        title: The article headline
        date: Timezone-aware authoring/edit timestamp
        description: Optional short description (may be empty)
        categories: Set of category tags
        published: Whether the record is publicly visible
        canonical_link: Optional URL of the authoritative external copy
        redirect_from: Normalised legacy paths that redirect to this record
        body: Raw body text, not interpreted
        source_path: Path of the source document, for diagnostics
        extra: Unrecognised front-matter keys, read-only
    """
    slug: str
    title: str
    date: datetime
    description: str = ""
    categories: frozenset[str] = frozenset()
    published: bool = True
    canonical_link: str | None = None
    redirect_from: tuple[str, ...] = ()
    body: str = ""
    source_path: str = ""
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    @property
    def url(self) -> str:
        """Public URL path of the record."""
        return slug_url(self.slug)


@dataclass(frozen=True)
class ResolveContext:
    """Request context for resolution.

    Attributes:
        is_preview: True for authoring/preview builds, where unpublished
            records are served
    """
    is_preview: bool = False


@dataclass(frozen=True)
class ResolvedContent:
    """The requested path is a record that may be served."""
    record: DocumentRecord


@dataclass(frozen=True)
class Redirect:
    """The requested path is a legacy alias of ``target``."""
    target: str
    permanent: bool = True

    @property
    def location(self) -> str:
        return slug_url(self.target)


@dataclass(frozen=True)
class NotFound:
    """Nothing is servable at ``path``. A normal outcome, not an error."""
    path: str


Resolution = Union[ResolvedContent, Redirect, NotFound]


def normalize_path(path: str) -> str:
    """Normalise a URL path, slug or alias to its lookup key.

    Strips whitespace and surrounding slashes, collapses repeated slashes
    and drops a trailing ``index.html``.

    Examples:
        >>> normalize_path("/old-b/")
        'old-b'
        >>> normalize_path("posts//2020/hello/index.html")
        'posts/2020/hello'
    """
    parts = [part for part in path.strip().split("/") if part]
    if parts and parts[-1] == "index.html":
        parts.pop()
    return "/".join(parts)


def slug_url(slug: str) -> str:
    """Return the public URL path for a slug or alias.

    Directory-style paths get a trailing slash; paths whose last segment
    names a file (``2019/post.html``) do not.
    """
    if not slug:
        return "/"
    if "." in slug.rsplit("/", 1)[-1]:
        return f"/{slug}"
    return f"/{slug}/"
