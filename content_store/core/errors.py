"""
Exception hierarchy for the content store.

All load-time failures derive from ``LoadError`` and are fatal: ``load``
never returns a partially valid snapshot. ``NotFound`` is deliberately not
an exception; see ``content_store.core.types``.
"""

from __future__ import annotations


class ContentStoreError(Exception):
    """Base class for all content store errors."""


class ConfigError(ContentStoreError):
    """Raised when configuration values are invalid."""


class LoadError(ContentStoreError):
    """Raised when a set of sources cannot be turned into a snapshot."""


class DuplicateSlug(LoadError):
    """Two sources resolve to the same slug.

    Attributes:
        slug: The contested slug
        paths: Source paths of the colliding documents, in source order
    """

    def __init__(self, slug: str, paths: list[str]):
        self.slug = slug
        self.paths = list(paths)
        super().__init__(f"Duplicate slug '{slug}' from sources: {', '.join(self.paths)}")


class DuplicateAlias(LoadError):
    """A redirect alias is claimed twice, or shadows a record slug.

    Attributes:
        alias: The contested (normalised) alias path
        claimants: Slugs of the records claiming the path
    """

    def __init__(self, alias: str, claimants: list[str], reason: str = "claimed by more than one record"):
        self.alias = alias
        self.claimants = list(claimants)
        super().__init__(f"Alias '/{alias}' {reason}: {', '.join(self.claimants)}")


class MalformedMetadata(LoadError):
    """Front-matter is missing, unparseable, or fails validation.

    Attributes:
        path: Source path of the offending document
        field: Name of the offending field, or None for whole-document problems
        reason: Human-readable description of the problem
    """

    def __init__(self, path: str, field: str | None, reason: str):
        self.path = path
        self.field = field
        self.reason = reason
        where = f"{path} [{field}]" if field else path
        super().__init__(f"Malformed metadata in {where}: {reason}")
