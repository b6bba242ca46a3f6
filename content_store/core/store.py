"""
Content record store: immutable, validated snapshots of document records.

``load`` consumes source documents in order, parses their front-matter,
validates slug and alias uniqueness and returns a ``Snapshot``. Snapshots
are value objects: their indices are built once and never mutated.
``ContentStore`` holds the current snapshot for a content directory and
swaps in a new one on reload, so readers see either the old snapshot or
the new one in full.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from pathlib import Path
import threading
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .errors import DuplicateAlias, DuplicateSlug, LoadError
from .types import DocumentRecord, ResolveContext, SourceDocument, normalize_path
from ..input.frontmatter import parse_source
from ..input.sources import read_sources
from ..utils.logging import get_logger, log_event


logger = get_logger("store")


@dataclass(frozen=True)
class Snapshot:
    """An immutable view of all loaded records.

    Attributes:
        records: All records, date descending then slug ascending
        slugs: Slug -> records claiming it (one entry once validated)
        aliases: Normalised alias -> slugs of the records claiming it
        loaded_at: When the snapshot was built; ignored by equality
    """
    records: tuple[DocumentRecord, ...]
    slugs: Mapping[str, tuple[DocumentRecord, ...]] = field(compare=False, repr=False)
    aliases: Mapping[str, tuple[str, ...]] = field(compare=False, repr=False)
    loaded_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and normalize_path(slug) in self.slugs


def build_snapshot(records: Iterable[DocumentRecord]) -> Snapshot:
    """Build a snapshot and its indices without validating uniqueness.

    ``load`` validates before calling this; callers that assemble records
    by hand get a snapshot in which the resolver's tie-break applies.
    """
    ordered = tuple(sorted(records, key=_listing_key))

    slugs: dict[str, list[DocumentRecord]] = {}
    aliases: dict[str, list[str]] = {}
    for record in ordered:
        slugs.setdefault(record.slug, []).append(record)
        for alias in record.redirect_from:
            claimants = aliases.setdefault(alias, [])
            if record.slug not in claimants:
                claimants.append(record.slug)

    return Snapshot(
        records=ordered,
        slugs=MappingProxyType({slug: tuple(items) for slug, items in slugs.items()}),
        aliases=MappingProxyType({alias: tuple(sorted(owners)) for alias, owners in aliases.items()}),
    )


def load(sources: Iterable[SourceDocument]) -> Snapshot:
    """Parse and validate sources into a snapshot.

    Args:
        sources: Ordered source documents (path plus raw text)

    Returns:
        A fully validated Snapshot

    Raises:
        MalformedMetadata: If a document's front-matter is missing or invalid
        DuplicateSlug: If two sources yield the same slug
        DuplicateAlias: If an alias is claimed twice or shadows a slug
    """
    records: list[DocumentRecord] = []
    seen_slugs: dict[str, str] = {}
    for source in sources:
        record = parse_source(source)
        if record.slug in seen_slugs:
            raise DuplicateSlug(record.slug, [seen_slugs[record.slug], source.path])
        seen_slugs[record.slug] = source.path
        if record.extra:
            log_event(
                logger,
                "Unknown front-matter keys",
                level=logging.DEBUG,
                event="record_unknown_keys",
                slug=record.slug,
                keys=sorted(record.extra),
            )
        records.append(record)

    _validate_aliases(records, seen_slugs)
    return build_snapshot(records)


def _validate_aliases(records: list[DocumentRecord], slugs: Mapping[str, str]) -> None:
    owners: dict[str, str] = {}
    for record in records:
        for alias in record.redirect_from:
            if alias in slugs:
                reason = "redirects to itself" if alias == record.slug else "shadows the slug of another record"
                claimants = [record.slug] if alias == record.slug else [alias, record.slug]
                raise DuplicateAlias(alias, claimants, reason=reason)
            if alias in owners:
                raise DuplicateAlias(alias, [owners[alias], record.slug])
            owners[alias] = record.slug


def get_by_slug(snapshot: Snapshot, slug: str) -> DocumentRecord | None:
    """Return the record with ``slug``, or None when there is none.

    When an unvalidated snapshot holds several records under one slug, the
    one whose source path sorts first is returned.
    """
    candidates = snapshot.slugs.get(normalize_path(slug))
    if not candidates:
        return None
    return min(candidates, key=lambda record: record.source_path)


def list_published(snapshot: Snapshot) -> Iterator[DocumentRecord]:
    """Yield published records, newest first.

    Each call returns a fresh iterator over the same order.
    """
    for record in snapshot.records:
        if record.published:
            yield record


def list_visible(snapshot: Snapshot, context: ResolveContext) -> Iterator[DocumentRecord]:
    """Yield records visible in ``context``: all of them in preview."""
    if not context.is_preview:
        yield from list_published(snapshot)
        return
    yield from snapshot.records


def _listing_key(record: DocumentRecord) -> tuple[float, str, str]:
    return (-record.date.timestamp(), record.slug, record.source_path)


class ContentStore:
    """Holds the current snapshot for a content directory.

    Readers capture ``store.snapshot`` once per operation and keep using
    that object; ``reload`` replaces it with a single assignment, so an
    in-flight read never observes a half-built snapshot.
    """

    def __init__(self, content_dir: Path, pattern: str = "**/*.md", encoding: str = "utf-8"):
        self._content_dir = content_dir
        self._pattern = pattern
        self._encoding = encoding
        self._lock = threading.Lock()
        self._snapshot: Snapshot | None = None

    @property
    def content_dir(self) -> Path:
        return self._content_dir

    @property
    def snapshot(self) -> Snapshot:
        """The current snapshot, loading it on first access."""
        current = self._snapshot
        if current is None:
            return self.reload()
        return current

    def reload(self) -> Snapshot:
        """Load a new snapshot and swap it in.

        Raises:
            LoadError: If the sources are invalid; the previous snapshot stays
            OSError: If the content directory cannot be read
        """
        with self._lock:
            log_event(logger, "Loading content", event="load_start", content_dir=str(self._content_dir))
            try:
                sources = read_sources(self._content_dir, self._pattern, self._encoding)
                snapshot = load(sources)
            except (LoadError, OSError) as exc:
                log_event(
                    logger,
                    "Content load failed",
                    level=logging.ERROR,
                    event="load_failed",
                    content_dir=str(self._content_dir),
                    error=str(exc),
                )
                raise
            previous = self._snapshot
            self._snapshot = snapshot
        log_event(
            logger,
            "Content loaded",
            event="load_done",
            records=len(snapshot),
            published=sum(1 for _ in list_published(snapshot)),
            aliases=len(snapshot.aliases),
        )
        if previous is not None:
            log_event(logger, "Snapshot swapped", event="snapshot_swapped", records=len(snapshot))
        return snapshot
