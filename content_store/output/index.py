"""
Export of a snapshot as static JSON index files.

Writes two files into an output directory:
- the posts index: visible records, newest first, with their metadata
- the redirect map: ``"/alias/" -> "/slug/"`` for every alias whose target
  is visible in the given context

Downstream static-site tooling consumes these files; the body text is not
exported.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import OutputConfig
from ..core.resolver import DEFAULT_CONTEXT
from ..core.store import Snapshot, get_by_slug, list_visible
from ..core.types import DocumentRecord, ResolveContext, slug_url
from ..utils.logging import get_logger, log_event


logger = get_logger("output")


def build_posts_index(snapshot: Snapshot, context: ResolveContext = DEFAULT_CONTEXT) -> list[dict[str, Any]]:
    """Return index entries for the records visible in ``context``."""
    return [_record_entry(record) for record in list_visible(snapshot, context)]


def build_redirect_map(snapshot: Snapshot, context: ResolveContext = DEFAULT_CONTEXT) -> dict[str, str]:
    """Return the alias redirect map, skipping aliases of hidden records."""
    redirects: dict[str, str] = {}
    for alias in sorted(snapshot.aliases):
        target = get_by_slug(snapshot, snapshot.aliases[alias][0])
        if target is None:
            continue
        if not (context.is_preview or target.published):
            continue
        redirects[slug_url(alias)] = target.url
    return redirects


def write_index(
    snapshot: Snapshot,
    output_dir: Path,
    cfg: OutputConfig,
    context: ResolveContext = DEFAULT_CONTEXT,
) -> tuple[Path, Path]:
    """Write the posts index and redirect map into ``output_dir``.

    Returns:
        Paths of the posts index file and the redirect map file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    posts = build_posts_index(snapshot, context)
    redirects = build_redirect_map(snapshot, context)

    index_path = output_dir / cfg.index_filename
    redirects_path = output_dir / cfg.redirects_filename
    _write_json(index_path, posts)
    _write_json(redirects_path, redirects)

    log_event(
        logger,
        "Index written",
        event="index_written",
        index=str(index_path),
        redirects=str(redirects_path),
        posts=len(posts),
        aliases=len(redirects),
        preview=context.is_preview,
    )
    return index_path, redirects_path


def _record_entry(record: DocumentRecord) -> dict[str, Any]:
    return {
        "slug": record.slug,
        "url": record.url,
        "title": record.title,
        "description": record.description,
        "date": record.date.isoformat(),
        "categories": sorted(record.categories),
        "canonical_link": record.canonical_link,
        "published": record.published,
    }


def _write_json(path: Path, payload: Any) -> None:
    path.write_text(f"{json.dumps(payload, ensure_ascii=False, indent=2)}\n", encoding="utf-8")
