"""
Publication resolver: decide what to serve for a requested path.

Resolution order:
1. The path is a record's slug: serve it when published or in preview,
   otherwise NotFound.
2. The path is a legacy alias: permanent Redirect to the owning slug. The
   owner's published state is not checked here; it applies when the
   redirect target itself is resolved.
3. Anything else: NotFound.

Ambiguous claims on one path can only come from snapshots that skipped
load-time validation. They are logged as warnings and resolved
deterministically (smallest slug, then source path) instead of failing.
"""

from __future__ import annotations

import logging

from .store import Snapshot
from .types import (
    DocumentRecord,
    NotFound,
    Redirect,
    ResolveContext,
    ResolvedContent,
    Resolution,
    normalize_path,
)
from ..utils.logging import get_logger, log_event


logger = get_logger("resolver")

DEFAULT_CONTEXT = ResolveContext()


def resolve(snapshot: Snapshot, path: str, context: ResolveContext = DEFAULT_CONTEXT) -> Resolution:
    """Resolve a request path against a snapshot.

    Args:
        snapshot: The snapshot captured for this request
        path: Requested URL path; normalised before lookup
        context: Request context (preview or production)

    Returns:
        ResolvedContent, Redirect or NotFound
    """
    key = normalize_path(path)

    slug_claims = snapshot.slugs.get(key, ())
    alias_claims = snapshot.aliases.get(key, ())

    if slug_claims:
        record = _pick_record(key, slug_claims, alias_claims)
        if context.is_preview or record.published:
            return ResolvedContent(record)
        log_event(logger, "Unpublished record hidden", level=logging.DEBUG, event="route_hidden", slug=record.slug)
        return NotFound(path)

    if alias_claims:
        target = alias_claims[0]
        if len(alias_claims) > 1:
            log_event(
                logger,
                "Ambiguous alias, using smallest slug",
                level=logging.WARNING,
                event="route_ambiguous",
                route=key,
                candidates=list(alias_claims),
                chosen=target,
            )
        return Redirect(target=target, permanent=True)

    return NotFound(path)


def follow(
    snapshot: Snapshot,
    path: str,
    context: ResolveContext = DEFAULT_CONTEXT,
    max_hops: int = 5,
) -> ResolvedContent | NotFound:
    """Resolve ``path`` and follow redirects to the content they point at.

    Visibility is applied to the final target, so a redirect to an
    unpublished record ends in NotFound outside preview. Redirect loops and
    chains longer than ``max_hops`` also end in NotFound.
    """
    current = path
    seen: set[str] = set()
    for _ in range(max_hops + 1):
        outcome = resolve(snapshot, current, context)
        if isinstance(outcome, NotFound):
            return NotFound(path)
        if not isinstance(outcome, Redirect):
            return outcome
        seen.add(normalize_path(current))
        current = outcome.target
        if normalize_path(current) in seen:
            break

    log_event(
        logger,
        "Redirect limit reached",
        level=logging.WARNING,
        event="redirect_limit",
        route=normalize_path(path),
        max_hops=max_hops,
    )
    return NotFound(path)


def _pick_record(
    key: str,
    slug_claims: tuple[DocumentRecord, ...],
    alias_claims: tuple[str, ...],
) -> DocumentRecord:
    chosen = min(slug_claims, key=lambda record: (record.slug, record.source_path))
    if len(slug_claims) > 1 or alias_claims:
        candidates = sorted({record.source_path for record in slug_claims})
        log_event(
            logger,
            "Ambiguous route, slug match wins",
            level=logging.WARNING,
            event="route_ambiguous",
            route=key,
            candidates=candidates + [f"alias:{slug}" for slug in alias_claims],
            chosen=chosen.source_path,
        )
    return chosen
