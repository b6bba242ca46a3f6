"""
Front-matter parser for source documents.

A source document is a YAML block fenced by ``---`` lines followed by the
free-form body:

    ---
    title: Testing reducers
    date: 2020-01-01
    categories: [testing, redux]
    published: true
    redirect_from:
      - /2020/01/testing-reducers.html
    ---
    Body text...

Parsing is strict: required fields that are missing, or fields with the
wrong type, raise ``MalformedMetadata`` instead of being defaulted.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from pathlib import PurePosixPath
import re
from types import MappingProxyType
from typing import Any
from urllib.parse import urlparse

import yaml

from ..core.errors import MalformedMetadata
from ..core.types import DocumentRecord, SourceDocument, normalize_path


FENCE_RE = re.compile(r"^---[ \t]*$")
KNOWN_KEYS = frozenset(
    {
        "title",
        "description",
        "date",
        "categories",
        "published",
        "canonical_link",
        "redirect_from",
    }
)
BUNDLE_INDEX_NAMES = ("index", "_index")


def split_front_matter(text: str) -> tuple[str, str] | None:
    """Split raw text into (front-matter, body).

    Returns:
        A tuple of the YAML block and the body, or None if the text does not
        start with a ``---`` fence or the closing fence is missing.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines or not FENCE_RE.match(lines[0].rstrip("\r\n")):
        return None
    for idx in range(1, len(lines)):
        if FENCE_RE.match(lines[idx].rstrip("\r\n")):
            meta = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            return meta, body
    return None


def slug_from_path(path: str) -> str:
    """Derive a slug from a source path relative to the content root.

    The suffix is removed and a trailing ``index``/``_index`` component
    (page bundle) is dropped.

    Examples:
        >>> slug_from_path("posts/testing-reducers.md")
        'posts/testing-reducers'
        >>> slug_from_path("posts/sagas/index.md")
        'posts/sagas'
    """
    pure = PurePosixPath(path.replace("\\", "/"))
    parts = list(pure.with_suffix("").parts) if pure.suffix else list(pure.parts)
    if len(parts) > 1 and parts[-1] in BUNDLE_INDEX_NAMES:
        parts.pop()
    return normalize_path("/".join(parts))


def parse_source(source: SourceDocument) -> DocumentRecord:
    """Parse one source document into a validated DocumentRecord."""
    split = split_front_matter(source.text)
    if split is None:
        raise MalformedMetadata(source.path, None, "missing '---' front-matter block")
    meta_text, body = split

    try:
        meta = yaml.safe_load(meta_text)
    except (yaml.YAMLError, ValueError) as exc:
        # Out-of-range timestamps (2020-13-01) fail inside the YAML constructor.
        raise MalformedMetadata(source.path, None, f"invalid YAML: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MalformedMetadata(source.path, None, "front-matter must be a mapping")

    slug = slug_from_path(source.path)
    if not slug:
        raise MalformedMetadata(source.path, None, "cannot derive a slug from the path")

    extra = {key: value for key, value in meta.items() if key not in KNOWN_KEYS}

    return DocumentRecord(
        slug=slug,
        title=_require_title(source.path, meta),
        date=_require_date(source.path, meta),
        description=_optional_str(source.path, meta, "description") or "",
        categories=_categories(source.path, meta),
        published=_published(source.path, meta),
        canonical_link=_canonical_link(source.path, meta),
        redirect_from=_redirect_from(source.path, meta),
        body=body,
        source_path=source.path,
        extra=MappingProxyType({str(key): _freeze(value) for key, value in extra.items()}),
    )


def parse_date(value: Any) -> datetime:
    """Coerce a YAML date/datetime/ISO 8601 string into an aware datetime.

    Naive values are interpreted as UTC; bare dates become midnight UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = f"{raw[:-1]}+00:00"
        parsed = datetime.fromisoformat(raw)
    else:
        raise ValueError(f"unsupported date value {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _freeze(value: Any) -> Any:
    """Make nested YAML containers read-only (lists to tuples, maps to proxies)."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, set):
        return frozenset(value)
    return value


def _require_title(path: str, meta: dict[str, Any]) -> str:
    if "title" not in meta or meta["title"] is None:
        raise MalformedMetadata(path, "title", "required field is missing")
    title = meta["title"]
    # Numeric titles are legal YAML scalars; keep them as text.
    if isinstance(title, (int, float)) and not isinstance(title, bool):
        title = str(title)
    if not isinstance(title, str) or not title.strip():
        raise MalformedMetadata(path, "title", "must be a non-empty string")
    return title.strip()


def _require_date(path: str, meta: dict[str, Any]) -> datetime:
    if "date" not in meta or meta["date"] is None:
        raise MalformedMetadata(path, "date", "required field is missing")
    try:
        return parse_date(meta["date"])
    except ValueError as exc:
        raise MalformedMetadata(path, "date", f"cannot parse date: {exc}") from exc


def _optional_str(path: str, meta: dict[str, Any], key: str) -> str | None:
    value = meta.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedMetadata(path, key, "must be a string")
    return value


def _categories(path: str, meta: dict[str, Any]) -> frozenset[str]:
    value = meta.get("categories")
    if value is None:
        return frozenset()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedMetadata(path, "categories", "must be a list of strings")
    return frozenset(item.strip() for item in value if item.strip())


def _published(path: str, meta: dict[str, Any]) -> bool:
    value = meta.get("published", True)
    if not isinstance(value, bool):
        raise MalformedMetadata(path, "published", "must be a boolean")
    return value


def _canonical_link(path: str, meta: dict[str, Any]) -> str | None:
    value = _optional_str(path, meta, "canonical_link")
    if value is None or not value.strip():
        return None
    parsed = urlparse(value.strip())
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise MalformedMetadata(path, "canonical_link", "must be an absolute http(s) URL")
    return value.strip()


def _redirect_from(path: str, meta: dict[str, Any]) -> tuple[str, ...]:
    value = meta.get("redirect_from")
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedMetadata(path, "redirect_from", "must be a list of strings")

    aliases: list[str] = []
    for item in value:
        alias = normalize_path(item)
        if not alias:
            raise MalformedMetadata(path, "redirect_from", f"alias {item!r} is empty after normalisation")
        if alias not in aliases:
            aliases.append(alias)
    return tuple(aliases)
