"""Discovery and reading of source documents from a content directory."""

from __future__ import annotations

from pathlib import Path

from ..core.errors import MalformedMetadata
from ..core.types import SourceDocument


def list_source_files(content_dir: Path, pattern: str = "**/*.md") -> list[Path]:
    """List source files under a content directory, sorted by relative path."""
    return sorted(
        (path for path in content_dir.glob(pattern) if path.is_file()),
        key=lambda path: path.relative_to(content_dir).as_posix(),
    )


def read_sources(content_dir: Path, pattern: str = "**/*.md", encoding: str = "utf-8") -> list[SourceDocument]:
    """Read every matching file into a SourceDocument.

    Paths on the returned documents are relative to ``content_dir`` with
    POSIX separators, so slugs do not depend on the host platform.

    Raises:
        FileNotFoundError: If ``content_dir`` does not exist
        NotADirectoryError: If ``content_dir`` is not a directory
        MalformedMetadata: If a file cannot be decoded with ``encoding``
    """
    if not content_dir.exists():
        raise FileNotFoundError(f"Content directory not found: {content_dir}")
    if not content_dir.is_dir():
        raise NotADirectoryError(f"Content path is not a directory: {content_dir}")

    sources: list[SourceDocument] = []
    for path in list_source_files(content_dir, pattern):
        rel_path = path.relative_to(content_dir).as_posix()
        try:
            with open(path, encoding=encoding) as fh:
                text = fh.read()
        except UnicodeDecodeError as exc:
            raise MalformedMetadata(rel_path, None, f"not valid {encoding} text") from exc
        sources.append(SourceDocument(path=rel_path, text=text))
    return sources
