"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Where source documents live and how they are read
- ResolverConfig: Preview mode and redirect following
- OutputConfig: Index export file names
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
import os
from typing import Any

import yaml

from .core.errors import ConfigError


PREVIEW_ENV = "CONTENT_STORE_PREVIEW"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class SourceConfig:
    """Configuration for source document discovery.

    Attributes:
        content_dir: Root directory holding the source documents
        pattern: Glob pattern (relative to content_dir) selecting sources
        encoding: Text encoding of the source files
    """

    content_dir: str = "content"
    pattern: str = "**/*.md"
    encoding: str = "utf-8"


@dataclass
class ResolverConfig:
    """Configuration for path resolution.

    Attributes:
        preview: Serve unpublished records (authoring/preview builds)
        max_redirect_hops: Upper bound on redirects followed by ``follow``
    """

    preview: bool = False
    max_redirect_hops: int = 5


@dataclass
class OutputConfig:
    """Configuration for index export.

    Attributes:
        index_filename: Name of the published-posts index file
        redirects_filename: Name of the alias redirect map file
    """

    index_filename: str = "posts.json"
    redirects_filename: str = "redirects.json"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "content_store.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        elif value is not None:
            raise ConfigError(f"Config section '{key}' must be a mapping")
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "source": {
            "content_dir": cfg.source.content_dir,
            "pattern": cfg.source.pattern,
            "encoding": cfg.source.encoding,
        },
        "resolver": {
            "preview": cfg.resolver.preview,
            "max_redirect_hops": cfg.resolver.max_redirect_hops,
        },
        "output": {
            "index_filename": cfg.output.index_filename,
            "redirects_filename": cfg.output.redirects_filename,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        cfg = AppConfig(
            source=SourceConfig(**data["source"]),
            resolver=ResolverConfig(**data["resolver"]),
            output=OutputConfig(**data["output"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except TypeError as exc:
        # Unknown keys inside a section surface as unexpected keyword arguments.
        raise ConfigError(f"Unknown configuration key: {exc}") from exc

    _check_types(cfg)
    if cfg.resolver.max_redirect_hops < 0:
        raise ConfigError("resolver.max_redirect_hops must be >= 0")
    if cfg.logging.format not in {"jsonl", "plain"}:
        raise ConfigError("logging.format must be 'jsonl' or 'plain'")
    try:
        codecs.lookup(cfg.source.encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown source.encoding: {cfg.source.encoding}") from exc
    return cfg


def _check_types(cfg: AppConfig) -> None:
    """Reject YAML values of the wrong type (a quoted "false" is truthy)."""
    expected = [
        ("source.content_dir", cfg.source.content_dir, str),
        ("source.pattern", cfg.source.pattern, str),
        ("source.encoding", cfg.source.encoding, str),
        ("resolver.preview", cfg.resolver.preview, bool),
        ("resolver.max_redirect_hops", cfg.resolver.max_redirect_hops, int),
        ("output.index_filename", cfg.output.index_filename, str),
        ("output.redirects_filename", cfg.output.redirects_filename, str),
        ("logging.level", cfg.logging.level, str),
        ("logging.console", cfg.logging.console, bool),
        ("logging.file", cfg.logging.file, bool),
        ("logging.format", cfg.logging.format, str),
        ("logging.filename", cfg.logging.filename, str),
    ]
    for name, value, kind in expected:
        # bool is an int subclass; a hop count of `true` is still a mistake.
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise ConfigError(f"{name} must be of type {kind.__name__}, got {value!r}")


def get_preview_enabled(cfg: ResolverConfig) -> bool:
    """Get preview mode from environment variable or config."""
    env_value = os.getenv(PREVIEW_ENV)
    if env_value is not None and env_value.strip():
        return env_value.strip().lower() in _TRUTHY
    return cfg.preview
