"""
Content Store - front-matter document snapshots and publication routing.

This package loads a directory of blog posts (YAML front-matter plus body)
into immutable, validated snapshots and answers the queries a serving
layer needs: lookup by slug, listing of published posts, and resolution
of request paths including legacy redirect aliases.

Main entry point for operators is the CLI via the `content-store` command.

Example:
    $ content-store check -d content/
    $ content-store resolve /2019/01/old-post.html -d content/
"""

__all__ = [
    "__version__",
    "ContentStore",
    "ResolveContext",
    "get_by_slug",
    "list_published",
    "load",
    "resolve",
]
__version__ = "0.1.0"

from .core import ContentStore, ResolveContext, get_by_slug, list_published, load, resolve
