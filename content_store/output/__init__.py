"""Static index export for downstream site tooling."""

from .index import build_posts_index, build_redirect_map, write_index

__all__ = [
    "build_posts_index",
    "build_redirect_map",
    "write_index",
]
