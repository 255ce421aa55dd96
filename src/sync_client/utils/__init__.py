"""Utility helpers: paths, formatting and logging."""

from .formatting import format_bytes, format_duration
from .path_utils import breadcrumbs, join_path, normalize_path, parent_of

__all__ = [
    "breadcrumbs",
    "format_bytes",
    "format_duration",
    "join_path",
    "normalize_path",
    "parent_of",
]
