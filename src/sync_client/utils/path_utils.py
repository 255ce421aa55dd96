"""Helpers for slash-separated backend paths (remote and local trees)."""

from typing import List, Tuple

SEPARATOR = "/"
ROOT = "/"
ROOT_LABEL = "Root"


def normalize_path(path: str) -> str:
    """Collapse repeated separators, force a leading one, drop a trailing one."""
    segments = [part for part in (path or "").split(SEPARATOR) if part]
    if not segments:
        return ROOT
    return SEPARATOR + SEPARATOR.join(segments)


def parent_of(path: str) -> str:
    """
    Return the parent directory of ``path``.

    ``/`` and the empty string map to ``/``, and ``/`` is a fixed point, so
    repeated application always terminates at the root.
    """
    if not path or path == ROOT:
        return ROOT

    if len(path) > 1 and path.endswith(SEPARATOR):
        path = path[:-1]

    index = path.rfind(SEPARATOR)
    if index <= 0:
        return ROOT
    return path[:index]


def breadcrumbs(path: str) -> List[Tuple[str, str]]:
    """
    Split ``path`` into navigable ``(label, path)`` pairs.

    The root crumb always comes first; every following crumb carries the
    cumulative path up to and including its segment.
    """
    crumbs = [(ROOT_LABEL, ROOT)]
    cumulative = ""
    for part in (path or "").split(SEPARATOR):
        if not part:
            continue
        cumulative += SEPARATOR + part
        crumbs.append((part, cumulative))
    return crumbs


def join_path(parent: str, name: str) -> str:
    """Build a child path the same way the backend builds entry paths."""
    return f"{(parent or '').rstrip(SEPARATOR)}{SEPARATOR}{name.strip(SEPARATOR)}"
