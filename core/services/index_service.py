"""Listings derived from an `IndexNode` tree.

All functions here are pure: they never mutate the tree and return fully
materialized lists, so calling them twice on the same tree gives equal results.
"""

from __future__ import annotations

import random

from core.models import IndexNode, PhotoRef

ROOT_FOLDER = "/"
DEFAULT_BASE_URL = "/photo-gallery/"


def flatten_photos(root: IndexNode, base_path: str = "") -> list[PhotoRef]:
    """Return every photo in the tree in depth-first pre-order.

    A node's own photos are emitted before its sub-folders, and sub-folders are
    visited in the mapping's order (scan order, not re-sorted).
    """
    photos: list[PhotoRef] = []

    def _traverse(node: IndexNode, current: str) -> None:
        for name in node.photos:
            segment = f"{current}/{name}" if current else name
            photos.append(PhotoRef(path=f"/{segment}", name=name, full_path=_folder_path(current)))
        for folder_name, child in node.folders.items():
            _traverse(child, f"{current}/{folder_name}" if current else folder_name)

    _traverse(root, base_path.strip("/"))
    return photos


def photos_in_folder(root: IndexNode, folder_path: str | None = "") -> list[PhotoRef]:
    """Return the photos stored directly in `folder_path` (no recursion).

    An empty path or "/" lists the root level. A path naming a folder that does
    not exist yields an empty list. Empty segments ("a//b") are ignored.
    """
    parts = _segments(folder_path)
    if not parts:
        return [PhotoRef(path=f"/{name}", name=name, full_path=ROOT_FOLDER) for name in root.photos]

    node = _find_node(root, parts)
    if node is None:
        return []

    full_path = _folder_path("/".join(parts))
    prefix = f"{full_path}/"
    return [PhotoRef(path=f"{prefix}{name}", name=name, full_path=full_path) for name in node.photos]


def folder_names(root: IndexNode) -> list[str]:
    """Top-level folder names in index order."""
    return list(root.folders)


def folder_display_name(folder_path: str | None) -> str:
    """Last non-empty segment of `folder_path`, or "Photos" for the root."""
    parts = _segments(folder_path)
    return parts[-1] if parts else "Photos"


def random_photo(photos: list[PhotoRef], rng: random.Random | None = None) -> PhotoRef | None:
    """Pick one photo at random; None when the list is empty."""
    if not photos:
        return None
    chooser = rng or random
    return photos[chooser.randrange(len(photos))]


def photo_url(path: str, base: str = DEFAULT_BASE_URL) -> str:
    """Address of a photo resource: the base segment, "photos", then `path`."""
    if not base.endswith("/"):
        base = f"{base}/"
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}photos{path}"


def _segments(folder_path: str | None) -> list[str]:
    return [p for p in (folder_path or "").split("/") if p]


def _find_node(root: IndexNode, parts: list[str]) -> IndexNode | None:
    current = root
    for part in parts:
        child = current.folders.get(part)
        if child is None:
            return None
        current = child
    return current


def _folder_path(relative: str) -> str:
    # "" -> "/", "a/b" -> "/a/b"
    return f"/{relative}" if relative else ROOT_FOLDER
