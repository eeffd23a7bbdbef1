"""Filesystem scanning into the hierarchical photo index.

The scanner walks a collection root recursively and produces an `IndexNode`
tree, and reads/writes that tree as the JSON index document
`{"photos": [...], "folders": {name: {...}}}`.

Symbolic-link cycles are not detected; a collection containing one recurses
until the filesystem reports an error for the deepest directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from loguru import logger

from core.models import IndexNode

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"})


def is_image_file(name: str) -> bool:
    """True if `name` has an allow-listed image extension (case-insensitive)."""
    return os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS


class DirectoryScanner:
    """Builds an `IndexNode` tree from a nested folder layout."""

    def scan(self, root: str | Path) -> IndexNode:
        """Scan `root` recursively.

        A missing root yields an empty node. A directory that cannot be read
        degrades to an empty node for that subtree only.
        """
        root_path = Path(root)
        if not root_path.exists():
            logger.info("Photo root does not exist, returning empty index: {}", root_path)
            return IndexNode()
        node = self._scan_dir(root_path)
        logger.info(
            "Scanned {}: {} photos, {} folders at top level",
            root_path,
            len(node.photos),
            len(node.folders),
        )
        return node

    def _scan_dir(self, directory: Path) -> IndexNode:
        photos: list[str] = []
        folders: dict[str, IndexNode] = {}
        try:
            # Sorted so folder insertion order does not depend on the filesystem.
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
            for entry in entries:
                if entry.is_dir():
                    folders[entry.name] = self._scan_dir(Path(entry.path))
                elif entry.is_file() and is_image_file(entry.name):
                    photos.append(entry.name)
        except OSError as ex:
            logger.warning("Error reading directory {}: {}", directory, ex)
            return IndexNode()

        photos.sort()
        return IndexNode(photos=photos, folders=folders)


def write_index_document(node: IndexNode, path: str | Path) -> None:
    """Write `node` as a JSON index document to `path`."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(node.to_dict(), f, ensure_ascii=False, indent=2)
    logger.info("Wrote index document: {}", out)


def read_index_document(path: str | Path) -> IndexNode:
    """Read a JSON index document; missing or invalid files yield an empty index."""
    src = Path(path)
    try:
        with src.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as ex:
        logger.error("Error loading photo structure from {}: {}", src, ex)
        return IndexNode()
    return IndexNode.from_dict(data)
