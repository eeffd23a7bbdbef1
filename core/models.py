"""Core domain models for the photo index, navigation and metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class IndexNode:
    """One folder level of the photo index.

    `photos` holds image file names directly in this folder (sorted), and
    `folders` maps child folder names to their nodes in insertion order.
    Nodes are built once per scan and never mutated afterwards.
    """

    photos: list[str] = field(default_factory=list)
    folders: dict[str, IndexNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible index document for this subtree."""
        return {
            "photos": list(self.photos),
            "folders": {name: child.to_dict() for name, child in self.folders.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> IndexNode:
        """Build a node from an index document; malformed parts become empty."""
        if not isinstance(data, dict):
            return cls()
        raw_photos = data.get("photos")
        photos = [str(p) for p in raw_photos] if isinstance(raw_photos, list) else []
        raw_folders = data.get("folders")
        folders: dict[str, IndexNode] = {}
        if isinstance(raw_folders, dict):
            for name, child in raw_folders.items():
                folders[str(name)] = cls.from_dict(child)
        return cls(photos=photos, folders=folders)

    @property
    def is_empty(self) -> bool:
        """True when the folder has neither photos nor sub-folders."""
        return not self.photos and not self.folders


@dataclass(frozen=True)
class PhotoRef:
    """A resolved, addressable photo.

    Attributes:
        path: Slash-separated path from the collection root, starting with "/".
        name: File name component.
        full_path: Containing folder path ("/" for the root).
    """

    path: str
    name: str
    full_path: str


@dataclass
class NavigationState:
    """Mutable state of one viewing session over a fixed photo list."""

    photos: list[PhotoRef]
    current_index: int = 0
    drag_offset: float = 0.0
    is_dragging: bool = False
    is_fullscreen: bool = False
    gesture_start: float | None = None

    @property
    def current_photo(self) -> PhotoRef:
        return self.photos[self.current_index]


@dataclass
class ExifSummary:
    """Display strings projected from embedded capture tags."""

    camera: str | None = None
    lens: str | None = None
    focal: str | None = None
    aperture: str | None = None
    shutter: str | None = None
    iso: str | None = None
    date: str | None = None

    @property
    def is_empty(self) -> bool:
        return not any(
            (self.camera, self.lens, self.focal, self.aperture, self.shutter, self.iso, self.date)
        )


@dataclass
class PhotoMetadata:
    """Display metadata for the current photo; every field is optional."""

    width: int | None = None
    height: int | None = None
    file_size: str | None = None
    dominant_color: str | None = None
    exif: ExifSummary | None = None
