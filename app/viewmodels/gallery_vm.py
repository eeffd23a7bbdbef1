"""ViewModel for the gallery: the photo index and the selected folder."""

from __future__ import annotations

from pathlib import Path
import random

from loguru import logger

from core.models import IndexNode, PhotoRef
from core.services.index_service import (
    flatten_photos,
    folder_display_name,
    folder_names,
    photos_in_folder,
    random_photo,
)
from infrastructure.scanner import DirectoryScanner, read_index_document


class GalleryVM:
    """Main gallery view-model.

    Holds the index produced by a scan (or read from an index document) and
    derives the listings shown by the gallery window.
    """

    def __init__(
        self,
        scanner: DirectoryScanner | None = None,
        title: str = "Photo Gallery",
        rng: random.Random | None = None,
    ) -> None:
        self._scanner = scanner or DirectoryScanner()
        self._rng = rng
        self.title = title
        self.structure: IndexNode = IndexNode()
        self.all_photos: list[PhotoRef] = []
        self.current_folder: str | None = None
        self.folder_photos: list[PhotoRef] = []
        self.featured_photo: PhotoRef | None = None

    def load_root(self, root: str | Path) -> None:
        """Rebuild the index by scanning `root`."""
        self._set_structure(self._scanner.scan(root))

    def load_document(self, path: str | Path) -> None:
        """Load the index from a JSON index document."""
        self._set_structure(read_index_document(path))

    def _set_structure(self, structure: IndexNode) -> None:
        self.structure = structure
        self.all_photos = flatten_photos(structure)
        # Picked once per load so returning home shows the same photo.
        self.featured_photo = random_photo(self.all_photos, self._rng)
        self._refresh_folder()
        logger.info("Loaded photo index with {} photos", len(self.all_photos))

    def navigate(self, folder: str | None) -> None:
        """Select `folder` (e.g. "/Fauna"); None or "" returns home."""
        self.current_folder = folder or None
        self._refresh_folder()

    def home(self) -> None:
        self.navigate(None)

    def _refresh_folder(self) -> None:
        if self.current_folder:
            self.folder_photos = photos_in_folder(self.structure, self.current_folder)
        else:
            self.folder_photos = []

    def folder_names(self) -> list[str]:
        return folder_names(self.structure)

    @property
    def folder_title(self) -> str:
        return folder_display_name(self.current_folder)

    def visible_photos(self) -> list[PhotoRef]:
        """Folder listing when a folder is selected, otherwise every photo."""
        return self.folder_photos if self.current_folder else self.all_photos
