"""Local filesystem access to photos addressed by their index path."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from core.models import PhotoRef
from core.services.index_service import DEFAULT_BASE_URL, photo_url
from core.services.interfaces import IPhotoSource


class LocalPhotoSource(IPhotoSource):
    """Serve photo resources from a collection root on disk.

    A `PhotoRef.path` resolves to a resource URL through `photo_url`; this
    source maps that URL back to a file under `root`.
    """

    def __init__(self, root: str | Path, base_url: str = DEFAULT_BASE_URL) -> None:
        self._root = Path(root).resolve()
        self._base_url = base_url

    @property
    def root(self) -> Path:
        return self._root

    def url_for(self, ref: PhotoRef) -> str:
        """Resource URL of `ref` (base segment + "photos" + path)."""
        return photo_url(ref.path, self._base_url)

    def resolve(self, ref: PhotoRef) -> Path:
        """Map `ref` to a file path under the root.

        Raises:
            FileNotFoundError: If the path escapes the collection root.
        """
        url = self.url_for(ref)
        prefix = photo_url("/", self._base_url)
        relative = url[len(prefix):] if url.startswith(prefix) else ref.path.lstrip("/")
        candidate = (self._root / relative).resolve()
        if candidate != self._root and self._root not in candidate.parents:
            raise FileNotFoundError(f"Photo path outside collection root: {ref.path}")
        return candidate

    def headers(self, ref: PhotoRef) -> Mapping[str, str]:
        st = self.resolve(ref).stat()
        return {"Content-Length": str(st.st_size)}

    def open(self, ref: PhotoRef) -> BinaryIO:
        return self.resolve(ref).open("rb")
