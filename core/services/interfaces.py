"""Core service interfaces shared across infrastructure and UI layers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import BinaryIO

from core.models import PhotoRef


class IPhotoSource:
    """Interface for reading photo resources addressed by `PhotoRef.path`."""

    def headers(self, ref: PhotoRef) -> Mapping[str, str]:
        """Return metadata-only headers for the resource (e.g. Content-Length)."""
        raise NotImplementedError

    def open(self, ref: PhotoRef) -> BinaryIO:
        """Open the resource for binary reading. Caller closes the stream."""
        raise NotImplementedError
