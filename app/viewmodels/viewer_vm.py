"""ViewModel for one single-photo viewing session.

Wraps a `NavigationController` and tracks which metadata request is current.
Metadata runs are never cancelled; a result whose token no longer matches the
current request is discarded when it arrives.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import PhotoMetadata, PhotoRef
from core.services.navigation import FullscreenSurface, NavigationController
from infrastructure.metadata_service import DEFAULT_ACCENT_COLOR

# (token, photo) -> None; dispatches a background metadata run.
MetadataRequester = Callable[[str, PhotoRef], None]


class ViewerVM:
    """Navigation plus eventually-consistent metadata for the current photo."""

    def __init__(
        self,
        photos: list[PhotoRef],
        initial_index: int = 0,
        request_metadata: MetadataRequester | None = None,
        surface: FullscreenSurface | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.controller = NavigationController(
            photos, initial_index=initial_index, surface=surface, on_close=on_close
        )
        self._request_metadata = request_metadata
        self._generation = 0
        self._current_token: str | None = None
        self.metadata: PhotoMetadata | None = None
        self.accent_color: str = DEFAULT_ACCENT_COLOR
        self._listeners: list[Callable[[], None]] = []
        self.controller.add_index_listener(self._on_index_changed)

    @property
    def current_photo(self) -> PhotoRef:
        return self.controller.current_photo

    @property
    def current_token(self) -> str | None:
        return self._current_token

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register `callback()`, fired after the index or metadata changes."""
        self._listeners.append(callback)

    def start(self) -> str:
        """Kick off metadata derivation for the initial photo."""
        return self._refresh_metadata()

    def _on_index_changed(self, _index: int) -> None:
        self._refresh_metadata()

    def _refresh_metadata(self) -> str:
        self._generation += 1
        photo = self.controller.current_photo
        token = f"meta|{self._generation}|{photo.path}"
        self._current_token = token
        self.metadata = None
        self._notify()
        if self._request_metadata is not None:
            self._request_metadata(token, photo)
        return token

    def on_metadata_loaded(self, token: str, metadata: PhotoMetadata | None) -> bool:
        """Publish `metadata` if `token` is still current; return whether it was."""
        if token != self._current_token:
            logger.debug("Discarding stale metadata result: {}", token)
            return False
        if metadata is None:
            return False
        self.metadata = metadata
        if metadata.dominant_color:
            self.accent_color = metadata.dominant_color
        self._notify()
        return True

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
