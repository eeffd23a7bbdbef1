from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from PySide6.QtGui import QImageReader
from loguru import logger

from core.models import PhotoRef
from infrastructure.metadata_service import MetadataService
from infrastructure.photo_source import LocalPhotoSource


class _PhotoTask(QRunnable):
    """QRunnable decoding the full photo for display.

    Emits `receiver.photoLoaded(token, path, image)` upon completion. The
    receiver is expected to own a Qt `Signal(str, str, object)` named
    `photoLoaded`.
    """

    def __init__(
        self, *, ref: PhotoRef, source: LocalPhotoSource, receiver: QObject, token: str
    ) -> None:
        super().__init__()
        self._ref = ref
        self._source = source
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        img: Any = None
        try:
            reader = QImageReader(str(self._source.resolve(self._ref)))
            reader.setAutoTransform(True)
            img = reader.read()
            if img is None or img.isNull():
                logger.warning("Qt read failed for {}: {}", self._ref.path, reader.errorString())
                img = None
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Photo task failed: {}", ex)
            img = None
        try:
            self._receiver.photoLoaded.emit(self._token, self._ref.path, img)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Photo result dropped: {}", ex)


class _MetadataTask(QRunnable):
    """QRunnable running the metadata pipeline for one photo.

    Emits `receiver.metadataLoaded(token, path, metadata)`; `metadata` is a
    `PhotoMetadata` or None when the whole run failed.
    """

    def __init__(
        self, *, ref: PhotoRef, service: MetadataService, receiver: QObject, token: str
    ) -> None:
        super().__init__()
        self._ref = ref
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            meta = self._service.derive(self._ref)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Error fetching photo metadata: {}", ex)
            meta = None
        try:
            self._receiver.metadataLoaded.emit(self._token, self._ref.path, meta)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Metadata result dropped: {}", ex)


class ImageTaskRunner:
    """Dispatches photo and metadata tasks to the global thread pool.

    Tokens identify the request; receivers compare them against the request
    they consider current and drop anything else:
    - Photo: "photo|{generation}|{path}"
    - Metadata: supplied by the caller (see `ViewerVM`)
    """

    def __init__(
        self, *, source: LocalPhotoSource, service: MetadataService, receiver: QObject
    ) -> None:
        self._source = source
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()
        self._photo_generation = 0

    def request_photo(self, ref: PhotoRef) -> str:
        """Request a decoded photo for display. Returns the token string."""
        self._photo_generation += 1
        token = f"photo|{self._photo_generation}|{ref.path}"
        task = _PhotoTask(ref=ref, source=self._source, receiver=self._receiver, token=token)
        self._pool.start(task)
        return token

    def request_metadata(self, token: str, ref: PhotoRef) -> None:
        """Run the metadata pipeline for `ref`, reporting under `token`."""
        task = _MetadataTask(ref=ref, service=self._service, receiver=self._receiver, token=token)
        self._pool.start(task)
