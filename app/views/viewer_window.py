"""Single-photo viewer window.

Translates Qt input into `NavigationController` calls and renders the state
and metadata held by `ViewerVM`. No navigation rules live here.
"""

from __future__ import annotations

import html
from typing import Any

from PySide6.QtCore import QEvent, QRectF, Qt, Signal
from PySide6.QtGui import QCloseEvent, QKeyEvent, QPainter, QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.viewer_vm import ViewerVM
from app.views.constants import KEY_NAMES, MAX_NAV_DOTS, VIEWER_MIN_SIZE
from app.views.image_tasks import ImageTaskRunner
from core.models import PhotoMetadata, PhotoRef
from core.services.navigation import FULLSCREEN_KEYS, NavAction
from infrastructure.metadata_service import MetadataService
from infrastructure.photo_source import LocalPhotoSource


class PhotoCanvas(QWidget):
    """Paints the current photo fitted to the widget, shifted by the drag offset."""

    pressed = Signal(float, float)  # x relative to photo, displayed photo width
    dragStarted = Signal(float)
    dragMoved = Signal(float)
    dragEnded = Signal(float)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setMinimumSize(200, 200)
        self._pixmap: QPixmap | None = None
        self._offset = 0.0
        self._placeholder = ""

    def set_pixmap(self, pixmap: QPixmap | None) -> None:
        self._pixmap = pixmap
        self._placeholder = ""
        self.update()

    def set_placeholder(self, text: str) -> None:
        self._pixmap = None
        self._placeholder = text
        self.update()

    def set_offset(self, offset: float) -> None:
        if offset != self._offset:
            self._offset = offset
            self.update()

    def photo_rect(self) -> QRectF:
        """Displayed photo rectangle, before the drag offset is applied."""
        if self._pixmap is None or self._pixmap.isNull():
            return QRectF(self.rect())
        size = self._pixmap.size().scaled(self.size(), Qt.KeepAspectRatio)
        x = (self.width() - size.width()) / 2
        y = (self.height() - size.height()) / 2
        return QRectF(x, y, size.width(), size.height())

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
        if self._pixmap is not None and not self._pixmap.isNull():
            painter.drawPixmap(self.photo_rect().translated(self._offset, 0).toRect(), self._pixmap)
        elif self._placeholder:
            painter.setPen(Qt.gray)
            painter.drawText(self.rect(), Qt.AlignCenter, self._placeholder)
        painter.end()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            rect = self.photo_rect()
            self.pressed.emit(event.position().x() - rect.left(), rect.width())
        super().mousePressEvent(event)

    def event(self, event: QEvent) -> bool:  # type: ignore[override]
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd):
            points = event.points()
            if points:
                x = points[0].position().x()
                if etype == QEvent.TouchBegin:
                    self.dragStarted.emit(x)
                elif etype == QEvent.TouchUpdate:
                    self.dragMoved.emit(x)
                else:
                    self.dragEnded.emit(x)
            event.accept()
            return True
        return super().event(event)


class PhotoViewerWindow(QWidget):
    """Fullscreen-capable viewer over an ordered photo list."""

    photoLoaded = Signal(str, str, object)  # token, path, QImage | None
    metadataLoaded = Signal(str, str, object)  # token, path, PhotoMetadata | None
    closed = Signal()

    def __init__(
        self,
        photos: list[PhotoRef],
        initial_index: int,
        source: LocalPhotoSource,
        settings: Any | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._swipe_enabled = True
        self._click_enabled = True
        if settings is not None:
            self._swipe_enabled = settings.get_bool("enableSwipe", True)
            self._click_enabled = settings.get_bool("enableClickNavigation", True)

        self._runner = ImageTaskRunner(
            source=source, service=MetadataService(source), receiver=self
        )
        self._photo_token: str | None = None
        self._shown_path: str | None = None
        self._dots: list[QPushButton] = []

        self.vm = ViewerVM(
            photos,
            initial_index=initial_index,
            request_metadata=self._runner.request_metadata,
            surface=self,
            on_close=self.close,
        )

        self._setup_ui()
        self.photoLoaded.connect(self._on_photo_loaded)
        self.metadataLoaded.connect(self._on_metadata_loaded)
        self.vm.add_listener(self._render)
        self.vm.start()

    # FullscreenSurface
    def is_fullscreen(self) -> bool:
        return self.isFullScreen()

    def request_fullscreen(self) -> None:
        self.showFullScreen()

    def exit_fullscreen(self) -> None:
        self.showNormal()

    # UI
    def _setup_ui(self) -> None:
        self.setWindowTitle("Photo Viewer")
        self.setMinimumSize(*VIEWER_MIN_SIZE)
        self.setFocusPolicy(Qt.StrongFocus)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        top = QHBoxLayout()
        self._title_label = QLabel()
        top.addWidget(self._title_label, 1)
        self._fullscreen_btn = QPushButton("⛶")
        self._fullscreen_btn.setToolTip("Enter fullscreen (F)")
        self._fullscreen_btn.clicked.connect(self.vm.controller.toggle_fullscreen)
        top.addWidget(self._fullscreen_btn)
        close_btn = QPushButton("✕")
        close_btn.setToolTip("Close (ESC)")
        close_btn.clicked.connect(self.close)
        top.addWidget(close_btn)
        root.addLayout(top)

        middle = QHBoxLayout()
        prev_btn = QPushButton("❮")
        prev_btn.setToolTip("Previous photo")
        prev_btn.clicked.connect(self.vm.controller.previous)
        middle.addWidget(prev_btn)
        self._canvas = PhotoCanvas(self)
        self._canvas.pressed.connect(self._on_canvas_pressed)
        self._canvas.dragStarted.connect(self._on_drag_started)
        self._canvas.dragMoved.connect(self._on_drag_moved)
        self._canvas.dragEnded.connect(self._on_drag_ended)
        middle.addWidget(self._canvas, 1)
        next_btn = QPushButton("❯")
        next_btn.setToolTip("Next photo")
        next_btn.clicked.connect(self.vm.controller.next)
        middle.addWidget(next_btn)
        root.addLayout(middle, 1)

        self._info_label = QLabel()
        self._info_label.setTextFormat(Qt.RichText)
        self._info_label.setWordWrap(True)
        root.addWidget(self._info_label)

        self._dots_row = QHBoxLayout()
        self._dots_row.setAlignment(Qt.AlignHCenter)
        count = self.vm.controller.count
        if count <= MAX_NAV_DOTS:
            for index in range(count):
                dot = QPushButton()
                dot.setFixedSize(12, 12)
                dot.setCheckable(True)
                dot.setToolTip(f"Go to photo {index + 1}")
                dot.clicked.connect(lambda _checked=False, i=index: self.vm.controller.jump_to(i))
                self._dots.append(dot)
                self._dots_row.addWidget(dot)
        self._counter_label = QLabel()
        self._dots_row.addWidget(self._counter_label)
        root.addLayout(self._dots_row)

        # Keys go to the window, not to whichever button was clicked last.
        for button in self.findChildren(QPushButton):
            button.setFocusPolicy(Qt.NoFocus)

    def _render(self) -> None:
        photo = self.vm.current_photo
        index = self.vm.controller.current_index
        if photo.path != self._shown_path:
            self._shown_path = photo.path
            self._canvas.set_placeholder("Loading…")
            self._photo_token = self._runner.request_photo(photo)
        self._title_label.setText(photo.name)
        self._counter_label.setText(f"{index + 1} / {self.vm.controller.count}")
        for i, dot in enumerate(self._dots):
            dot.setChecked(i == index)
        self._info_label.setText(_format_info(self.vm.metadata))
        self._info_label.setStyleSheet(
            f"border-left: 3px solid {self.vm.accent_color}; padding-left: 6px;"
        )

    # Task results
    def _on_photo_loaded(self, token: str, path: str, image: Any) -> None:
        if token != self._photo_token:
            return
        if image is None:
            self._canvas.set_placeholder("(failed)")
            return
        pm = QPixmap.fromImage(image)
        if pm.isNull():
            self._canvas.set_placeholder("(failed)")
            return
        self._canvas.set_pixmap(pm)
        logger.debug("Displayed {}", path)

    def _on_metadata_loaded(self, token: str, path: str, metadata: Any) -> None:
        if not self.vm.on_metadata_loaded(token, metadata):
            logger.debug("Metadata for {} not applied", path)

    # Input
    def _on_canvas_pressed(self, x: float, width: float) -> None:
        if self._click_enabled:
            self.vm.controller.click(x, width)

    def _on_drag_started(self, x: float) -> None:
        if self._swipe_enabled:
            self.vm.controller.gesture_start(x)

    def _on_drag_moved(self, x: float) -> None:
        if self._swipe_enabled:
            self.vm.controller.gesture_move(x)
            self._canvas.set_offset(self.vm.controller.state.drag_offset)

    def _on_drag_ended(self, x: float) -> None:
        if self._swipe_enabled:
            self.vm.controller.gesture_end(x)
            self._canvas.set_offset(self.vm.controller.state.drag_offset)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        key = KEY_NAMES.get(event.key())
        if key is None and event.text() in FULLSCREEN_KEYS:
            key = event.text()
        if key is None or self.vm.controller.handle_key(key) is NavAction.NONE:
            super().keyPressEvent(event)
            return
        event.accept()

    def changeEvent(self, event: QEvent) -> None:  # type: ignore[override]
        if event.type() == QEvent.WindowStateChange:
            fullscreen = self.isFullScreen()
            self.vm.controller.on_fullscreen_changed(fullscreen)
            self._fullscreen_btn.setToolTip(
                "Exit fullscreen (F)" if fullscreen else "Enter fullscreen (F)"
            )
        super().changeEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        self.closed.emit()
        super().closeEvent(event)


def _format_info(meta: PhotoMetadata | None) -> str:
    """Rich-text info panel for `meta`; empty while metadata is pending."""
    if meta is None:
        return ""
    lines: list[str] = []
    basics = []
    if meta.width is not None and meta.height is not None:
        basics.append(f"{meta.width} × {meta.height}")
    if meta.file_size:
        basics.append(meta.file_size)
    if basics:
        lines.append(" · ".join(basics))
    exif = meta.exif
    if exif is not None:
        if exif.camera:
            lines.append(f"📷 {html.escape(exif.camera)}")
        if exif.lens:
            lines.append(f"🔭 {html.escape(exif.lens)}")
        badges = [b for b in (exif.focal, exif.aperture, exif.shutter, exif.iso) if b]
        if badges:
            lines.append(html.escape("  ".join(badges)))
        if exif.date:
            lines.append(f"📅 {exif.date}")
    return "<br>".join(lines)
