"""Gallery main window: folder menu on the left, photo listing on the right."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.constants import (
    FOLDER_PANE_WIDTH,
    FOLDER_PATH_ROLE,
    GALLERY_MIN_SIZE,
    HOME_LABEL,
    PHOTO_INDEX_ROLE,
)
from app.views.viewer_window import PhotoViewerWindow
from infrastructure.photo_source import LocalPhotoSource


class GalleryWindow(QMainWindow):
    """Lists the collection and opens the viewer on the activated photo."""

    def __init__(
        self,
        vm: GalleryVM,
        source: LocalPhotoSource,
        settings: Any | None = None,
    ) -> None:
        """Initialize the window.

        Args:
            vm: Gallery view-model holding the loaded index
            source: Photo source used by the viewer
            settings: Settings instance for display preferences
        """
        super().__init__()
        self._vm = vm
        self._source = source
        self._settings = settings
        self._viewer: PhotoViewerWindow | None = None

        self._setup_ui()
        self.refresh()

    def _setup_ui(self) -> None:
        self.setWindowTitle(self._vm.title)
        self.setMinimumSize(*GALLERY_MIN_SIZE)

        self.folder_list = QListWidget()
        self.folder_list.setMaximumWidth(FOLDER_PANE_WIDTH)
        self.folder_list.currentItemChanged.connect(self._on_folder_changed)

        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)
        self.heading = QLabel()
        self.heading.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        right_layout.addWidget(self.heading)
        self.photo_list = QListWidget()
        self.photo_list.itemActivated.connect(self._on_photo_activated)
        right_layout.addWidget(self.photo_list)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.folder_list)
        splitter.addWidget(right)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

    def refresh(self) -> None:
        """Rebuild the folder menu and the photo listing from the view-model."""
        self.folder_list.blockSignals(True)
        self.folder_list.clear()
        home = QListWidgetItem(HOME_LABEL)
        home.setData(FOLDER_PATH_ROLE, "")
        self.folder_list.addItem(home)
        names = self._vm.folder_names()
        for name in names:
            item = QListWidgetItem(name)
            item.setData(FOLDER_PATH_ROLE, f"/{name}")
            self.folder_list.addItem(item)
        if not names:
            empty = QListWidgetItem("No folders")
            empty.setFlags(Qt.NoItemFlags)
            self.folder_list.addItem(empty)
        self.folder_list.blockSignals(False)
        self._select_current_folder_item()
        self._populate_photos()

    def _select_current_folder_item(self) -> None:
        target = self._vm.current_folder or ""
        for row in range(self.folder_list.count()):
            item = self.folder_list.item(row)
            if item.data(FOLDER_PATH_ROLE) == target:
                self.folder_list.blockSignals(True)
                self.folder_list.setCurrentItem(item)
                self.folder_list.blockSignals(False)
                return

    def _populate_photos(self) -> None:
        photos = self._vm.visible_photos()
        if self._vm.current_folder:
            self.heading.setText(self._vm.folder_title)
        else:
            featured = self._vm.featured_photo
            suffix = f"  (featured: {featured.path})" if featured else ""
            self.heading.setText(f"{self._vm.title}{suffix}")

        self.photo_list.clear()
        for index, ref in enumerate(photos):
            item = QListWidgetItem(ref.path if not self._vm.current_folder else ref.name)
            item.setData(PHOTO_INDEX_ROLE, index)
            self.photo_list.addItem(item)
        if not photos:
            self.statusBar().showMessage("No photos found in this folder", 3000)
        else:
            self.statusBar().showMessage(f"{len(photos)} photos", 3000)

    def _on_folder_changed(self, current: QListWidgetItem | None, _previous: Any) -> None:
        if current is None:
            return
        folder = current.data(FOLDER_PATH_ROLE)
        if folder is None:
            return
        self._vm.navigate(folder or None)
        self._populate_photos()

    def _on_photo_activated(self, item: QListWidgetItem) -> None:
        photos = self._vm.visible_photos()
        index = item.data(PHOTO_INDEX_ROLE)
        if not photos or index is None:
            return
        try:
            viewer = PhotoViewerWindow(photos, int(index), self._source, settings=self._settings)
        except ValueError as ex:
            logger.error("Cannot open viewer: {}", ex)
            QMessageBox.warning(self, "Viewer", str(ex))
            return
        viewer.setAttribute(Qt.WA_DeleteOnClose, True)
        viewer.closed.connect(self._on_viewer_closed)
        self._viewer = viewer
        viewer.show()
        viewer.setFocus()

    def _on_viewer_closed(self) -> None:
        self._viewer = None
        self.photo_list.setFocus()
