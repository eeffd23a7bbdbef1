"""
UI/view constants centralized for reuse across view modules.

Navigation thresholds live in `core.services.navigation`; this module only
holds Qt-facing values.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

from core.services.navigation import KEY_ESCAPE, KEY_LEFT, KEY_RIGHT

# Qt key codes -> controller key names
KEY_NAMES: dict[int, str] = {
    Qt.Key_Left: KEY_LEFT,
    Qt.Key_Right: KEY_RIGHT,
    Qt.Key_Escape: KEY_ESCAPE,
}

# Data roles
PHOTO_INDEX_ROLE: int = Qt.UserRole  # index into the visible photo list
FOLDER_PATH_ROLE: int = Qt.UserRole + 1  # folder path on folder items ("" for home)

# Window defaults
GALLERY_MIN_SIZE: tuple[int, int] = (900, 600)
VIEWER_MIN_SIZE: tuple[int, int] = (800, 600)
FOLDER_PANE_WIDTH: int = 220

# Viewer
MAX_NAV_DOTS: int = 40  # above this the dot row is replaced by a counter
HOME_LABEL: str = "Home"
