"""Shared fixtures: sample index trees and generated image files."""

from __future__ import annotations

import os
from pathlib import Path

from PIL import Image
import pytest

from core.models import IndexNode


@pytest.fixture
def sample_tree() -> IndexNode:
    """Root with two photos and a nested Fauna/Birds folder plus an empty folder."""
    return IndexNode(
        photos=["a.jpg", "b.png"],
        folders={
            "Fauna": IndexNode(
                photos=["fox.jpg"],
                folders={"Birds": IndexNode(photos=["owl.webp", "robin.jpg"])},
            ),
            "Empty": IndexNode(),
            "Flora": IndexNode(photos=["rose.gif"]),
        },
    )


@pytest.fixture
def make_image():
    """Return a factory writing a solid-colour image to a path."""

    def _make(path: Path, size=(20, 10), color=(255, 0, 0, 255), fmt: str | None = None, **save_kw):
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = "RGBA" if len(color) == 4 else "RGB"
        img = Image.new(mode, size, color)
        if (fmt or path.suffix.lower()) in ("jpeg", ".jpg", ".jpeg") and mode == "RGBA":
            img = img.convert("RGB")
        img.save(path, format=fmt, **save_kw)
        return path

    return _make


@pytest.fixture(scope="session")
def qt_app():
    """A headless QGuiApplication so Qt image plugins can load."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication([])
    yield app
