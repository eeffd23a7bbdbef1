from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.main_window import GalleryWindow
from infrastructure.logging import init_logging
from infrastructure.photo_source import LocalPhotoSource
from infrastructure.scanner import DirectoryScanner, write_index_document
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a folder tree of photos.")
    parser.add_argument(
        "--settings",
        type=Path,
        default=BASE_DIR / "settings.json",
        help="Path to settings.json (defaults apply when missing).",
    )
    sub = parser.add_subparsers(dest="command")

    scan = sub.add_parser("scan", help="Write the photo index document as JSON.")
    scan.add_argument("root", type=Path, help="Collection root folder.")
    scan.add_argument("-o", "--output", type=Path, help="Output file (stdout when omitted).")

    view = sub.add_parser("view", help="Open the gallery window.")
    view.add_argument("root", type=Path, nargs="?", help="Collection root folder.")
    view.add_argument("--folder", help="Folder to open, e.g. /Fauna.")
    return parser


def _run_scan(root: Path, output: Path | None) -> int:
    structure = DirectoryScanner().scan(root)
    if output is None:
        json.dump(structure.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")
    else:
        write_index_document(structure, output)
    return 0


def _run_view(settings: JsonSettings, root: Path | None, folder: str | None) -> int:
    photos_root = root or Path(str(settings.get("photos_root", "photos")))
    app = QApplication(sys.argv)

    vm = GalleryVM(title=str(settings.get("title", "Photo Gallery")))
    vm.load_root(photos_root)
    if folder:
        vm.navigate(folder)

    source = LocalPhotoSource(photos_root, base_url=str(settings.get("base_url", "/photo-gallery/")))
    win = GalleryWindow(vm=vm, source=source, settings=settings)
    win.statusBar().showMessage("Ready", 2000)
    win.show()
    return app.exec()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = JsonSettings(args.settings)
    init_logging(level=str(settings.get("log_level", "INFO")))

    if args.command == "scan":
        return _run_scan(args.root, args.output)
    root = getattr(args, "root", None)
    folder = getattr(args, "folder", None)
    logger.info("Starting gallery (root={}, folder={})", root, folder)
    return _run_view(settings, root, folder)


if __name__ == "__main__":
    raise SystemExit(main())
