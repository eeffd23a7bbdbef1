"""Per-photo display metadata: byte size, dimensions, dominant colour, EXIF.

Each derivation step is independent. A failure in one step is logged and only
leaves that field unset; the other steps still run.
"""

from __future__ import annotations

from collections.abc import Mapping
import io
from pathlib import Path
from typing import Any

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage, QImageReader
from loguru import logger
from PIL import ExifTags, Image, ImageOps

from core.models import ExifSummary, PhotoMetadata, PhotoRef
from core.services.interfaces import IPhotoSource
from infrastructure.utils import (
    format_capture_datetime,
    format_exposure,
    format_file_size,
    format_number,
    parse_content_length,
    parse_exif_datetime,
    round_half_up,
    to_float,
)

SAMPLE_SIDE = 150
SAMPLE_STRIDE = 4  # pixels
ALPHA_CUTOFF = 128
DEFAULT_ACCENT_COLOR = "#ffffff"
UNKNOWN_SIZE = "Unknown"

_IMAGE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def extract_dominant_color(image: Image.Image) -> str | None:
    """Average colour of the mostly-opaque pixels of `image` as "#rrggbb".

    The image is downsampled to a 150x150 canvas and every 4th pixel is
    sampled. Returns None when no sampled pixel has alpha above 128.
    """
    canvas = image.convert("RGBA").resize((SAMPLE_SIDE, SAMPLE_SIDE), Image.Resampling.BILINEAR)
    data = canvas.tobytes("raw", "RGBA")
    r = g = b = count = 0
    for i in range(0, len(data), 4 * SAMPLE_STRIDE):
        if data[i + 3] > ALPHA_CUTOFF:
            r += data[i]
            g += data[i + 1]
            b += data[i + 2]
            count += 1
    if count == 0:
        return None
    channels = (int(round_half_up(c / count)) for c in (r, g, b))
    return "#" + "".join(f"{c:02x}" for c in channels)


def summarize_exif(tags: Mapping[str, Any]) -> ExifSummary | None:
    """Project named EXIF tags to display strings; None when nothing applies."""
    summary = ExifSummary()

    make = _clean_text(tags.get("Make"))
    model = _clean_text(tags.get("Model"))
    if make and model:
        summary.camera = f"{make} {model}"
    elif model:
        summary.camera = model

    summary.lens = _clean_text(tags.get("LensModel"))

    focal = to_float(tags.get("FocalLength"))
    if focal:
        summary.focal = f"{format_number(round_half_up(focal, 2))}mm"

    f_number = to_float(tags.get("FNumber"))
    if f_number:
        summary.aperture = f"f/{format_number(round_half_up(f_number, 2))}"

    exposure = to_float(tags.get("ExposureTime"))
    if exposure:
        summary.shutter = format_exposure(exposure)

    iso = tags.get("ISOSpeedRatings")
    if isinstance(iso, (list, tuple)):
        iso = iso[0] if iso else None
    if iso:
        summary.iso = f"ISO {iso}"

    taken = parse_exif_datetime(tags.get("DateTimeOriginal"))
    if taken is not None:
        summary.date = format_capture_datetime(taken)

    return None if summary.is_empty else summary


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip().rstrip("\x00").strip()
    return text or None


def _load_via_qt(data: bytes, fmt: str) -> Image.Image | None:
    """Decode `data` with QImageReader and return it as an RGBA Pillow image."""
    buffer = QBuffer()
    buffer.setData(QByteArray(data))
    if not buffer.open(QIODevice.ReadOnly):
        return None
    try:
        reader = QImageReader(buffer, QByteArray(fmt.encode("ascii", errors="ignore")))
        reader.setAutoTransform(True)
        qimg = reader.read()
        if qimg is None or qimg.isNull():
            logger.debug("QImageReader failed ({}): {}", fmt, reader.errorString())
            return None
        qimg = qimg.convertToFormat(QImage.Format_RGBA8888)
        return Image.frombuffer(
            "RGBA",
            (qimg.width(), qimg.height()),
            bytes(qimg.constBits()),
            "raw",
            "RGBA",
            qimg.bytesPerLine(),
            1,
        ).copy()
    finally:
        buffer.close()


class MetadataService:
    """Derives `PhotoMetadata` for photos served by an `IPhotoSource`."""

    def __init__(self, source: IPhotoSource) -> None:
        self._source = source

    def derive(self, ref: PhotoRef) -> PhotoMetadata:
        """Run every step for `ref` and return whatever could be derived."""
        meta = PhotoMetadata(file_size=self.read_file_size(ref))
        image = self.load_image(ref)
        if image is not None:
            meta.width, meta.height = image.size
            try:
                meta.dominant_color = extract_dominant_color(image)
            except _IMAGE_ERRORS as ex:
                logger.warning("Error extracting dominant color for {}: {}", ref.path, ex)
        meta.exif = self.read_exif(ref)
        return meta

    def read_file_size(self, ref: PhotoRef) -> str | None:
        """Formatted byte size from Content-Length; "Unknown" without one."""
        try:
            headers = self._source.headers(ref)
        except OSError as ex:
            logger.warning("Error fetching photo metadata for {}: {}", ref.path, ex)
            return None
        raw = next((v for k, v in headers.items() if k.lower() == "content-length"), None)
        size = parse_content_length(raw)
        return format_file_size(size) if size is not None else UNKNOWN_SIZE

    def load_image(self, ref: PhotoRef) -> Image.Image | None:
        """Fully decode the photo, honouring EXIF orientation.

        Formats Pillow cannot decode (e.g. SVG) are rendered through Qt's
        image plugins instead.
        """
        try:
            with self._source.open(ref) as fp:
                data = fp.read()
        except OSError as ex:
            logger.warning("Error loading image {}: {}", ref.path, ex)
            return None

        try:
            with Image.open(io.BytesIO(data)) as im:
                im.load()
                return ImageOps.exif_transpose(im)
        except _IMAGE_ERRORS as ex:
            logger.debug("Pillow could not decode {}: {}", ref.path, ex)

        image = _load_via_qt(data, Path(ref.name).suffix.lstrip(".").lower())
        if image is None:
            logger.warning("Error loading image {}: unsupported or corrupt", ref.path)
        return image

    def read_exif(self, ref: PhotoRef) -> ExifSummary | None:
        """Embedded capture tags, or None when absent or unreadable."""
        try:
            with self._source.open(ref) as fp:
                with Image.open(fp) as im:
                    tags = self._named_tags(im.getexif())
        except _IMAGE_ERRORS as ex:
            logger.debug("No EXIF data found or error reading EXIF for {}: {}", ref.path, ex)
            return None
        if not tags:
            return None
        return summarize_exif(tags)

    @staticmethod
    def _named_tags(exif: Image.Exif) -> dict[str, Any]:
        tags: dict[str, Any] = {}
        for tag_id, value in exif.items():
            tags[ExifTags.TAGS.get(tag_id, str(tag_id))] = value
        try:
            for tag_id, value in exif.get_ifd(ExifTags.IFD.Exif).items():
                tags[ExifTags.TAGS.get(tag_id, str(tag_id))] = value
        except (KeyError, ValueError, TypeError) as ex:
            logger.debug("Exif sub-IFD unreadable: {}", ex)
        return tags
