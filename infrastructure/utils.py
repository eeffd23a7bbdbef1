"""Formatting helpers for file sizes, exposure values and EXIF dates.

This module centralizes display formatting so the metadata pipeline and views
share a single behavior. Parsers are best-effort and return `None` instead of
raising when a value cannot be interpreted.
"""

from __future__ import annotations

from datetime import datetime
import math
from typing import Any

from loguru import logger

SIZE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB", "GB")
EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"


def format_number(value: float) -> str:
    """Format a number without a trailing ".0" (2.0 -> "2", 2.5 -> "2.5")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, unlike the builtin banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def format_file_size(size: int) -> str:
    """Human-scaled byte size: 0 -> "0 Bytes", 1536 -> "1.5 KB"."""
    if size <= 0:
        return "0 Bytes"
    scaled = float(size)
    unit = 0
    while scaled >= 1024 and unit < len(SIZE_UNITS) - 1:
        scaled /= 1024
        unit += 1
    return f"{format_number(round_half_up(scaled, 2))} {SIZE_UNITS[unit]}"


def parse_content_length(value: Any) -> int | None:
    """Parse a Content-Length header value; None when absent or invalid."""
    if value is None:
        return None
    try:
        length = int(str(value).strip())
    except (ValueError, TypeError):
        return None
    return length if length >= 0 else None


def to_float(value: Any) -> float | None:
    """Convert EXIF numeric values (including IFDRational) to float."""
    if isinstance(value, (tuple, list)):
        if len(value) == 2 and all(isinstance(v, (int, float)) for v in value):
            num, den = value
            return float(num) / float(den) if den else None
        value = value[0] if value else None
    if value is None:
        return None
    try:
        result = float(value)
    except (ValueError, TypeError, ZeroDivisionError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def format_exposure(seconds: float) -> str:
    """Shutter speed as "1/250s" below one second, otherwise "2s"."""
    if 0 < seconds < 1:
        return f"1/{int(round_half_up(1 / seconds))}s"
    return f"{format_number(seconds)}s"


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF timestamp ("YYYY:MM:DD HH:MM:SS") or ISO-like string."""
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    val_str = str(value).strip().rstrip("\x00")
    if not val_str:
        return None
    try:
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], EXIF_DT_FMT)
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except (ValueError, TypeError) as ex:
        logger.debug("Unparsable EXIF datetime {!r}: {}", val_str, ex)
        return None


def format_capture_datetime(dt: datetime) -> str:
    """Display form such as "Mar 5, 2023, 02:30 PM"."""
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p}"
