"""Validation helpers for user input and uploaded image files."""

import re

from utils.errors import ValidationError

MIN_QUALITY = 1
MAX_QUALITY = 100

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_quality(text: str) -> int:
    """Parse a JPEG quality value typed by the user.

    Surrounding whitespace is ignored. Anything other than a plain integer in
    the range 1-100 is rejected.

    Raises:
        ValidationError: If the text is not an integer or is out of range.
    """
    candidate = (text or "").strip()
    if not _INTEGER_PATTERN.fullmatch(candidate):
        raise ValidationError(f"Quality must be an integer, got {text!r}")
    value = int(candidate)
    if value < MIN_QUALITY or value > MAX_QUALITY:
        raise ValidationError(f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {value}")
    return value


def is_image_mime(mime_type: str | None) -> bool:
    """Return True when a declared content type names an image."""
    if not mime_type:
        return False
    return mime_type.lower().split(";", 1)[0].strip().startswith("image/")


def format_kilobytes(size: int) -> str:
    """Render a byte count as kilobytes with one decimal, e.g. `976.6`."""
    return f"{size / 1024:.1f}"
