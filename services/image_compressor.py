"""Image compression service.

Provides a small OOP wrapper around Pillow that re-encodes raster images
(PNG, WebP, BMP, GIF, JPEG, ...) as JPEG at a caller-supplied quality.
Images with transparency are flattened against a background colour since
JPEG has no alpha channel.

Public class: `ImageCompressor`

Example:
    compressor = ImageCompressor()
    jpeg_bytes = compressor.compress(raw_png_bytes, quality=70)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from utils.errors import TransformError
from utils.media_validation import MAX_QUALITY, MIN_QUALITY


class ImageCompressor:
    """Re-encode image bytes as JPEG.

    Args:
        background: RGB colour used when flattening images that carry alpha.
            Defaults to white.
        optimize: Ask the encoder for an extra pass to optimise Huffman tables.
    """

    def __init__(self, background: Tuple[int, int, int] | None = None, optimize: bool = False):
        self.background = background or (255, 255, 255)
        self.optimize = optimize

    def compress(self, data: bytes, quality: int) -> bytes:
        """Compress image bytes to JPEG.

        Args:
            data: Raw bytes of a supported raster image.
            quality: JPEG quality between 1 and 100.

        Returns:
            The encoded JPEG bytes.

        Raises:
            TransformError: If the input is empty, cannot be decoded as an
                image, the quality is out of range, or encoding fails.
        """
        if not data:
            raise TransformError("Cannot compress an empty payload")
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise TransformError(f"Quality {quality} is outside {MIN_QUALITY}-{MAX_QUALITY}")

        try:
            src = Image.open(io.BytesIO(data))
            src.load()
            # Honour camera orientation before the EXIF block is dropped by re-encoding
            src = ImageOps.exif_transpose(src)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise TransformError("Payload is not a supported image format") from exc

        try:
            rgb = self._to_rgb(src)
            out_io = io.BytesIO()
            rgb.save(out_io, format="JPEG", quality=quality, optimize=self.optimize)
        except (OSError, ValueError) as exc:
            raise TransformError("Failed to encode image as JPEG") from exc

        return out_io.getvalue()

    def _to_rgb(self, src: Image.Image) -> Image.Image:
        """Flatten alpha against the background colour and return an RGB image."""
        if src.mode == "RGB":
            return src
        if src.mode in ("RGBA", "LA") or (src.mode == "P" and "transparency" in src.info):
            rgba = src.convert("RGBA")
            background = Image.new("RGB", rgba.size, self.background)
            background.paste(rgba, mask=rgba.split()[3])
            return background
        return src.convert("RGB")
