from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


@dataclass
class CompressionResult:
    """Outcome of re-encoding one image.

    Attributes:
        data: Encoded JPEG bytes to send back to the chat.
        quality: JPEG quality the image was encoded with.
        original_size: Byte length of the downloaded payload.
        compressed_size: Byte length of `data`.
    """

    data: bytes
    quality: int
    original_size: int
    compressed_size: int

    @classmethod
    def from_bytes(cls, original: bytes, compressed: bytes, quality: int) -> "CompressionResult":
        return cls(
            data=compressed,
            quality=quality,
            original_size=len(original),
            compressed_size=len(compressed),
        )

    @property
    def reduction_percent(self) -> int:
        """Percent saved relative to the original size.

        Negative when the encoded image is larger than the input.
        """
        if self.original_size <= 0:
            raise ValueError("Original size must be positive to compute a reduction.")
        return round_half_up((1 - self.compressed_size / self.original_size) * 100)
