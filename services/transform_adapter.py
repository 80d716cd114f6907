"""Download a chat payload and compress it, bounding both steps in time."""

from __future__ import annotations

import asyncio
import logging
import time

from models.compression import CompressionResult
from services.image_compressor import ImageCompressor
from services.transport import ChatTransport
from utils.errors import TelegramApiError, TransformError

LOGGER = logging.getLogger(__name__)


class TransformAdapter:
    """Turn a file reference into a `CompressionResult`.

    Every failure (network, timeout, empty download, decode, encode) is
    reported as `TransformError`. Each payload is attempted exactly once.
    """

    def __init__(
        self,
        transport: ChatTransport,
        compressor: ImageCompressor | None = None,
        fetch_timeout: float = 30.0,
        transform_timeout: float = 30.0,
    ) -> None:
        self.transport = transport
        self.compressor = compressor or ImageCompressor()
        self.fetch_timeout = fetch_timeout
        self.transform_timeout = transform_timeout

    async def fetch(self, file_id: str) -> bytes:
        try:
            data = await asyncio.wait_for(self.transport.fetch_file(file_id), timeout=self.fetch_timeout)
        except asyncio.TimeoutError as exc:
            raise TransformError(f"Download of {file_id} timed out after {self.fetch_timeout}s") from exc
        except TelegramApiError as exc:
            raise TransformError(f"Download of {file_id} failed: {exc}") from exc
        if not data:
            raise TransformError(f"Downloaded payload {file_id} is empty")
        return data

    async def compress(self, data: bytes, quality: int) -> bytes:
        # Pillow work is blocking -> run in thread
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.compressor.compress, data, quality),
                timeout=self.transform_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise TransformError(f"Compression timed out after {self.transform_timeout}s") from exc

    async def transform(self, file_id: str, quality: int) -> CompressionResult:
        """Fetch the referenced payload and re-encode it at `quality`."""
        start = time.time()
        original = await self.fetch(file_id)
        compressed = await self.compress(original, quality)
        result = CompressionResult.from_bytes(original, compressed, quality)
        LOGGER.info(
            "Compressed %s at quality %d: %d -> %d bytes in %.3fs",
            file_id,
            quality,
            result.original_size,
            result.compressed_size,
            time.time() - start,
        )
        return result
