"""PNG encoders for rasterized pages.

The two encoders share no code path: the native encoder uses the engine's
own PNG writer, the Pillow encoder rebuilds an image from the raw sample
buffer and compresses it with Pillow.
"""

import io
from abc import ABC, abstractmethod

from PIL import Image

from resume_analyzer.rendering.base import RasterPage
from resume_analyzer.rendering.exceptions import EncodingError


class BaseImageEncoder(ABC):
    """Contract for page-to-PNG encoders."""

    name: str = "base"

    @abstractmethod
    def encode(self, page: RasterPage) -> bytes | None:
        """Return PNG bytes, or None when the encoder produced nothing.

        Raises:
            EncodingError: if encoding fails.
        """


class NativePngEncoder(BaseImageEncoder):
    name = "native"

    def encode(self, page: RasterPage) -> bytes | None:
        try:
            return page.native_png()
        except Exception as exc:
            raise EncodingError(f"native PNG encoding failed: {exc}") from exc


class PillowPngEncoder(BaseImageEncoder):
    name = "pillow"

    def __init__(self, compress_level: int = 6) -> None:
        self._compress_level = compress_level

    def encode(self, page: RasterPage) -> bytes | None:
        try:
            image = Image.frombytes(page.mode, page.size, page.samples())
            buffer = io.BytesIO()
            image.save(buffer, format="PNG", compress_level=self._compress_level)
            return buffer.getvalue()
        except Exception as exc:
            raise EncodingError(f"Pillow PNG encoding failed: {exc}") from exc
