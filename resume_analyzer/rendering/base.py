from abc import ABC, abstractmethod


class RasterPage(ABC):
    """A rasterized page held in engine-native form.

    Exposes two independent ways to get image bytes out: the engine's own
    PNG writer and the raw sample buffer for re-encoding elsewhere.
    """

    @property
    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Pixel dimensions as (width, height)."""

    @property
    @abstractmethod
    def mode(self) -> str:
        """Pillow mode string describing ``samples`` (``RGB`` or ``RGBA``)."""

    @abstractmethod
    def samples(self) -> bytes:
        """Return the uncompressed pixel buffer, row-major, no padding."""

    @abstractmethod
    def native_png(self) -> bytes | None:
        """Encode with the engine's PNG writer. May return None or empty bytes."""


class BaseRenderEngine(ABC):
    """Contract for PDF rasterization engines."""

    @abstractmethod
    def render_first_page(self, pdf_bytes: bytes, scale: float) -> RasterPage:
        """Rasterize page one of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.
            scale: Zoom factor relative to 72 dpi.

        Raises:
            RenderError: if the document cannot be opened or rendered.
        """
