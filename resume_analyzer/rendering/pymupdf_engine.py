import pymupdf

from resume_analyzer.rendering.base import BaseRenderEngine, RasterPage
from resume_analyzer.rendering.exceptions import EngineInitializationError, RenderError


class PyMuPdfRasterPage(RasterPage):
    def __init__(self, pixmap: pymupdf.Pixmap) -> None:
        self._pixmap = pixmap

    @property
    def size(self) -> tuple[int, int]:
        return self._pixmap.width, self._pixmap.height

    @property
    def mode(self) -> str:
        return "RGBA" if self._pixmap.alpha else "RGB"

    def samples(self) -> bytes:
        return bytes(self._pixmap.samples)

    def native_png(self) -> bytes | None:
        return self._pixmap.tobytes("png")


class PyMuPdfEngine(BaseRenderEngine):
    """Rasterizes PDF pages using PyMuPDF."""

    def __init__(self) -> None:
        try:
            pymupdf.TOOLS.mupdf_display_errors(False)
            self.version = pymupdf.VersionBind
        except Exception as exc:
            raise EngineInitializationError(f"pymupdf failed to initialize: {exc}") from exc

    def render_first_page(self, pdf_bytes: bytes, scale: float) -> RasterPage:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise RenderError("PDF has no pages")
                page = doc.load_page(0)
                pixmap = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
            return PyMuPdfRasterPage(pixmap)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"pymupdf rendering failed: {exc}") from exc
