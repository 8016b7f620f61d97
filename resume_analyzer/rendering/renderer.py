"""First-page PDF to PNG rendering with a process-lifetime cache.

Conversion flow:
1. Reject empty or non-PDF documents.
2. Return the cached result for a known fingerprint, reissuing its
   display URL if the caller revoked the previous one.
3. Acquire the shared render engine (loaded once per process).
4. Rasterize page one at a fixed scale.
5. Encode with the primary encoder, then the fallback encoder if the
   primary produced nothing or failed. The whole encode step is bounded.
6. Register a display URL and cache the result.

``convert`` reports every failure through ``RenderedImage.error``.
"""

import asyncio

from resume_analyzer.logging.logger import Log
from resume_analyzer.ports.models import UploadFile
from resume_analyzer.rendering.base import RasterPage
from resume_analyzer.rendering.encoders import BaseImageEncoder, NativePngEncoder, PillowPngEncoder
from resume_analyzer.rendering.engine_handle import RenderEngineHandle
from resume_analyzer.rendering.exceptions import DocumentValidationError, EncodingError, RenderError
from resume_analyzer.rendering.models import PNG_MEDIA_TYPE, RenderedImage, SourceDocument
from resume_analyzer.rendering.object_urls import ObjectUrlRegistry

DEFAULT_SCALE = 4.0
DEFAULT_ENCODE_TIMEOUT_SECONDS = 30.0


class DocumentRenderer:
    """Converts the first page of a PDF into a PNG image."""

    def __init__(
        self,
        engine: RenderEngineHandle,
        *,
        scale: float = DEFAULT_SCALE,
        encode_timeout_seconds: float = DEFAULT_ENCODE_TIMEOUT_SECONDS,
        primary_encoder: BaseImageEncoder | None = None,
        fallback_encoder: BaseImageEncoder | None = None,
        urls: ObjectUrlRegistry | None = None,
    ) -> None:
        self._engine = engine
        self._scale = scale
        self._encode_timeout_seconds = encode_timeout_seconds
        self._primary = primary_encoder or NativePngEncoder()
        self._fallback = fallback_encoder or PillowPngEncoder()
        self.urls = urls or ObjectUrlRegistry()
        self._cache: dict[str, RenderedImage] = {}

    async def convert(self, doc: SourceDocument) -> RenderedImage:
        """Render ``doc``'s first page to PNG; never raises."""
        try:
            self._validate(doc)
        except DocumentValidationError as exc:
            Log.error(f"Rejected document for conversion: {exc}")
            return RenderedImage.failed(str(exc))

        key = doc.fingerprint
        cached = self._cache.get(key)
        if cached is not None:
            Log.debug(f"Render cache hit for {key}")
            return self._with_live_url(key, cached)

        Log.info(f"Converting {doc.name} ({len(doc.content)} bytes) to image")
        try:
            engine = await self._engine.acquire()
            page = await asyncio.to_thread(engine.render_first_page, doc.content, self._scale)
            width, height = page.size
            Log.debug(f"Rendered first page of {doc.name} at {width}x{height}")
            png = await self._encode_bounded(page)
        except RenderError as exc:
            Log.error(f"PDF conversion error for {doc.name}: {exc}")
            return RenderedImage.failed(f"Failed to convert PDF to image: {exc}")
        except Exception as exc:
            Log.exception(f"Unexpected PDF conversion error for {doc.name}")
            return RenderedImage.failed(f"Failed to convert PDF to image: {exc}")

        file = UploadFile(name=f"{doc.stem}.png", content=png, media_type=PNG_MEDIA_TYPE)
        result = RenderedImage(url=self.urls.create(file), file=file)
        self._cache[key] = result
        Log.info(f"Converted {doc.name} to {file.name} ({file.size} bytes)")
        return result

    def cached(self, doc: SourceDocument) -> RenderedImage | None:
        return self._cache.get(doc.fingerprint)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def _with_live_url(self, key: str, cached: RenderedImage) -> RenderedImage:
        if cached.file is None or self.urls.resolve(cached.url) is not None:
            return cached
        # The display URL was revoked; reissue one for the same file.
        refreshed = RenderedImage(url=self.urls.create(cached.file), file=cached.file)
        self._cache[key] = refreshed
        return refreshed

    @staticmethod
    def _validate(doc: SourceDocument) -> None:
        if not doc.content:
            raise DocumentValidationError("Invalid file provided for conversion")
        if "pdf" not in doc.media_type.lower():
            raise DocumentValidationError("File is not a PDF")

    async def _encode_bounded(self, page: RasterPage) -> bytes:
        try:
            async with asyncio.timeout(self._encode_timeout_seconds):
                return await asyncio.to_thread(self._encode, page)
        except TimeoutError as exc:
            raise EncodingError("Timed out while creating image blob") from exc

    def _encode(self, page: RasterPage) -> bytes:
        try:
            png = self._primary.encode(page)
        except EncodingError as exc:
            Log.warning(f"{self._primary.name} encoder failed, trying {self._fallback.name}: {exc}")
        else:
            if png:
                return png
            Log.warning(f"{self._primary.name} encoder returned no data, trying {self._fallback.name}")

        try:
            png = self._fallback.encode(page)
        except EncodingError as exc:
            raise EncodingError(f"All encoders failed; last error: {exc}") from exc
        if not png:
            raise EncodingError("All encoders returned no data")
        return png
