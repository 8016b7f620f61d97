import io

import pytest
from PIL import Image

from resume_analyzer.rendering.encoders import NativePngEncoder, PillowPngEncoder
from resume_analyzer.rendering.exceptions import EncodingError
from rendering_fakes import PNG_SIGNATURE, FakePage


class _BrokenPage(FakePage):
    def native_png(self) -> bytes | None:
        raise MemoryError("out of memory")

    def samples(self) -> bytes:
        return b"\x00"


class TestNativePngEncoder:
    def test_returns_engine_png(self) -> None:
        assert NativePngEncoder().encode(FakePage()) == PNG_SIGNATURE + b"native"

    def test_passes_through_empty_output(self) -> None:
        assert NativePngEncoder().encode(FakePage(native=None)) is None

    def test_wraps_engine_errors(self) -> None:
        with pytest.raises(EncodingError, match="native PNG encoding failed"):
            NativePngEncoder().encode(_BrokenPage())


class TestPillowPngEncoder:
    def test_encodes_raw_samples(self) -> None:
        png = PillowPngEncoder().encode(FakePage(native=None))
        assert png is not None
        assert png.startswith(PNG_SIGNATURE)
        image = Image.open(io.BytesIO(png))
        assert image.size == (2, 1)
        assert image.getpixel((0, 0)) == (255, 0, 0)
        assert image.getpixel((1, 0)) == (0, 0, 255)

    def test_short_buffer_raises(self) -> None:
        with pytest.raises(EncodingError, match="Pillow PNG encoding failed"):
            PillowPngEncoder().encode(_BrokenPage())
