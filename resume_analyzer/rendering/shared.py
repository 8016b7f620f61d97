from resume_analyzer.config.settings import Settings
from resume_analyzer.rendering.engine_handle import RenderEngineHandle
from resume_analyzer.rendering.factory import RenderEngineFactory
from resume_analyzer.rendering.renderer import DocumentRenderer

_renderer: DocumentRenderer | None = None


def init_renderer(settings: Settings) -> DocumentRenderer:
    """Create the process-wide renderer if needed and return it.

    The engine is not loaded here; it loads on the first conversion.
    """
    global _renderer  # noqa: PLW0603
    if _renderer is None:
        _renderer = DocumentRenderer(
            RenderEngineHandle(RenderEngineFactory.loader(settings)),
            scale=settings.render_scale,
            encode_timeout_seconds=settings.encode_timeout_seconds,
        )
    return _renderer


def get_renderer() -> DocumentRenderer:
    if _renderer is None:
        raise RuntimeError("Renderer not initialized. Call init_renderer() first.")
    return _renderer


def close_renderer() -> None:
    """Drop the process-wide renderer together with its cache."""
    global _renderer  # noqa: PLW0603
    _renderer = None
