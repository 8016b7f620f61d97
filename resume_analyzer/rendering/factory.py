from typing import Callable

from resume_analyzer.config.settings import Settings
from resume_analyzer.rendering.base import BaseRenderEngine
from resume_analyzer.rendering.pymupdf_engine import PyMuPdfEngine


class RenderEngineFactory:
    """Resolves the configured render engine."""

    ENGINES: dict[str, type[BaseRenderEngine]] = {
        "pymupdf": PyMuPdfEngine,
    }

    @classmethod
    def loader(cls, settings: Settings) -> Callable[[], BaseRenderEngine]:
        """Return a zero-argument constructor for the configured engine.

        The engine itself is not built here; RenderEngineHandle calls the
        loader on first use.
        """
        engine = settings.render_engine.lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(
                f"Unknown render engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return engine_cls
