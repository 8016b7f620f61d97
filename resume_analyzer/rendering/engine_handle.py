import asyncio
from typing import Callable

from resume_analyzer.logging.logger import Log
from resume_analyzer.rendering.base import BaseRenderEngine
from resume_analyzer.rendering.exceptions import EngineInitializationError


class RenderEngineHandle:
    """Lazily loads a render engine once and shares it.

    Concurrent first callers await the same in-flight load. A failed load
    is reported to every waiter and then forgotten, so the next acquire
    tries again.
    """

    def __init__(self, loader: Callable[[], BaseRenderEngine]) -> None:
        self._loader = loader
        self._engine: BaseRenderEngine | None = None
        self._loading: asyncio.Future[BaseRenderEngine] | None = None

    @property
    def loaded(self) -> bool:
        return self._engine is not None

    async def acquire(self) -> BaseRenderEngine:
        if self._engine is not None:
            return self._engine
        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load())
            self._loading.add_done_callback(_consume_exception)
        # Shield so one cancelled waiter does not abort the shared load.
        return await asyncio.shield(self._loading)

    async def _load(self) -> BaseRenderEngine:
        Log.info("Loading render engine")
        try:
            engine = await asyncio.to_thread(self._loader)
        except EngineInitializationError:
            Log.error("Render engine failed to load")
            raise
        except Exception as exc:
            Log.error(f"Render engine failed to load: {exc}")
            raise EngineInitializationError(f"Failed to load render engine: {exc}") from exc
        finally:
            self._loading = None
        self._engine = engine
        Log.info("Render engine loaded")
        return engine


def _consume_exception(future: asyncio.Future[BaseRenderEngine]) -> None:
    # Waiters may all be gone by the time a load fails.
    if not future.cancelled():
        future.exception()
