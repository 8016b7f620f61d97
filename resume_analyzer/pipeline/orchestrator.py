import asyncio
import uuid
from collections.abc import Callable, Sequence

from resume_analyzer.config.settings import Settings
from resume_analyzer.logging.logger import Log
from resume_analyzer.pipeline.exceptions import PipelineError
from resume_analyzer.pipeline.models import (
    AnalysisOutcome,
    AnalysisRequest,
    Done,
    Failed,
    RunState,
    Stage,
)
from resume_analyzer.pipeline.pipeline import PipelineContext, PipelineStep
from resume_analyzer.pipeline.prompt_loader import InstructionBuilder
from resume_analyzer.pipeline.steps import (
    AnalyzeStep,
    ConvertDocumentStep,
    ParseFeedbackStep,
    PersistFinalRecordStep,
    PersistInitialRecordStep,
    UploadDocumentStep,
    UploadImageStep,
)
from resume_analyzer.pipeline.timeouts import describe_seconds
from resume_analyzer.ports.base import BaseBlobStorage, BaseInferenceService, BaseKeyValueStore
from resume_analyzer.rendering.renderer import DocumentRenderer
from resume_analyzer.repositories.analysis_record_repository import AnalysisRecordRepository

StatusCallback = Callable[[str], None]

SUCCESS_STATUS = "Analysis complete, redirecting..."


class _Run:
    """Mutable state of one run. Frozen once an outcome is recorded."""

    def __init__(self, on_status: StatusCallback | None) -> None:
        self._on_status = on_status
        self.state = RunState.IDLE
        self.outcome: AnalysisOutcome | None = None

    @property
    def finalized(self) -> bool:
        return self.outcome is not None

    def enter(self, state: RunState, status_text: str | None) -> None:
        if self.finalized:
            return
        self.state = state
        if status_text:
            self.emit(status_text)

    def finish(self, outcome: AnalysisOutcome) -> AnalysisOutcome:
        if self.outcome is not None:
            return self.outcome
        self.outcome = outcome
        if isinstance(outcome, Done):
            self.state = RunState.DONE
            self.emit(SUCCESS_STATUS)
        else:
            self.state = RunState.FAILED
            self.emit(outcome.message)
        return outcome

    def emit(self, text: str) -> None:
        Log.info(f"Status: {text}")
        if self._on_status is None:
            return
        try:
            self._on_status(text)
        except Exception as exc:
            Log.warning(f"Status callback failed: {exc}")


class AnalysisOrchestrator:
    """Runs the analysis pipeline for one request at a time per call.

    Pipeline: upload -> convert -> upload image -> persist -> analyze ->
    parse -> persist. The first failing step ends the run.

    The whole run is bounded by a global deadline. On expiry the run is
    reported as failed and its task is left to finish on its own; no
    further steps start and late results are discarded.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        *,
        global_timeout_seconds: float = 300,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._steps = list(steps)
        self._global_timeout_seconds = global_timeout_seconds
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._abandoned: set[asyncio.Task[AnalysisOutcome]] = set()

    @property
    def abandoned_runs(self) -> int:
        return len(self._abandoned)

    async def run(
        self,
        request: AnalysisRequest,
        on_status: StatusCallback | None = None,
    ) -> AnalysisOutcome:
        run = _Run(on_status)
        task = asyncio.create_task(self._execute(request, run))
        try:
            done, _pending = await asyncio.wait({task}, timeout=self._global_timeout_seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task in done:
            return task.result()

        Log.error(
            f"Analysis exceeded {describe_seconds(self._global_timeout_seconds)}, abandoning run"
        )
        self._abandoned.add(task)
        task.add_done_callback(self._forget)
        return run.finish(
            Failed(
                Stage.TIMEOUT,
                "Error: The operation timed out after "
                f"{describe_seconds(self._global_timeout_seconds)}. Please try again.",
            )
        )

    async def _execute(self, request: AnalysisRequest, run: _Run) -> AnalysisOutcome:
        context = PipelineContext(record_id=self._id_factory(), request=request)
        Log.info(f"Starting analysis {context.record_id} for {request.document.name}")

        for step in self._steps:
            if run.finalized:
                Log.warning(f"Run {context.record_id} already finalized, skipping {step.stage.value}")
                return run.outcome  # type: ignore[return-value]
            run.enter(step.state, step.status_text)
            try:
                await step.run(context)
            except PipelineError as exc:
                Log.error(f"Analysis {context.record_id} failed at {step.state.value}: {exc}")
                return run.finish(Failed(step.stage, step.failure_message(exc)))
            except Exception as exc:
                Log.exception(f"Analysis {context.record_id} crashed at {step.state.value}")
                return run.finish(Failed(step.stage, step.failure_message(exc)))

        Log.info(f"Analysis {context.record_id} completed")
        return run.finish(Done(context.record_id))

    def _forget(self, task: asyncio.Task[AnalysisOutcome]) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            Log.error(f"Abandoned analysis run ended with error: {exc}")


def build_orchestrator(
    settings: Settings,
    *,
    storage: BaseBlobStorage,
    kv: BaseKeyValueStore,
    ai: BaseInferenceService,
    renderer: DocumentRenderer,
    id_factory: Callable[[], str] | None = None,
) -> AnalysisOrchestrator:
    """Build an orchestrator wired to the given ports and renderer."""
    records = AnalysisRecordRepository(
        kv,
        key_prefix=settings.record_key_prefix,
        get_timeout_seconds=settings.kv_get_timeout_seconds,
        set_timeout_seconds=settings.kv_set_timeout_seconds,
    )
    steps: list[PipelineStep] = [
        UploadDocumentStep(storage, settings.upload_timeout_seconds),
        ConvertDocumentStep(renderer),
        UploadImageStep(storage, settings.upload_timeout_seconds),
        PersistInitialRecordStep(records),
        AnalyzeStep(ai, InstructionBuilder(), settings.inference_timeout_seconds),
        ParseFeedbackStep(),
        PersistFinalRecordStep(records),
    ]
    return AnalysisOrchestrator(
        steps,
        global_timeout_seconds=settings.global_timeout_seconds,
        id_factory=id_factory,
    )
