from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from resume_analyzer.pipeline.models import AnalysisRecord, AnalysisRequest, RunState, Stage
from resume_analyzer.ports.models import AIResponse, FileItem
from resume_analyzer.rendering.models import RenderedImage


@dataclass(slots=True)
class PipelineContext:
    record_id: str
    request: AnalysisRequest
    resume_file: FileItem | None = None
    image: RenderedImage | None = None
    image_file: FileItem | None = None
    record: AnalysisRecord | None = None
    response: AIResponse | None = None
    feedback: dict[str, Any] = field(default_factory=dict)


class PipelineStep(ABC):
    state: RunState
    stage: Stage
    status_text: str | None = None
    failure_text: str = "Unexpected error occurred"

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError

    def failure_message(self, exc: Exception) -> str:
        """User-facing status line for a failure of this step."""
        detail = str(exc).strip()
        if not detail:
            return f"Error: {self.failure_text}"
        return f"Error: {self.failure_text}. {detail}"
