from resume_analyzer.logging.logger import Log
from resume_analyzer.pipeline.exceptions import PipelineError, TransportError
from resume_analyzer.pipeline.feedback import parse_feedback
from resume_analyzer.pipeline.models import AnalysisRecord, RunState, Stage
from resume_analyzer.pipeline.pipeline import PipelineContext, PipelineStep
from resume_analyzer.pipeline.port_calls import call_port
from resume_analyzer.pipeline.prompt_loader import InstructionBuilder
from resume_analyzer.pipeline.timeouts import describe_seconds
from resume_analyzer.ports.base import BaseBlobStorage, BaseInferenceService
from resume_analyzer.ports.models import FileItem, UploadFile
from resume_analyzer.rendering.renderer import DocumentRenderer
from resume_analyzer.repositories.analysis_record_repository import AnalysisRecordRepository


async def _upload(storage: BaseBlobStorage, file: UploadFile, timeout_seconds: float) -> FileItem:
    result = await call_port(
        storage.upload([file]),
        operation="File upload",
        timeout_seconds=timeout_seconds,
        timeout_message=f"File upload timed out after {describe_seconds(timeout_seconds)}",
    )
    if result.data is None:
        raise TransportError("Upload returned no file")
    return result.data


class UploadDocumentStep(PipelineStep):
    state = RunState.UPLOADING
    stage = Stage.UPLOAD
    status_text = "Uploading the file..."
    failure_text = "Failed to upload file"

    def __init__(self, storage: BaseBlobStorage, timeout_seconds: float) -> None:
        self._storage = storage
        self._timeout_seconds = timeout_seconds

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = context.request.document
        context.resume_file = await _upload(self._storage, document.as_upload(), self._timeout_seconds)
        Log.info(f"Uploaded {document.name} to {context.resume_file.path}")
        return context


class ConvertDocumentStep(PipelineStep):
    state = RunState.CONVERTING
    stage = Stage.CONVERT
    status_text = "Converting to image..."
    failure_text = "Failed to convert PDF to image"

    def __init__(self, renderer: DocumentRenderer) -> None:
        self._renderer = renderer

    async def run(self, context: PipelineContext) -> PipelineContext:
        image = await self._renderer.convert(context.request.document)
        if image.file is None:
            raise PipelineError(image.error or self.failure_text)
        context.image = image
        return context

    def failure_message(self, exc: Exception) -> str:
        # Renderer errors already describe the conversion failure.
        return f"Error: {str(exc).strip() or self.failure_text}"


class UploadImageStep(PipelineStep):
    state = RunState.UPLOADING_IMAGE
    stage = Stage.UPLOAD
    status_text = "Uploading the image..."
    failure_text = "Failed to upload image"

    def __init__(self, storage: BaseBlobStorage, timeout_seconds: float) -> None:
        self._storage = storage
        self._timeout_seconds = timeout_seconds

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.image is None or context.image.file is None:
            raise ValueError("PipelineContext.image must be set before image upload")
        context.image_file = await _upload(self._storage, context.image.file, self._timeout_seconds)
        Log.info(f"Uploaded {context.image.file.name} to {context.image_file.path}")
        return context


class PersistInitialRecordStep(PipelineStep):
    state = RunState.PERSISTING_INITIAL
    stage = Stage.PERSIST
    status_text = "Preparing data..."
    failure_text = "Failed to store data"

    def __init__(self, records: AnalysisRecordRepository) -> None:
        self._records = records

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.resume_file is None or context.image_file is None:
            raise ValueError("Both uploads must finish before the record is stored")
        job = context.request.job
        context.record = AnalysisRecord(
            id=context.record_id,
            resume_path=context.resume_file.path,
            image_path=context.image_file.path,
            company_name=job.company_name,
            job_title=job.job_title,
            job_description=job.job_description,
            feedback="",
        )
        await self._records.save(context.record)
        Log.info(f"Stored pending record {self._records.key_for(context.record_id)}")
        return context


class AnalyzeStep(PipelineStep):
    state = RunState.ANALYZING
    stage = Stage.ANALYZE
    status_text = "Analyzing..."
    failure_text = "Failed to analyze resume"

    def __init__(
        self,
        ai: BaseInferenceService,
        instructions: InstructionBuilder,
        timeout_seconds: float,
    ) -> None:
        self._ai = ai
        self._instructions = instructions
        self._timeout_seconds = timeout_seconds

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.resume_file is None:
            raise ValueError("PipelineContext.resume_file must be set before analysis")
        prompt = self._instructions.build(context.request.job)
        Log.debug(f"Feedback instructions:\n{prompt}")
        result = await call_port(
            self._ai.feedback(context.resume_file.path, prompt),
            operation="AI feedback",
            timeout_seconds=self._timeout_seconds,
            timeout_message=f"AI feedback timed out after {describe_seconds(self._timeout_seconds)}",
        )
        if result.data is None:
            raise TransportError("AI feedback returned no response")
        context.response = result.data
        Log.info(f"Received AI feedback for record {context.record_id}")
        return context


class ParseFeedbackStep(PipelineStep):
    state = RunState.PARSING_FEEDBACK
    stage = Stage.PARSE
    failure_text = "Failed to parse feedback"

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.response is None:
            raise ValueError("PipelineContext.response must be set before parsing")
        context.feedback = parse_feedback(context.response)
        return context


class PersistFinalRecordStep(PipelineStep):
    state = RunState.PERSISTING_FINAL
    stage = Stage.PERSIST
    failure_text = "Failed to store feedback"

    def __init__(self, records: AnalysisRecordRepository) -> None:
        self._records = records

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.record is None:
            raise ValueError("PipelineContext.record must be set before the final write")
        context.record.feedback = context.feedback
        await self._records.save(context.record)
        Log.info(f"Stored feedback for record {self._records.key_for(context.record_id)}")
        return context
