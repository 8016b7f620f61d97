from pathlib import Path

from resume_analyzer.pipeline.exceptions import PipelineError
from resume_analyzer.pipeline.models import JobContext

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the resume feedback prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled feedback_prompt.txt.

    Returns:
        The raw template with company, title, description and schema
        placeholders.

    Raises:
        PipelineError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "feedback_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PipelineError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(path: Path | None = None) -> str:
    """Load the JSON schema the feedback reply must follow.

    Args:
        path: Path to the JSON schema file.
              Defaults to the bundled feedback_schema.json.

    Returns:
        The schema text, embedded verbatim into the prompt.

    Raises:
        PipelineError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "feedback_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PipelineError(f"Failed to load JSON schema: {exc}") from exc


class InstructionBuilder:
    """Builds the instruction text sent with the resume for analysis."""

    def __init__(
        self,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._template = load_prompt_template(prompt_template_path)
        self._schema = load_json_schema(json_schema_path)

    def build(self, job: JobContext) -> str:
        return self._template.format(
            company_name=job.company_name or "(not provided)",
            job_title=job.job_title or "(not provided)",
            job_description=job.job_description or "(not provided)",
            json_schema=self._schema,
        )
