from dataclasses import dataclass
from enum import Enum
from typing import Any

from resume_analyzer.rendering.models import SourceDocument


class Stage(str, Enum):
    """Failure attribution for a pipeline run."""

    UPLOAD = "upload"
    CONVERT = "convert"
    PERSIST = "persist"
    ANALYZE = "analyze"
    PARSE = "parse"
    TIMEOUT = "timeout"


class RunState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    CONVERTING = "converting"
    UPLOADING_IMAGE = "uploading_image"
    PERSISTING_INITIAL = "persisting_initial"
    ANALYZING = "analyzing"
    PARSING_FEEDBACK = "parsing_feedback"
    PERSISTING_FINAL = "persisting_final"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class JobContext:
    """Free-form job details the feedback is tailored to."""

    company_name: str = ""
    job_title: str = ""
    job_description: str = ""


@dataclass(frozen=True)
class AnalysisRequest:
    document: SourceDocument
    job: JobContext


@dataclass
class AnalysisRecord:
    """Persisted unit of work. ``feedback`` stays "" until analysis succeeds."""

    id: str
    resume_path: str
    image_path: str
    company_name: str = ""
    job_title: str = ""
    job_description: str = ""
    feedback: dict[str, Any] | str = ""

    @property
    def analyzed(self) -> bool:
        return self.feedback != ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "resumePath": self.resume_path,
            "imagePath": self.image_path,
            "companyName": self.company_name,
            "jobTitle": self.job_title,
            "jobDescription": self.job_description,
            "feedback": self.feedback,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisRecord":
        return cls(
            id=data["id"],
            resume_path=data.get("resumePath", ""),
            image_path=data.get("imagePath", ""),
            company_name=data.get("companyName", ""),
            job_title=data.get("jobTitle", ""),
            job_description=data.get("jobDescription", ""),
            feedback=data.get("feedback", ""),
        )


@dataclass(frozen=True)
class Done:
    record_id: str


@dataclass(frozen=True)
class Failed:
    stage: Stage
    message: str


AnalysisOutcome = Done | Failed
