"""Example inference adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseInferenceService and register the provider in ServicesFactory.
"""

import json
from typing import Any, ClassVar

from resume_analyzer.ports.base import BaseInferenceService
from resume_analyzer.ports.models import AIMessage, AIResponse, UploadFile
from resume_analyzer.ports.result import ServiceResult


class ExampleInferenceAdapter(BaseInferenceService):
    """Example adapter that returns fixed, schema-valid feedback.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    DEFAULT_FEEDBACK: ClassVar[dict[str, object]] = {
        "overallScore": 70,
        "ATS": {
            "score": 72,
            "tips": [
                {
                    "type": "improve",
                    "tip": "Mirror the job title",
                    "explanation": "Use the exact job title from the posting in your summary.",
                }
            ],
        },
        "toneAndStyle": {"score": 75, "tips": []},
        "content": {"score": 68, "tips": []},
        "structure": {"score": 70, "tips": []},
        "skills": {"score": 65, "tips": []},
    }

    async def chat(
        self,
        prompt: str | list[AIMessage],
        options: dict[str, Any] | None = None,
    ) -> ServiceResult[AIResponse]:
        _ = prompt, options
        return ServiceResult.ok(AIResponse(message=AIMessage(content="This is an example reply.")))

    async def feedback(self, file_ref: str | UploadFile, instructions: str) -> ServiceResult[AIResponse]:
        _ = file_ref, instructions
        return ServiceResult.ok(
            AIResponse(message=AIMessage(content=json.dumps(self.DEFAULT_FEEDBACK)))
        )

    async def img2txt(self, image: str | UploadFile) -> ServiceResult[str]:
        _ = image
        return ServiceResult.ok("")
