import base64
from pathlib import PurePosixPath
from typing import Any

import httpx
import openai

from resume_analyzer.ports.base import BaseBlobStorage, BaseInferenceService
from resume_analyzer.ports.models import AIMessage, AIResponse, ContentPart, UploadFile
from resume_analyzer.ports.result import ServiceResult

_IMG2TXT_PROMPT = "Transcribe all text visible in this image. Reply with the text only."


class OpenAIInferenceAdapter(BaseInferenceService):
    """Inference adapter built on the OpenAI-compatible chat completions API.

    Documents referenced by storage path are read through ``storage`` and
    sent inline as base64 file parts.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        storage: BaseBlobStorage,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._model = model
        self._storage = storage

    async def chat(
        self,
        prompt: str | list[AIMessage],
        options: dict[str, Any] | None = None,
    ) -> ServiceResult[AIResponse]:
        if isinstance(prompt, str):
            messages = [{"role": "user", "content": prompt}]
        else:
            messages = [self._message_payload(message) for message in prompt]
        return await self._complete(messages, options or {})

    async def feedback(self, file_ref: str | UploadFile, instructions: str) -> ServiceResult[AIResponse]:
        loaded = await self._load(file_ref)
        if loaded.error is not None or loaded.data is None:
            return ServiceResult.fail(loaded.error or "Document could not be loaded")
        document = loaded.data
        encoded = base64.b64encode(document.content).decode("ascii")
        messages = [
            {
                "role": "user",
                "content": [
                    {
                        "type": "file",
                        "file": {
                            "filename": document.name,
                            "file_data": f"data:{document.media_type};base64,{encoded}",
                        },
                    },
                    {"type": "text", "text": instructions},
                ],
            }
        ]
        return await self._complete(messages, {})

    async def img2txt(self, image: str | UploadFile) -> ServiceResult[str]:
        loaded = await self._load(image, default_media_type="image/png")
        if loaded.error is not None or loaded.data is None:
            return ServiceResult.fail(loaded.error or "Image could not be loaded")
        encoded = base64.b64encode(loaded.data.content).decode("ascii")
        messages = [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{loaded.data.media_type};base64,{encoded}"},
                    },
                    {"type": "text", "text": _IMG2TXT_PROMPT},
                ],
            }
        ]
        result = await self._complete(messages, {})
        if result.error is not None or result.data is None:
            return ServiceResult.fail(result.error or "Image-to-text operation failed")
        content = result.data.message.content
        return ServiceResult.ok(content if isinstance(content, str) else "")

    async def _complete(
        self,
        messages: list[dict[str, Any]],
        options: dict[str, Any],
    ) -> ServiceResult[AIResponse]:
        params = {"model": self._model, **options}
        try:
            response = await self._client.chat.completions.create(messages=messages, **params)
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            return ServiceResult.fail(f"AI provider network error: {exc}")
        except openai.APIError as exc:
            return ServiceResult.fail(f"AI provider API error: {exc}")

        if not response.choices:
            return ServiceResult.fail("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            return ServiceResult.fail("AI returned empty response")
        return ServiceResult.ok(AIResponse(message=AIMessage(content=content)))

    async def _load(
        self,
        ref: str | UploadFile,
        default_media_type: str = "application/pdf",
    ) -> ServiceResult[UploadFile]:
        if isinstance(ref, UploadFile):
            return ServiceResult.ok(ref)
        read = await self._storage.read(ref)
        if read.error is not None or read.data is None:
            return ServiceResult.fail(read.error or f"File not found: {ref}")
        name = PurePosixPath(ref).name
        media_type = "application/pdf" if name.lower().endswith(".pdf") else default_media_type
        return ServiceResult.ok(UploadFile(name=name, content=read.data, media_type=media_type))

    @staticmethod
    def _message_payload(message: AIMessage) -> dict[str, Any]:
        if isinstance(message.content, str):
            return {"role": message.role, "content": message.content}
        return {
            "role": message.role,
            "content": [_part_payload(part) for part in message.content],
        }


def _part_payload(part: ContentPart) -> dict[str, Any]:
    if part.type == "text":
        return {"type": "text", "text": part.text, **part.extra}
    return {"type": part.type, **part.extra}
