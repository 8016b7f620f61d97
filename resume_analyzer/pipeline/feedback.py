"""Turns an inference reply into a structured feedback object."""

import json
from typing import Any

from resume_analyzer.pipeline.exceptions import FeedbackParseError
from resume_analyzer.ports.models import AIResponse, ContentPart, MessageContent


def message_text(content: MessageContent) -> str:
    """Collapse reply content to one string.

    Plain strings pass through; for a list of parts the first part's text
    is used.
    """
    if isinstance(content, str):
        return content
    if not content:
        raise FeedbackParseError("AI response content is empty")
    first = content[0]
    if not isinstance(first, ContentPart) or not first.text:
        raise FeedbackParseError("AI response content has no text part")
    return first.text


def parse_feedback(response: AIResponse) -> dict[str, Any]:
    """Extract and parse the JSON feedback object carried by ``response``."""
    return parse_feedback_text(message_text(response.message.content))


def parse_feedback_text(raw: str) -> dict[str, Any]:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise FeedbackParseError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise FeedbackParseError("JSON response must be an object")
    return parsed
