import pytest

from resume_analyzer.pipeline.exceptions import FeedbackParseError
from resume_analyzer.pipeline.feedback import message_text, parse_feedback, parse_feedback_text
from resume_analyzer.ports.models import AIMessage, AIResponse, ContentPart


def _make_response(content: str | list[ContentPart]) -> AIResponse:
    return AIResponse(message=AIMessage(content=content))


class TestMessageText:
    def test_string_passes_through(self) -> None:
        assert message_text('{"a": 1}') == '{"a": 1}'

    def test_uses_first_part_text(self) -> None:
        parts = [ContentPart(type="text", text="first"), ContentPart(type="text", text="second")]
        assert message_text(parts) == "first"

    def test_empty_list_raises(self) -> None:
        with pytest.raises(FeedbackParseError, match="empty"):
            message_text([])

    def test_first_part_without_text_raises(self) -> None:
        with pytest.raises(FeedbackParseError, match="no text part"):
            message_text([ContentPart(type="image_url")])


class TestParseFeedback:
    def test_string_and_list_forms_parse_alike(self) -> None:
        raw = '{"overallScore": 80, "ATS": {"score": 75, "tips": []}}'
        from_string = parse_feedback(_make_response(raw))
        from_parts = parse_feedback(_make_response([ContentPart(type="text", text=raw)]))
        assert from_string == from_parts == {"overallScore": 80, "ATS": {"score": 75, "tips": []}}

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(FeedbackParseError, match="Invalid JSON"):
            parse_feedback(_make_response("Looks great overall!"))


class TestParseFeedbackText:
    def test_strips_code_fences(self) -> None:
        raw = '```json\n{"overallScore": 55}\n```'
        assert parse_feedback_text(raw) == {"overallScore": 55}

    def test_strips_bare_fences(self) -> None:
        raw = '```\n{"overallScore": 55}\n```'
        assert parse_feedback_text(raw) == {"overallScore": 55}

    def test_tolerates_surrounding_whitespace(self) -> None:
        assert parse_feedback_text('\n  {"overallScore": 1}  \n') == {"overallScore": 1}

    def test_non_object_raises(self) -> None:
        with pytest.raises(FeedbackParseError, match="must be an object"):
            parse_feedback_text("[1, 2, 3]")
