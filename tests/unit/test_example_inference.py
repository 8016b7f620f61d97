import json

from resume_analyzer.adapters.example_inference import ExampleInferenceAdapter
from resume_analyzer.pipeline.feedback import parse_feedback


class TestExampleInferenceAdapter:
    async def test_feedback_is_parseable(self) -> None:
        result = await ExampleInferenceAdapter().feedback("/uploads/1/resume.pdf", "Analyze")
        assert result.data is not None
        feedback = parse_feedback(result.data)
        assert feedback == ExampleInferenceAdapter.DEFAULT_FEEDBACK
        assert set(feedback) == {"overallScore", "ATS", "toneAndStyle", "content", "structure", "skills"}

    async def test_feedback_content_is_json_string(self) -> None:
        result = await ExampleInferenceAdapter().feedback("/x.pdf", "Analyze")
        assert result.data is not None
        content = result.data.message.content
        assert isinstance(content, str)
        assert json.loads(content)["overallScore"] == 70

    async def test_chat_reply(self) -> None:
        result = await ExampleInferenceAdapter().chat("hello")
        assert result.data is not None
        assert result.data.message.content == "This is an example reply."
        assert result.data.message.role == "assistant"

    async def test_img2txt_is_empty(self) -> None:
        assert (await ExampleInferenceAdapter().img2txt("/x.png")).data == ""
