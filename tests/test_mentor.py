"""
Mentor chat and transcription tests, using a fake Gemini client.
"""

import base64

import pytest

from cloudmentor.errors import TransportError, ValidationError
from cloudmentor.mentor import (
    MentorClient,
    MentorSession,
    default_greeting,
    to_contents,
    transcribe_audio,
)
from cloudmentor.schemas import ChatMessage


def user(text):
    return ChatMessage(role="user", content=text)


def assistant(text):
    return ChatMessage(role="assistant", content=text)


def drain(stream):
    """Collect fragments until the stream ends or fails."""
    fragments = []
    errors = []
    try:
        for fragment in stream:
            fragments.append(fragment)
    except TransportError as e:
        errors.append(e)
    return fragments, errors


class TestContents:
    """Test transcript conversion."""

    def test_roles_mapped(self):
        contents = to_contents([user("hi"), assistant("hello"), user("EC2?")])
        assert [c.role for c in contents] == ["user", "model", "user"]
        assert contents[2].parts[0].text == "EC2?"

    def test_leading_greeting_dropped(self):
        contents = to_contents([assistant("Hello!"), user("What is S3?")])
        assert len(contents) == 1
        assert contents[0].role == "user"


class TestMentorClient:
    """Test the streaming wrapper."""

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            MentorClient()

    def test_stream_yields_fragments(self, fake_genai):
        fake = fake_genai(chunks=["Amazon ", "", "EC2 is ", "compute."])
        client = MentorClient(client=fake, model="test-model", temperature=0.2)
        assert list(client.stream_reply([user("What is EC2?")])) == ["Amazon ", "EC2 is ", "compute."]

        call = fake.models.stream_calls[0]
        assert call["model"] == "test-model"
        assert call["config"].temperature == 0.2
        assert "CloudMentor" in call["config"].system_instruction

    def test_failure_after_partial_output(self, fake_genai):
        client = MentorClient(client=fake_genai(chunks=["Hel", "lo", " world"], fail_at=2))
        fragments, errors = drain(client.stream_reply([user("hi")]))
        assert fragments == ["Hel", "lo"]
        assert len(errors) == 1

    def test_failure_before_output(self, fake_genai):
        client = MentorClient(client=fake_genai(chunks=["never"], fail_at=0))
        fragments, errors = drain(client.stream_reply([user("hi")]))
        assert fragments == []
        assert len(errors) == 1

    def test_no_user_message(self, fake_genai):
        client = MentorClient(client=fake_genai())
        with pytest.raises(ValidationError):
            next(client.stream_reply([assistant("Hello!")]))

    def test_close_stops_stream(self, fake_genai):
        client = MentorClient(client=fake_genai(chunks=["a", "b", "c"]))
        stream = client.stream_reply([user("hi")])
        assert next(stream) == "a"
        stream.close()
        with pytest.raises(StopIteration):
            next(stream)

    def test_generate(self, fake_genai):
        client = MentorClient(client=fake_genai(text="answer"))
        assert client.generate("prompt", system_prompt="sys", temperature=0.1) == "answer"

    def test_generate_failure(self, fake_genai):
        client = MentorClient(client=fake_genai(error=RuntimeError("quota")))
        with pytest.raises(TransportError):
            client.generate("prompt")


class TestMentorSession:
    """Test the visible transcript."""

    def test_starts_with_greeting(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai()))
        assert len(session.transcript) == 1
        assert session.transcript[0].role == "assistant"
        assert session.transcript[0].content == default_greeting()

    def test_empty_question_rejected(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai()))
        with pytest.raises(ValidationError):
            session.ask("   ")
        assert len(session.transcript) == 1

    def test_full_reply_recorded(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai(chunks=["S3 is ", "storage."])))
        assert "".join(session.ask("What is S3?")) == "S3 is storage."
        assert [m.role for m in session.transcript] == ["assistant", "user", "assistant"]
        assert session.last_reply == "S3 is storage."

    def test_history_sent_without_greeting(self, fake_genai):
        fake = fake_genai(chunks=["ok"])
        session = MentorSession(MentorClient(client=fake), greeting="Hi there")
        list(session.ask("First"))
        list(session.ask("Second"))
        contents = fake.models.stream_calls[1]["contents"]
        assert [c.role for c in contents] == ["user", "model", "user"]

    def test_partial_reply_kept_on_failure(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai(chunks=["Hel", "lo", "!"], fail_at=2)))
        fragments, errors = drain(session.ask("hi"))
        assert fragments == ["Hel", "lo"]
        assert len(errors) == 1
        assert session.last_reply == "Hello"

    def test_cancel_keeps_partial_reply(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai(chunks=["a", "b", "c"])))
        stream = session.ask("hi")
        next(stream)
        stream.close()
        assert session.transcript[-1].content == "a"

    def test_failure_without_output_records_nothing(self, fake_genai):
        session = MentorSession(MentorClient(client=fake_genai(chunks=["x"], fail_at=0)))
        drain(session.ask("hi"))
        assert [m.role for m in session.transcript] == ["assistant", "user"]


class TestTranscription:
    """Test the voice question stub."""

    def test_no_audio(self):
        with pytest.raises(ValidationError):
            transcribe_audio(b"")
        with pytest.raises(ValidationError):
            transcribe_audio(None)

    def test_fallback_without_client(self):
        assert transcribe_audio(b"RIFF....").text == "What is AWS EC2?"

    def test_model_text_stripped(self, fake_genai):
        fake = fake_genai(text="  How do I size an EC2 instance?\n")
        result = transcribe_audio(b"\x00\x01audio", MentorClient(client=fake))
        assert result.text == "How do I size an EC2 instance?"
        prompt = fake.models.generate_calls[0]["contents"]
        assert base64.b64encode(b"\x00\x01audio").decode("ascii") in prompt

    def test_empty_model_text_uses_fallback(self, fake_genai):
        result = transcribe_audio(b"audio", MentorClient(client=fake_genai(text="   ")))
        assert result.text == "What is AWS EC2?"

    def test_model_failure(self, fake_genai):
        client = MentorClient(client=fake_genai(error=RuntimeError("down")))
        with pytest.raises(TransportError):
            transcribe_audio(b"audio", client)
