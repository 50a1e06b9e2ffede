"""Unit tests for the shared word, line and prompt models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from summairpg.timestamps.models import Line, PromptPlan, WhisperxResult, Word


def test_word_is_immutable_and_prints_text() -> None:
    """Words are frozen and render as their text."""
    word = Word(speaker_id="alice", text="Hello,", start=1.5)
    assert str(word) == "Hello,"
    with pytest.raises(ValidationError):
        word.start = 2.0  # type: ignore[misc]


def test_word_rejects_negative_start() -> None:
    """Start times are seconds from the recording start and never negative."""
    with pytest.raises(ValidationError):
        Word(speaker_id="alice", text="x", start=-0.1)


def test_line_render_and_text() -> None:
    """A line renders as ``speaker: words`` with single spaces."""
    line = Line(
        speaker_id="bob",
        words=[
            Word(speaker_id="bob", text="I", start=0.0),
            Word(speaker_id="bob", text="attack!", start=0.4),
        ],
    )
    assert line.text == "I attack!"
    assert line.render() == "bob: I attack!"
    assert line.start == 0.0


def test_line_must_not_be_empty() -> None:
    """A line always holds at least one word."""
    with pytest.raises(ValidationError):
        Line(speaker_id="bob", words=[])


def test_whisperx_result_accepts_unaligned_words() -> None:
    """Words the aligner could not place come without timing fields."""
    result = WhisperxResult.model_validate(
        {
            "segments": [{"start": 0.0, "end": 1.0, "text": "rolled 20", "words": []}],
            "word_segments": [
                {"word": "rolled", "start": 0.1, "end": 0.4, "score": 0.9},
                {"word": "20"},
            ],
        }
    )
    assert result.word_segments[1].start == 0.0
    assert result.word_segments[1].score is None


def test_prompt_plan_messages_order() -> None:
    """The plan exposes the system message before the user message."""
    plan = PromptPlan(
        system_prompt="sys", user_text="a: b", estimated_tokens=10, context_length=2048
    )
    roles = [m.role for m in plan.messages()]
    assert roles == ["system", "user"]
    assert plan.messages()[1].content == "a: b"
