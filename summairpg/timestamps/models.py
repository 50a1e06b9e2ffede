"""Common data models for timestamped transcripts and summary prompts.

This module defines pydantic models that are shared across transcription,
merging, segmentation and summarization.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Word",
    "Line",
    "WhisperxWord",
    "WhisperxSegment",
    "WhisperxResult",
    "ChatMessage",
    "ModelProfile",
    "PromptPlan",
]


class Word(BaseModel):
    """A single transcribed word attributed to the speaker of its recording.

    A ``start`` of ``0`` may mean the aligner produced no timestamp for the
    word; see :func:`summairpg.transcript.merge.repair_timestamps`.
    """

    model_config = ConfigDict(frozen=True)

    speaker_id: str = Field(..., description="Speaker, derived from the source file.")
    text: str = Field(..., description="The spoken word including punctuation.")
    start: float = Field(
        ..., ge=0.0, description="Start time relative to the recording start (seconds)."
    )

    def __str__(self) -> str:
        return self.text


class Line(BaseModel):
    """A maximal run of words spoken by one speaker without a long pause."""

    speaker_id: str = Field(..., description="Speaker of every word in the line.")
    words: list[Word] = Field(..., min_length=1, description="Words in spoken order.")

    @property
    def text(self) -> str:
        """Return all words joined by a single space."""
        return " ".join(w.text for w in self.words)

    @property
    def start(self) -> float:
        """Start time of the first word (seconds)."""
        return self.words[0].start

    def render(self) -> str:
        """Return the line as ``"speaker: word1 word2 ..."``."""
        return f"{self.speaker_id}: {self.text}"


class WhisperxWord(BaseModel):
    """One entry of the engine's ``word_segments`` list.

    Words the aligner could not place (numbers, symbols) come without
    ``start``/``end``/``score``.
    """

    word: str = Field(..., description="The transcribed word.")
    start: float = Field(0.0, description="Start time of the word in seconds.")
    end: float = Field(0.0, description="End time of the word in seconds.")
    score: float | None = Field(None, description="Optional alignment confidence.")


class WhisperxSegment(BaseModel):
    """A sentence-level segment of the engine output."""

    start: float = Field(0.0, description="Segment start time (seconds).")
    end: float = Field(0.0, description="Segment end time (seconds).")
    text: str = Field("", description="Segment text.")
    words: list[WhisperxWord] = Field(default_factory=list)


class WhisperxResult(BaseModel):
    """Full JSON output written by the transcription engine for one file."""

    segments: list[WhisperxSegment] = Field(default_factory=list)
    word_segments: list[WhisperxWord] = Field(
        default_factory=list, description="Flat list of all aligned words."
    )


class ChatMessage(BaseModel):
    """A single chat-completion message."""

    role: str
    content: str
    name: str = ""


class ModelProfile(BaseModel):
    """What the planner knows about a summarization model."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_context_tokens: int = Field(..., gt=0)
    is_elastic: bool = False


class PromptPlan(BaseModel):
    """Budgeted two-message prompt ready for a summarization backend."""

    system_prompt: str
    user_text: str
    estimated_tokens: int
    context_length: int
    over_budget: bool = False

    def messages(self) -> list[ChatMessage]:
        """Return the system and user messages in request order."""
        return [
            ChatMessage(role="system", content=self.system_prompt),
            ChatMessage(role="user", content=self.user_text),
        ]
