"""Speech-to-text collaborator: runs WhisperX per recording."""

from .whisperx import (
    AudioSource,
    TranscriptionError,
    discover_audio_sources,
    run_whisperx,
    transcribe_directory,
)

__all__ = [
    "AudioSource",
    "TranscriptionError",
    "discover_audio_sources",
    "run_whisperx",
    "transcribe_directory",
]
