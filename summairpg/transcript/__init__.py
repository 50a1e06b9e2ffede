"""Merging per-speaker word streams and cutting them into speaker turns.

Both stages work purely on :class:`~summairpg.timestamps.models.Word` objects,
perform no I/O and can be unit-tested without the transcription engine.
"""

from .merge import merge_word_streams, repair_timestamps, words_from_whisperx
from .segmentation import (
    GAP_THRESHOLD_SEC,
    parse_transcript,
    render_transcript,
    segment_turns,
)

__all__ = [
    "GAP_THRESHOLD_SEC",
    "merge_word_streams",
    "parse_transcript",
    "render_transcript",
    "repair_timestamps",
    "segment_turns",
    "words_from_whisperx",
]
