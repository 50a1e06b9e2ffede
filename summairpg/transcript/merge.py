"""Merge per-speaker word streams into one chronological sequence.

Every recording is transcribed on its own, so each speaker yields a word list
that is ordered in itself but knows nothing about the other speakers. The
helpers here

* convert one engine result into speaker-tagged :class:`Word` objects,
* repair words the aligner left without a timestamp, and
* interleave all speakers by start time.

All functions return **new** lists; inputs are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from summairpg.timestamps.models import WhisperxResult, Word

__all__ = [
    "MISSING_TIMESTAMP",
    "merge_word_streams",
    "repair_timestamps",
    "words_from_whisperx",
]

logger = logging.getLogger(__name__)

# The aligner reports ``0`` for words it could not place in time.
MISSING_TIMESTAMP = 0.0


def words_from_whisperx(speaker_id: str, result: WhisperxResult) -> list[Word]:
    """Convert the engine's flat ``word_segments`` into speaker-tagged words.

    Args:
        speaker_id: Speaker the recording belongs to.
        result: Parsed engine output for that recording.

    Returns:
        list[Word]: Words in engine order; timestamps are not repaired here.
    """
    return [
        Word(speaker_id=speaker_id, text=w.word, start=max(w.start, 0.0))
        for w in result.word_segments
    ]


def repair_timestamps(words: Sequence[Word]) -> list[Word]:
    """Give words without a timestamp the last known start time of their file.

    Scanning forward, a word starting at :data:`MISSING_TIMESTAMP` inherits the
    most recent non-missing start seen before it. Leading words keep ``0``
    because there is nothing to inherit yet.

    Must be applied to one recording at a time so that inheritance never
    crosses speaker boundaries.

    Args:
        words: Words of a single recording in engine order.

    Returns:
        list[Word]: Repaired copies (unchanged words are reused as-is).

    Examples:
        Start times ``[0, 0, 2.0, 0]`` become ``[0, 0, 2.0, 2.0]``.
    """
    repaired: list[Word] = []
    last_start: float | None = None
    for word in words:
        if word.start != MISSING_TIMESTAMP:
            last_start = word.start
            repaired.append(word)
        elif last_start is not None:
            repaired.append(word.model_copy(update={"start": last_start}))
        else:
            repaired.append(word)
    return repaired


def merge_word_streams(streams: Mapping[str, Sequence[Word]]) -> list[Word]:
    """Repair each recording's words, then interleave them by start time.

    The sort is stable and keyed on ``start`` only, so words with equal start
    times keep the order of ``streams`` and of their own recording. That makes
    the result deterministic for identical input.

    Args:
        streams: Mapping of source identity (one per recording) to its words.

    Returns:
        list[Word]: Every input word exactly once, ordered by ``start``.
        Empty when no recording produced any words.
    """
    merged: list[Word] = []
    for source, words in streams.items():
        if not words:
            logger.debug("No words transcribed for %s", source)
            continue
        merged.extend(repair_timestamps(words))
    merged.sort(key=lambda w: w.start)
    return merged
