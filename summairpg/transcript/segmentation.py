"""Cut a merged word sequence into speaker turns ("lines").

A line continues while the same speaker keeps talking without pausing for
:data:`GAP_THRESHOLD_SEC` seconds or longer. A change of speaker always
starts a new line. Lines are emitted in the order of the merged words; no
re-sorting happens here.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from summairpg.timestamps.models import Line, Word
from summairpg.utils.constant import TURN_GAP_SEC

__all__ = [
    "GAP_THRESHOLD_SEC",
    "parse_transcript",
    "render_transcript",
    "segment_turns",
]

GAP_THRESHOLD_SEC: float = TURN_GAP_SEC

_SPEAKER_SEPARATOR = ": "


def segment_turns(
    words: Sequence[Word],
    gap_threshold: float = GAP_THRESHOLD_SEC,
) -> list[Line]:
    """Group consecutive words of one speaker into lines.

    The current word joins the open line when it has the same speaker as the
    previous word and ``current.start - previous.start < gap_threshold``.
    The comparison is strict: a gap of exactly ``gap_threshold`` seconds
    opens a new line.

    Args:
        words: Merged, time-ordered words.
        gap_threshold: Longest pause (seconds, exclusive) inside one line.

    Returns:
        list[Line]: Lines in word order; empty for empty input. Concatenating
        the words of all lines reproduces ``words`` exactly.
    """
    if not words:
        return []

    lines: list[Line] = []
    current: list[Word] = [words[0]]
    for word in words[1:]:
        last = current[-1]
        if word.speaker_id == last.speaker_id and (word.start - last.start) < gap_threshold:
            current.append(word)
            continue
        lines.append(Line(speaker_id=current[0].speaker_id, words=current))
        current = [word]
    lines.append(Line(speaker_id=current[0].speaker_id, words=current))
    return lines


def render_transcript(lines: Iterable[Line]) -> str:
    """Flatten lines into ``"speaker: words"`` rows joined by newlines."""
    return "\n".join(line.render() for line in lines)


def parse_transcript(text: str) -> list[Line]:
    """Read a transcript previously produced by :func:`render_transcript`.

    Rows without a ``"speaker: "`` prefix are treated as a continuation of the
    current speaker (or of an unnamed speaker at the very top). A bare
    ``"speaker:"`` row switches the speaker without adding words. Parsed words
    carry no timing, so every start is ``0``.

    Args:
        text: Transcript text, one speaker turn per row.

    Returns:
        list[Line]: Parsed lines; blank rows are skipped.
    """
    lines: list[Line] = []
    current = ""
    for raw in text.splitlines():
        row = raw.strip()
        if not row:
            continue
        speaker, sep, spoken = row.partition(_SPEAKER_SEPARATOR)
        if not sep and row.endswith(":") and not any(c.isspace() for c in row):
            # speaker label whose text was stripped away
            current = row[:-1]
            continue
        if sep:
            current = speaker
        else:
            spoken = row
        words = [Word(speaker_id=current, text=t, start=0.0) for t in spoken.split()]
        if not words:
            continue
        if not sep and lines and lines[-1].speaker_id == current:
            lines[-1].words.extend(words)
        else:
            lines.append(Line(speaker_id=current, words=words))
    return lines
