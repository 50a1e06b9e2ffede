"""Unit tests for cutting merged words into speaker turns."""

from __future__ import annotations

from summairpg.timestamps.models import Word
from summairpg.transcript import (
    GAP_THRESHOLD_SEC,
    merge_word_streams,
    parse_transcript,
    render_transcript,
    segment_turns,
)


def _w(speaker: str, start: float, text: str = "w") -> Word:
    """Create a `Word` instance for test fixtures."""
    return Word(speaker_id=speaker, text=text, start=start)


def test_gap_threshold_default() -> None:
    """The default pause that ends a turn is five seconds."""
    assert GAP_THRESHOLD_SEC == 5.0


def test_gap_below_threshold_stays_in_line() -> None:
    """A 4.9 s pause keeps the words in one line."""
    lines = segment_turns([_w("A", 0.0), _w("A", 4.9)])
    assert len(lines) == 1
    assert len(lines[0].words) == 2


def test_gap_equal_to_threshold_splits() -> None:
    """A pause of exactly the threshold starts a new line."""
    lines = segment_turns([_w("A", 0.0), _w("A", 5.0)])
    assert len(lines) == 2
    assert all(line.speaker_id == "A" for line in lines)


def test_gap_is_measured_from_previous_word() -> None:
    """Short steps chain even when the line spans more than the threshold."""
    words = [_w("A", 0.0), _w("A", 3.0), _w("A", 6.0), _w("A", 9.0)]
    assert len(segment_turns(words)) == 1


def test_speaker_change_always_splits() -> None:
    """A new speaker starts a new line regardless of the gap."""
    lines = segment_turns([_w("A", 0.0), _w("B", 0.1)])
    assert [line.speaker_id for line in lines] == ["A", "B"]


def test_custom_gap_threshold() -> None:
    """The threshold can be tightened per call."""
    words = [_w("A", 0.0), _w("A", 1.5)]
    assert len(segment_turns(words, gap_threshold=1.0)) == 2


def test_empty_and_single_word() -> None:
    """Degenerate input yields degenerate but valid output."""
    assert segment_turns([]) == []
    lines = segment_turns([_w("A", 2.0, "hi")])
    assert len(lines) == 1
    assert lines[0].render() == "A: hi"


def test_lines_reconstruct_merged_sequence() -> None:
    """Concatenating line words reproduces the merged words exactly."""
    streams = {
        "alice": [_w("alice", 0.0, "We"), _w("alice", 0.5, "enter"), _w("alice", 9.0, "Run!")],
        "bob": [_w("bob", 1.0, "I"), _w("bob", 1.2, "follow"), _w("bob", 9.5, "Why?")],
    }
    merged = merge_word_streams(streams)
    lines = segment_turns(merged)
    flattened = [w for line in lines for w in line.words]
    assert flattened == merged
    assert render_transcript(lines) == "\n".join(
        ["alice: We enter", "bob: I follow", "alice: Run!", "bob: Why?"]
    )


def test_render_empty_transcript() -> None:
    """No lines render to an empty string."""
    assert render_transcript([]) == ""


def test_parse_transcript_round_trips_rendered_text() -> None:
    """A rendered transcript parses back into the same speakers and text."""
    text = "gm: You see a door.\n\nbob: I open it.\nslowly\n"
    lines = parse_transcript(text)
    assert [line.render() for line in lines] == [
        "gm: You see a door.",
        "bob: I open it. slowly",
    ]


def test_parse_transcript_without_speaker() -> None:
    """Rows before any speaker belong to an unnamed speaker."""
    lines = parse_transcript("just words\n")
    assert lines[0].speaker_id == ""
    assert lines[0].text == "just words"
    assert parse_transcript("") == []


def test_parse_transcript_speaker_row_without_words() -> None:
    """A speaker label with nothing spoken never leaks into the previous line."""
    lines = parse_transcript("gm: Hello\nbob: \nthere\n")
    assert [line.render() for line in lines] == ["gm: Hello", "bob: there"]
    assert all(w.speaker_id == "bob" for w in lines[1].words)


def test_parse_transcript_trailing_empty_speaker_row() -> None:
    """A trailing empty speaker row adds no line."""
    assert [line.render() for line in parse_transcript("gm: Hello\nbob:\n")] == ["gm: Hello"]
