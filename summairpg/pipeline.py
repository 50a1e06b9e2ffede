"""End-to-end flow: recordings -> speaker turns -> summary."""

from __future__ import annotations

import pathlib
import subprocess
from collections.abc import Mapping, Sequence

from rich.console import Console

from summairpg.config import AppConfig
from summairpg.summarize import Summarizer, create_summarizer
from summairpg.timestamps.models import Line, Word
from summairpg.transcript.merge import merge_word_streams
from summairpg.transcript.segmentation import parse_transcript, segment_turns
from summairpg.transcription.whisperx import Runner, TranscriptionError, transcribe_directory
from summairpg.utils.logging_config import get_logger

__all__ = ["build_lines", "load_transcript_lines", "run"]

logger = get_logger(__name__)


def build_lines(streams: Mapping[str, Sequence[Word]]) -> list[Line]:
    """Merge per-recording words and cut them into speaker turns."""
    words = merge_word_streams(streams)
    lines = segment_turns(words)
    logger.info("Transcription finished: %d words, %d lines", len(words), len(lines))
    return lines


def load_transcript_lines(
    config: AppConfig,
    *,
    runner: Runner = subprocess.run,
    show_progress: bool = True,
) -> list[Line]:
    """Produce the transcript lines, either from a file or by transcribing.

    Raises:
        TranscriptionError: When the transcript file cannot be read, the
            audio directory is missing, or WhisperX fails.
    """
    audio = config.audio
    if audio.transcript_file:
        path = pathlib.Path(audio.transcript_file)
        logger.info("Using existing transcript %s, skipping transcription", path)
        try:
            return parse_transcript(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise TranscriptionError(f"could not read transcript file {str(path)!r}: {exc}") from exc

    logger.info(
        "Starting transcription (audio-dir=%s, file-types=%s, language=%s, model=%s)",
        audio.dir,
        ",".join(audio.file_types),
        audio.language,
        audio.model,
    )
    try:
        streams = transcribe_directory(
            pathlib.Path(audio.dir),
            language=audio.language,
            model=audio.model,
            file_types=audio.file_types,
            runner=runner,
            show_progress=show_progress,
        )
    except FileNotFoundError as exc:
        raise TranscriptionError(str(exc)) from exc
    return build_lines(streams)


def run(
    config: AppConfig,
    *,
    summarizer: Summarizer | None = None,
    console: Console | None = None,
    runner: Runner = subprocess.run,
    show_progress: bool = True,
) -> str:
    """Transcribe (or load) the session and return its summary.

    Args:
        config: Validated application configuration.
        summarizer: Backend to use; built from *config* when omitted.
        console: Console the transcript is printed to when
            ``audio.display_transcript`` is set.
        runner: ``subprocess.run`` compatible callable for WhisperX.
        show_progress: Render a progress bar while transcribing.

    Returns:
        str: The summary text.

    Raises:
        TranscriptionError: See :func:`load_transcript_lines`.
        SummarizationError: When the backend fails.
    """
    lines = load_transcript_lines(config, runner=runner, show_progress=show_progress)

    if config.audio.display_transcript:
        console = console or Console()
        console.print()
        for line in lines:
            console.print(line.render(), markup=False, highlight=False)
        console.print()

    owned = summarizer is None
    backend = summarizer if summarizer is not None else create_summarizer(config)
    try:
        update = getattr(backend, "update_model", None)
        if config.ollama.enabled and config.ollama.update_model and callable(update):
            update()
        logger.info("Starting summary with model %s", backend.model)
        summary = backend.summarize(lines)
    finally:
        if owned:
            backend.close()
    logger.info("Summary finished")
    return summary
