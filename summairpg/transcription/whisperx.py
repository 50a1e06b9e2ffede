"""Drive the WhisperX command-line tool, one recording per speaker.

Each audio file in the input directory holds a single speaker; the file stem
(``alice.flac`` -> ``alice``) becomes the speaker id of every word in it.
WhisperX writes a JSON result per file which is parsed into
:class:`~summairpg.timestamps.models.WhisperxResult`.

Files are transcribed one after another. Completion order does not matter
because :func:`summairpg.transcript.merge.merge_word_streams` re-establishes
global time order afterwards.
"""

from __future__ import annotations

import json
import logging
import pathlib
import subprocess
import tempfile
from collections.abc import Callable, Sequence
from contextlib import nullcontext
from dataclasses import dataclass

from pydantic import ValidationError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from summairpg.timestamps.models import WhisperxResult, Word
from summairpg.transcript.merge import words_from_whisperx
from summairpg.utils.constant import WHISPERX_ALIGN_MODEL, WHISPERX_BATCH_SIZE

__all__ = [
    "AudioSource",
    "TranscriptionError",
    "discover_audio_sources",
    "run_whisperx",
    "transcribe_directory",
]

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class TranscriptionError(RuntimeError):
    """Raised when WhisperX fails or its output cannot be read."""


@dataclass(frozen=True)
class AudioSource:
    """One recording and the speaker it belongs to.

    Attributes:
        speaker_id: File stem used as speaker name.
        path: Absolute path to the audio file.
    """

    speaker_id: str
    path: pathlib.Path


def discover_audio_sources(
    directory: pathlib.Path,
    file_types: Sequence[str],
) -> list[AudioSource]:
    """List the recordings in *directory* whose extension is in *file_types*.

    Args:
        directory: Directory to scan (not recursive).
        file_types: Accepted extensions, with or without leading dot.

    Returns:
        list[AudioSource]: Sources sorted by filename.

    Raises:
        FileNotFoundError: When *directory* does not exist.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"could not open directory {str(directory)!r}")

    exts = {"." + t.lower().lstrip(".") for t in file_types}
    sources = [
        AudioSource(speaker_id=p.stem, path=p.resolve())
        for p in sorted(directory.iterdir())
        if p.is_file() and p.suffix.lower() in exts
    ]
    logger.debug("Found %d recordings in %s", len(sources), directory)
    return sources


def _whisperx_command(
    source: AudioSource,
    out_dir: pathlib.Path,
    language: str,
    model: str,
) -> list[str]:
    return [
        "whisperx",
        "--model", model,
        "--align_model", WHISPERX_ALIGN_MODEL,
        "--batch_size", str(WHISPERX_BATCH_SIZE),
        "--task", "transcribe",
        "--output_dir", str(out_dir),
        "--output_format", "json",
        "--language", language,
        str(source.path),
    ]  # fmt: skip


def run_whisperx(
    source: AudioSource,
    out_dir: pathlib.Path,
    *,
    language: str,
    model: str,
    runner: Runner = subprocess.run,
) -> WhisperxResult:
    """Transcribe a single recording and parse the JSON WhisperX writes.

    Args:
        source: Recording to transcribe.
        out_dir: Directory WhisperX writes ``<stem>.json`` into.
        language: Spoken language code.
        model: Whisper model name.
        runner: ``subprocess.run`` compatible callable.

    Returns:
        WhisperxResult: Parsed engine output.

    Raises:
        TranscriptionError: When the command fails or the output is unusable.
    """
    cmd = _whisperx_command(source, out_dir, language, model)
    logger.debug("Running %s", " ".join(cmd))
    try:
        proc = runner(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise TranscriptionError(f"could not run whisperx: {exc}") from exc
    if proc.returncode != 0:
        output = (proc.stdout or "") + (proc.stderr or "")
        raise TranscriptionError(
            f"could not transcribe file {str(source.path)!r}, output:\n{output}"
        )

    out_file = out_dir / f"{source.path.stem}.json"
    try:
        data = json.loads(out_file.read_text(encoding="utf-8"))
        return WhisperxResult.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise TranscriptionError(
            f"could not read whisperx output {str(out_file)!r}: {exc}"
        ) from exc


def transcribe_directory(
    directory: pathlib.Path,
    *,
    language: str,
    model: str,
    file_types: Sequence[str],
    runner: Runner = subprocess.run,
    show_progress: bool = True,
) -> dict[str, list[Word]]:
    """Transcribe every recording in *directory*.

    Args:
        directory: Directory holding one recording per speaker.
        language: Spoken language code.
        model: Whisper model name.
        file_types: Accepted audio extensions.
        runner: ``subprocess.run`` compatible callable.
        show_progress: Render a Rich progress bar on the console.

    Returns:
        dict[str, list[Word]]: Words per recording path, in engine order
        (timestamps not yet repaired).

    Raises:
        FileNotFoundError: When *directory* does not exist.
        TranscriptionError: When any recording fails.
    """
    sources = discover_audio_sources(directory, file_types)
    if not sources:
        logger.warning("No audio files with types %s found in %s", list(file_types), directory)

    streams: dict[str, list[Word]] = {}
    progress_cm = (
        Progress(
            SpinnerColumn(),
            BarColumn(bar_width=None),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=False,
        )
        if show_progress
        else nullcontext()
    )
    with tempfile.TemporaryDirectory(prefix="summairpg-") as tmp, progress_cm as progress:
        task = progress.add_task("Transcribing...", total=len(sources)) if show_progress else None
        for source in sources:
            if progress is not None:
                progress.update(task, description=f"Transcribing {source.path.name}")
            result = run_whisperx(
                source,
                pathlib.Path(tmp),
                language=language,
                model=model,
                runner=runner,
            )
            streams[str(source.path)] = words_from_whisperx(source.speaker_id, result)
            logger.info(
                "Transcribed %s: %d words", source.path.name, len(streams[str(source.path)])
            )
            if progress is not None:
                progress.advance(task)
    return streams
