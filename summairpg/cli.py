"""Command-line interface for summairpg using Typer.

Features:
- `summarize` command: transcribe one recording per speaker (or reuse a
  transcript file) and summarize the session with Ollama or OpenAI.
- Settings are remembered in ``summairpg-config.json``; options given on the
  command line override the stored values.
"""

import pathlib
from typing import Annotated

import typer
from click.core import ParameterSource

from summairpg import __version__, pipeline
from summairpg.config import (
    ConfigError,
    apply_overrides,
    load_config,
    store_config,
    validate_config,
)
from summairpg.summarize.base import SummarizationError
from summairpg.transcription.whisperx import TranscriptionError
from summairpg.utils.constant import CONFIG_FILE
from summairpg.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def _given(ctx: typer.Context, name: str, value: object) -> object:
    """Return *value* only when the option was typed on the command line."""
    if ctx.get_parameter_source(name) is ParameterSource.COMMANDLINE:
        return value
    return None


def version_callback(value: bool) -> None:
    """Show the application's version and exit.

    Args:
        value: When True, print the version and exit.

    Raises:
        typer.Exit: Always raised after printing when value is True.

    """
    if value:
        print(f"summairpg version: {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="summairpg",
    help="Transcribe per-speaker session recordings and summarize them with an LLM.",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the application's version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Print help when no subcommand is given.

    Raises:
        typer.Exit: Raised to terminate after displaying help or version.

    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def summarize(
    ctx: typer.Context,
    # Audio input
    audio_dir: Annotated[
        str | None,
        typer.Option(
            "--audio-dir",
            help="Directory that contains one audio file per speaker.",
            show_default=False,
        ),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--language", help="Spoken language in the audio files."),
    ] = None,
    file_types: Annotated[
        str | None,
        typer.Option(
            "--file-types",
            help="Comma-separated audio file extensions to consider (e.g. 'flac,wav').",
        ),
    ] = None,
    whisper_model: Annotated[
        str | None,
        typer.Option("--whisper-model", help="WhisperX model used for transcription."),
    ] = None,
    transcript_file: Annotated[
        str | None,
        typer.Option(
            "--transcript-file",
            help="Skip transcription and summarize this transcript file instead.",
        ),
    ] = None,
    display_transcript: Annotated[
        bool | None,
        typer.Option(
            "--display-transcript/--hide-transcript",
            help="Print the whole transcript before summarizing.",
            show_default=False,
        ),
    ] = None,
    # Ollama
    ollama: Annotated[
        bool | None,
        typer.Option("--ollama/--no-ollama", help="Summarize with Ollama.", show_default=False),
    ] = None,
    ollama_address: Annotated[
        str | None,
        typer.Option("--ollama-address", help="host:port of the Ollama HTTP API."),
    ] = None,
    ollama_model: Annotated[
        str | None,
        typer.Option("--ollama-model", help="Ollama model to use."),
    ] = None,
    context_length_override: Annotated[
        int | None,
        typer.Option(
            "--context-length-override",
            min=0,
            help="Override the context length (num_ctx) derived from the model; 0 disables.",
        ),
    ] = None,
    update_model: Annotated[
        bool | None,
        typer.Option(
            "--update-model/--no-update-model",
            help="Pull the latest version of the Ollama model before use.",
            show_default=False,
        ),
    ] = None,
    # OpenAI
    openai: Annotated[
        bool | None,
        typer.Option(
            "--openai/--no-openai",
            help="Summarize with an OpenAI-compatible endpoint (needs OPENAI_API_KEY).",
            show_default=False,
        ),
    ] = None,
    openai_url: Annotated[
        str | None,
        typer.Option("--openai-url", help="Base URL of the OpenAI API endpoint."),
    ] = None,
    openai_model: Annotated[
        str | None,
        typer.Option("--openai-model", help="OpenAI model (Azure: deployment) to use."),
    ] = None,
    openai_org_id: Annotated[
        str | None,
        typer.Option("--openai-org-id", help="Organization sent as HTTP header."),
    ] = None,
    openai_api_type: Annotated[
        str | None,
        typer.Option(
            "--openai-api-type",
            help="Type of endpoint: OPEN_AI, AZURE or AZURE_AD.",
            case_sensitive=False,
        ),
    ] = None,
    openai_api_version: Annotated[
        str | None,
        typer.Option("--openai-api-version", help="Azure API version."),
    ] = None,
    # Config file
    config_file: Annotated[
        pathlib.Path,
        typer.Option(
            "--config",
            help="JSON file the settings are read from and stored to.",
            dir_okay=False,
        ),
    ] = CONFIG_FILE,
    store: Annotated[
        bool,
        typer.Option(
            "--store/--no-store",
            help="Store the effective settings in the config file.",
        ),
    ] = True,
    # UX and logging
    quiet: Annotated[
        bool,
        typer.Option("--quiet", help="Only print errors and the summary."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose output."),
    ] = False,
) -> str:
    """Transcribe the session recordings and print a summary.

    Returns:
        The summary text (also printed to stdout).

    Raises:
        typer.Exit: With code 1 on configuration, transcription or
            summarization errors.

    """
    configure_logging(verbose=verbose, quiet=quiet)

    overrides = {
        "audio": {
            "dir": audio_dir,
            "language": language,
            "file_types": file_types,
            "model": whisper_model,
            "transcript_file": transcript_file,
            "display_transcript": _given(ctx, "display_transcript", display_transcript),
        },
        "ollama": {
            "enabled": _given(ctx, "ollama", ollama),
            "address": ollama_address,
            "model": ollama_model,
            "context_length_override": context_length_override,
            "update_model": _given(ctx, "update_model", update_model),
        },
        "openai": {
            "enabled": _given(ctx, "openai", openai),
            "url": openai_url,
            "model": openai_model,
            "org_id": openai_org_id,
            "api_type": openai_api_type.upper() if openai_api_type else None,
            "api_version": openai_api_version,
        },
    }

    try:
        config = apply_overrides(load_config(config_file), overrides)
        validate_config(config)
    except ConfigError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    logger.info("Configuration read")

    if store:
        try:
            store_config(config, config_file)
        except OSError as exc:
            logger.warning("Could not create/update config file %s: %s", config_file, exc)

    try:
        summary = pipeline.run(config, show_progress=not quiet)
    except (TranscriptionError, SummarizationError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo("")
    typer.echo(summary)
    return summary


if __name__ == "__main__":
    app()
