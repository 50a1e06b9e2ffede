"""Application configuration stored in ``summairpg-config.json``.

Settings come from three layers, later ones winning:

1. defaults from :mod:`summairpg.utils.constant` (themselves env-overridable),
2. the JSON config file written by a previous run,
3. options given explicitly on the command line.

The merged result is validated and, unless disabled, written back to the
config file so the next run starts from the same settings.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from summairpg.utils.constant import (
    DEFAULT_AUDIO_DIR,
    DEFAULT_AUDIO_FILE_TYPES,
    DEFAULT_AUDIO_LANGUAGE,
    OLLAMA_ADDRESS,
    OLLAMA_MODEL_NAME,
    OPENAI_BASE_URL,
    OPENAI_MODEL_NAME,
    WHISPERX_MODEL_NAME,
)

__all__ = [
    "AppConfig",
    "AudioConfig",
    "ConfigError",
    "OllamaConfig",
    "OpenAIConfig",
    "apply_overrides",
    "load_config",
    "store_config",
    "validate_config",
]

logger = logging.getLogger(__name__)

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"


class ConfigError(ValueError):
    """Raised when the configuration cannot be loaded or is inconsistent."""


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AudioConfig(_Section):
    """Settings for the input recordings.

    Attributes:
        transcript_file: When set, transcription is skipped and this file's
            content is used as the summarization input.
        dir: Directory containing one recording per speaker.
        language: Spoken language passed to the transcription engine.
        file_types: Extensions (without dot) considered as recordings.
        model: Speech-to-text model used by the transcription engine.
        display_transcript: Print the whole transcript before summarizing.
    """

    transcript_file: str = Field(default="", alias="transcript-file")
    dir: str = DEFAULT_AUDIO_DIR
    language: str = DEFAULT_AUDIO_LANGUAGE
    file_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AUDIO_FILE_TYPES), alias="file-types"
    )
    model: str = WHISPERX_MODEL_NAME
    display_transcript: bool = Field(default=False, alias="display-transcript")

    @field_validator("file_types", mode="before")
    @classmethod
    def _split_file_types(cls, value: Any) -> Any:
        """Accept ``"flac,wav"`` as well as ``["flac", "wav"]``."""
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [str(v).strip().lstrip(".").lower() for v in value if str(v).strip()]
        return value


class OllamaConfig(_Section):
    """Settings for summarizing with Ollama."""

    enabled: bool = True
    address: str = OLLAMA_ADDRESS
    model: str = OLLAMA_MODEL_NAME
    # Key spelling matches config files written by earlier releases.
    context_length_override: int = Field(
        default=0, ge=0, alias="content-length-override"
    )
    update_model: bool = Field(default=True, alias="update-model")


class OpenAIConfig(_Section):
    """Settings for summarizing with an OpenAI-compatible endpoint."""

    enabled: bool = False
    url: str = OPENAI_BASE_URL
    model: str = OPENAI_MODEL_NAME
    org_id: str = Field(default="", alias="org-id")
    api_type: Literal["OPEN_AI", "AZURE", "AZURE_AD"] = Field(
        default="OPEN_AI", alias="api-type"
    )
    api_version: str = Field(default="", alias="api-version")


class AppConfig(_Section):
    """Complete application configuration."""

    audio: AudioConfig = Field(default_factory=AudioConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)


def load_config(path: pathlib.Path) -> AppConfig:
    """Load the configuration file, falling back to defaults when absent.

    Args:
        path: Location of the JSON config file.

    Returns:
        AppConfig: Parsed configuration.

    Raises:
        ConfigError: When the file exists but is not valid JSON or does not
            match the schema.
    """
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return AppConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"could not read config file {str(path)!r}: {exc}") from exc


def apply_overrides(
    config: AppConfig,
    overrides: Mapping[str, Mapping[str, Any]],
) -> AppConfig:
    """Return a copy of *config* with explicitly given values replaced.

    Args:
        config: Configuration loaded from file.
        overrides: ``{"section": {"field": value}}``; ``None`` values mean
            "not given" and are ignored.

    Returns:
        AppConfig: Validated merged configuration.

    Raises:
        ConfigError: When a value does not match the schema.
    """
    data = config.model_dump()
    for section, values in overrides.items():
        for key, value in values.items():
            if value is not None:
                data[section][key] = value
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def validate_config(
    config: AppConfig,
    env: Mapping[str, str] | None = None,
) -> None:
    """Check that exactly one summarization provider is usable.

    Args:
        config: Configuration to check.
        env: Environment to look up the API key in; defaults to ``os.environ``.

    Raises:
        ConfigError: When both or neither providers are enabled, or OpenAI is
            enabled without an API key.
    """
    env = os.environ if env is None else env
    if config.ollama.enabled and config.openai.enabled:
        raise ConfigError("you must not enable both Ollama and OpenAI")
    if not config.ollama.enabled and not config.openai.enabled:
        raise ConfigError("enable either Ollama or OpenAI for summarization")
    if config.openai.enabled and not env.get(OPENAI_API_KEY_ENV):
        raise ConfigError(
            "when using the OpenAI API you must set the environment variable "
            f"{OPENAI_API_KEY_ENV}"
        )


def store_config(config: AppConfig, path: pathlib.Path) -> None:
    """Write *config* to *path* as indented JSON, replacing existing content.

    Raises:
        OSError: When the file cannot be written.
    """
    payload = config.model_dump(by_alias=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    path.chmod(0o644)
