"""Project-wide constants for convenient reuse."""

# pylint: disable=line-too-long

from __future__ import annotations

import os
import pathlib
import sys
from typing import Final

from summairpg.utils.env_loader import load_project_env

# Ensure .env is loaded exactly once at import time for the whole project
if "pytest" not in sys.modules:
    load_project_env()


# Repository root resolved relative to this file (utils/constant.py → package → repo)
REPO_ROOT: Final[pathlib.Path] = pathlib.Path(__file__).resolve().parents[2]

# Configuration file that stores the last used command-line settings
CONFIG_FILE: Final[pathlib.Path] = pathlib.Path(
    os.getenv("SUMMAIRPG_CONFIG_FILE", "summairpg-config.json")
)

# Silence (seconds) between two words of one speaker that starts a new line
TURN_GAP_SEC: Final[float] = float(os.getenv("TURN_GAP_SEC", "5.0"))

# Tokens kept free in the context window for the model's answer
REPLY_TOKEN_RESERVE: Final[int] = int(os.getenv("REPLY_TOKEN_RESERVE", "500"))

# Context window assumed for model families missing from the lookup table
FALLBACK_CONTEXT_TOKENS: Final[int] = int(os.getenv("FALLBACK_CONTEXT_TOKENS", "2048"))

# Audio input defaults
DEFAULT_AUDIO_DIR: Final[str] = os.getenv("AUDIO_DIR", "input")
DEFAULT_AUDIO_LANGUAGE: Final[str] = os.getenv("AUDIO_LANGUAGE", "en")
DEFAULT_AUDIO_FILE_TYPES: Final[tuple[str, ...]] = tuple(
    t.strip().lstrip(".").lower()
    for t in os.getenv("AUDIO_FILE_TYPES", "flac,wav").split(",")
    if t.strip()
)
WHISPERX_MODEL_NAME: Final[str] = os.getenv("WHISPERX_MODEL_NAME", "large-v3")
WHISPERX_ALIGN_MODEL: Final[str] = os.getenv(
    "WHISPERX_ALIGN_MODEL", "WAV2VEC2_ASR_LARGE_LV60K_960H"
)
WHISPERX_BATCH_SIZE: Final[int] = int(os.getenv("WHISPERX_BATCH_SIZE", "4"))

# Ollama defaults
OLLAMA_ADDRESS: Final[str] = os.getenv("OLLAMA_ADDRESS", "127.0.0.1:11434")
OLLAMA_MODEL_NAME: Final[str] = os.getenv("OLLAMA_MODEL_NAME", "llama3:70b")

# OpenAI-compatible chat completion defaults
OPENAI_BASE_URL: Final[str] = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL_NAME: Final[str] = os.getenv("OPENAI_MODEL_NAME", "gpt-4-turbo")

# Timeout (seconds) for a single summarization request; local models are slow
HTTP_TIMEOUT_SEC: Final[float] = float(os.getenv("HTTP_TIMEOUT_SEC", "600"))
