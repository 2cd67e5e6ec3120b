"""Runtime settings read from the environment.

Values come from process environment variables, optionally seeded from a
``.env`` file in the working directory:

``CATEGORIZER_STOPWORDS_FILE``
    Stopword list path (default ``stopwords.txt``).
``CATEGORIZER_SMOOTHING``
    Additive smoothing constant ``k`` (default ``1.0``).
``CATEGORIZER_LOG_LEVEL``
    Log level name (default ``INFO``).
``CATEGORIZER_TRACE``
    ``true``/``false``; trace probability data (default ``false``).

Command-line options take precedence over these.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError
from .trainer import DEFAULT_SMOOTHING, validate_smoothing

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    stopwords_file: Path = Path("stopwords.txt")
    smoothing: float = DEFAULT_SMOOTHING
    log_level: str = "INFO"
    trace: bool = False


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _parse_smoothing(raw: str) -> float:
    try:
        return validate_smoothing(float(raw))
    except ValueError as exc:
        raise ConfigurationError(f"CATEGORIZER_SMOOTHING must be a number, got {raw!r}") from exc


def load_settings(env_file: Optional[str | Path] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        env_file: Explicit ``.env`` file. When omitted, one is looked
            for from the working directory upward. Variables already set
            in the environment win over the file.

    Raises:
        ConfigurationError: If a variable holds an invalid value.
    """
    dotenv_path = env_file if env_file is not None else find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path)

    defaults = Settings()
    stopwords = os.getenv("CATEGORIZER_STOPWORDS_FILE")
    smoothing = os.getenv("CATEGORIZER_SMOOTHING")
    log_level = os.getenv("CATEGORIZER_LOG_LEVEL", defaults.log_level).strip().upper()
    trace = os.getenv("CATEGORIZER_TRACE")

    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(f"CATEGORIZER_LOG_LEVEL {log_level!r} is not a log level")

    return Settings(
        stopwords_file=Path(stopwords) if stopwords else defaults.stopwords_file,
        smoothing=_parse_smoothing(smoothing) if smoothing else defaults.smoothing,
        log_level=log_level,
        trace=_parse_bool("CATEGORIZER_TRACE", trace) if trace is not None else defaults.trace,
    )
