"""Environment-driven settings for brform applications."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from brform.constants import (
    DEFAULT_CURRENCY_PREFIX,
    DEFAULT_LOCALE,
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_HANDLER,
    DEFAULT_LOG_LEVEL,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on", "sim"}


def env_file_path() -> Path:
    return Path(os.getenv("BRFORM_ENV_FILE", Path.home() / ".brform.env"))


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class FormConfig:
    """In-memory representation of brform settings."""

    locale: str = DEFAULT_LOCALE
    currency_prefix: str = DEFAULT_CURRENCY_PREFIX
    check_digits: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    log_handler: str = DEFAULT_LOG_HANDLER
    log_file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_environment(cls) -> "FormConfig":
        """Create a config object populated from environment variables."""

        return cls(
            locale=os.getenv("BRFORM_LOCALE", DEFAULT_LOCALE),
            currency_prefix=os.getenv("BRFORM_CURRENCY_PREFIX", DEFAULT_CURRENCY_PREFIX),
            check_digits=_parse_bool(os.getenv("BRFORM_CHECK_DIGITS", "true")),
            log_level=os.getenv("BRFORM_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            log_format=os.getenv("BRFORM_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            log_handler=os.getenv("BRFORM_LOG_HANDLER", DEFAULT_LOG_HANDLER),
            log_file=os.getenv("BRFORM_LOG_FILE", DEFAULT_LOG_FILE),
        )

    def to_environment(self) -> Dict[str, str]:
        """Return a mapping of environment variables for the current settings."""

        return {
            "BRFORM_LOCALE": self.locale,
            "BRFORM_CURRENCY_PREFIX": self.currency_prefix,
            "BRFORM_CHECK_DIGITS": "true" if self.check_digits else "false",
            "BRFORM_LOG_LEVEL": self.log_level,
            "BRFORM_LOG_FORMAT": self.log_format,
            "BRFORM_LOG_HANDLER": self.log_handler,
            "BRFORM_LOG_FILE": self.log_file,
        }


def load_env_file() -> Dict[str, str]:
    """Load persisted settings from the user's env file into ``os.environ``.

    Variables already set in the environment win over the file.
    """

    path = env_file_path()
    if not path.exists():
        return {}

    values: Dict[str, str] = {}
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            if not line or line.strip().startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip()
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return {}

    for key, value in values.items():
        os.environ.setdefault(key, value)
    return values


def save_env_file(env: Dict[str, str]) -> bool:
    """Persist ``env`` to the user's env file; returns ``False`` on failure."""

    path = env_file_path()
    try:
        path.write_text("\n".join(f"{key}={value}" for key, value in env.items()), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write %s: %s", path, exc)
        return False
    return True
