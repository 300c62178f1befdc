from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .scanner.errors import ConfigurationError
from .scanner.models import DEFAULT_CHUNK_SIZE, ScanPreferences

DEFAULT_SEPARATOR = "||"

ROOTS_ENV = "DUPSCAN_ROOTS"
SEPARATOR_ENV = "DUPSCAN_SEPARATOR"
CHUNK_SIZE_ENV = "DUPSCAN_CHUNK_SIZE"
EXCLUDE_ENV = "DUPSCAN_EXCLUDE"
STRICT_ENV = "DUPSCAN_STRICT"
CACHE_PATHS_ENV = "DUPSCAN_CACHE_PATHS"
LOG_LEVEL_ENV = "DUPSCAN_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """Scan settings resolved from the environment (and a local ``.env``)."""

    roots: List[str] = field(default_factory=list)
    raw_roots: str = ""
    separator: str = DEFAULT_SEPARATOR
    chunk_size: int = DEFAULT_CHUNK_SIZE
    excluded_dirs: List[str] = field(default_factory=list)
    strict: bool = False
    cache_paths: bool = False
    log_level: str = "WARNING"

    def to_preferences(self) -> ScanPreferences:
        return ScanPreferences(
            excluded_dirs=tuple(self.excluded_dirs),
            cache_paths=self.cache_paths,
            strict=self.strict,
            chunk_size=self.chunk_size,
        )

    def env_roots(self) -> List[str]:
        """Split the ``DUPSCAN_ROOTS`` value with the current separator."""
        if not self.raw_roots:
            return []
        return parse_root_list(self.raw_roots, self.separator)


def parse_root_list(raw: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """
    Split a delimited root list such as ``"/data/a||/data/b"``.

    Raises ConfigurationError for an empty list, an empty separator or an
    empty segment (``"a||||b"``).
    """
    if not separator:
        raise ConfigurationError("Root separator must not be empty.", "INVALID_SETTING")
    if raw is None or not raw.strip():
        raise ConfigurationError("No root directories supplied.", "NO_ROOTS")
    roots = [part.strip() for part in raw.split(separator)]
    if any(not part for part in roots):
        raise ConfigurationError(
            f"Malformed root list {raw!r}: empty entry between separators.",
            "MALFORMED_ROOTS",
        )
    return roots


def load_settings(env: Optional[dict] = None) -> Settings:
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = dict(os.environ)

    settings = Settings()
    settings.separator = env.get(SEPARATOR_ENV) or DEFAULT_SEPARATOR
    # Split later, once command-line roots and separator are known.
    settings.raw_roots = env.get(ROOTS_ENV) or ""
    settings.chunk_size = _parse_int(env.get(CHUNK_SIZE_ENV), CHUNK_SIZE_ENV, DEFAULT_CHUNK_SIZE)
    settings.excluded_dirs = [
        name.strip() for name in (env.get(EXCLUDE_ENV) or "").split(",") if name.strip()
    ]
    settings.strict = _parse_bool(env.get(STRICT_ENV), STRICT_ENV)
    settings.cache_paths = _parse_bool(env.get(CACHE_PATHS_ENV), CACHE_PATHS_ENV)
    settings.log_level = parse_log_level(env.get(LOG_LEVEL_ENV) or "WARNING")
    return settings


def parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level: {value}", "INVALID_SETTING")
    return level


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}", "INVALID_SETTING")
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {parsed}", "INVALID_SETTING")
    return parsed


def _parse_bool(value: Optional[str], name: str) -> bool:
    if value is None:
        return False
    token = value.strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {value!r}", "INVALID_SETTING")
