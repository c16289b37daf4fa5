"""
Configuration for cit.

Settings come from CIT_* environment variables; CLI flags override them.
There is no config file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from cit.lib.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RESOLVER_WORKERS,
    DEFAULT_STATUS_MAX_LENGTH,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class BrowserConfig:
    """Runtime settings for one cit session."""
    repo_path: Path
    poll_interval: float  # Seconds between HEAD checks and redraws
    status_max_length: int  # Checkout output is cut to this many characters
    resolver_workers: int  # Threads resolving branch names for visible rows
    log_file: Path | None
    log_level: str


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got '{raw}'")
    if value <= 0:
        raise ValueError(f"{key} must be greater than 0, got '{raw}'")
    return value


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got '{raw}'")
    if value <= 0:
        raise ValueError(f"{key} must be greater than 0, got '{raw}'")
    return value


def load_config(repo_path: Path, env: Mapping[str, str] | None = None) -> BrowserConfig:
    """Load config from the environment.

    Raises:
        ValueError: if a variable holds an invalid value
    """
    if env is None:
        env = os.environ

    log_level = env.get("CIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    if log_level not in LOG_LEVELS:
        raise ValueError(f"CIT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'")

    log_file = env.get("CIT_LOG_FILE", "").strip()

    return BrowserConfig(
        repo_path=repo_path,
        poll_interval=_positive_float(env, "CIT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
        status_max_length=_positive_int(env, "CIT_STATUS_MAX", DEFAULT_STATUS_MAX_LENGTH),
        resolver_workers=_positive_int(env, "CIT_WORKERS", DEFAULT_RESOLVER_WORKERS),
        log_file=Path(log_file).expanduser() if log_file else None,
        log_level=log_level,
    )
