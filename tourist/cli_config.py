"""Configuration loading helpers for the CLI entrypoint."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

OUT_ENV = "TOURIST_OUT"
VIEWPORTS_ENV = "TOURIST_VIEWPORTS"


def load_config(
    *,
    config_dir: Path,
    config_env_file: Path,
    cwd: Path,
    load_env: Callable[[Path], bool],
    copy_file: Callable[[Path, Path], str],
) -> None:
    """Load .env configuration with fallback to user config directory.

    Search order: ``./.env``, then ``config_env_file``. When neither
    exists, the packaged ``.env.example`` seeds ``config_env_file``.
    """
    local_env = cwd / ".env"
    if local_env.is_file():
        load_env(local_env)
        return

    if config_env_file.is_file():
        load_env(config_env_file)
        return

    example_file = Path(__file__).parent / ".env.example"
    if example_file.is_file():
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            copy_file(example_file, config_env_file)
            LOGGER.info("Created config file at %s from .env.example.", config_env_file)
            load_env(config_env_file)
        except OSError as exc:
            LOGGER.debug("Could not create %s: %s", config_env_file, exc)


def env_path(name: str, default: Path) -> Path:
    """Path from environment variable ``name`` or ``default``."""
    value: Optional[str] = os.getenv(name)
    return Path(value).expanduser() if value else default
