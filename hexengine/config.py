"""
Runtime settings read from the environment.

A .env file in the working directory is loaded first, so local overrides
do not need to be exported in the shell.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "HEXENGINE_"


@dataclass
class Settings:
    """Defaults for map generation and logging."""
    data_path: Optional[Path] = None  # None: profiles shipped with the package
    profile: str = "Continental"
    map_width: int = 20
    map_height: int = 10
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{ENV_PREFIX}{name}={raw!r} is not an integer, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{ENV_PREFIX}{name}={value} must be positive, using {default}")
        return default
    return value


def load_settings(env_file: Optional[Path | str] = None) -> Settings:
    """Build settings from the environment (after loading .env)."""
    load_dotenv(env_file)

    data_path = os.getenv(ENV_PREFIX + "DATA_PATH")
    defaults = Settings()
    return Settings(
        data_path=Path(data_path) if data_path else None,
        profile=os.getenv(ENV_PREFIX + "PROFILE") or defaults.profile,
        map_width=_env_int("MAP_WIDTH", defaults.map_width),
        map_height=_env_int("MAP_HEIGHT", defaults.map_height),
        log_level=(os.getenv(ENV_PREFIX + "LOG_LEVEL") or defaults.log_level).upper(),
    )


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
