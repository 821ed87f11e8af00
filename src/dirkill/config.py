"""User configuration for dirkill."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from dirkill.scanner import expand_path

log = logging.getLogger(__name__)

CONFIG_DIR = expand_path("~/.dirkill")
CONFIG_FILE = CONFIG_DIR / "config.json"


class Config(BaseModel):
    """Settings read from ~/.dirkill/config.json."""

    patterns: list[str] = Field(
        default_factory=lambda: ["node_modules"],
        description="Directory name patterns to look for",
    )
    ignore_patterns: list[str] = Field(
        default_factory=list,
        description="Regular expressions for directory names never to enter",
    )
    size_workers: int = Field(4, ge=1, description="Concurrent size computations")
    refresh_interval: float = Field(
        0.05, gt=0, description="Seconds between polls of the scan engine"
    )
    auto_size: bool = Field(True, description="Compute sizes as soon as directories are found")
    dry_run: bool = Field(False, description="Never actually delete anything")


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from disk, falling back to defaults."""
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return Config()

    try:
        with open(config_file) as f:
            data = json.load(f)
        return Config.model_validate(data)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Could not read %s: %s", config_file, e)
    except ValidationError as e:
        log.warning("Invalid configuration in %s: %s", config_file, e)

    return Config()


def save_config(config: Config, path: Optional[Path] = None) -> bool:
    """Save configuration to disk."""
    config_file = path or CONFIG_FILE
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            json.dump(config.model_dump(), f, indent=2)
        return True
    except OSError as e:
        log.warning("Could not write %s: %s", config_file, e)
        return False
