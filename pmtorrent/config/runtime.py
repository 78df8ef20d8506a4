"""
Runtime Configuration

Configuration for the command-line wrapper: logging and output. Chunk
size and the filler hash are fixed constants and are not configurable.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)

# Environment variable prefix
ENV_PREFIX = "PMTORRENT_"

OUTPUT_FORMATS = ("human", "json")

DEFAULT_CONFIG_PATHS = (
    Path("pmtorrent.json"),
    Path(".pmtorrent.json"),
    Path("~/.config/pmtorrent/config.json"),
)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (PMTORRENT_* prefix, .env honoured)
    - JSON or YAML file
    - Programmatic construction
    """
    log_level: str = "INFO"
    log_file: Optional[str] = None
    output_format: str = "human"
    default_paths: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )
        self.log_level = self.log_level.upper()

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - PMTORRENT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR)
        - PMTORRENT_LOG_FILE: Also log to this file
        - PMTORRENT_OUTPUT_FORMAT: human or json
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")
        if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
            overrides["output_format"] = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "").lower()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        return cls(
            log_level=data.get("log_level") or "INFO",
            log_file=data.get("log_file"),
            output_format=data.get("output_format") or "human",
            default_paths=list(data.get("default_paths") or []),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file, by extension."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            setattr(new_config, key, value)
        new_config.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return asdict(self)


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Search order when no path is given:
      1. ./pmtorrent.json
      2. ./.pmtorrent.json
      3. ~/.config/pmtorrent/config.json

    Environment variables ALWAYS override file values.
    """
    config: RuntimeConfig | None = None

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for candidate in DEFAULT_CONFIG_PATHS:
            candidate = candidate.expanduser()
            if candidate.exists():
                try:
                    config = RuntimeConfig.from_file(candidate)
                    logger.info(f"Loaded config from {candidate}")
                    break
                except (ValueError, OSError) as e:
                    logger.warning(f"Failed to parse {candidate}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "output_format": "human",
  "default_paths": []
}
"""

