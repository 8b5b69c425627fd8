"""Run configuration: built-in defaults, then YAML file, then CLI flags."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from registry.sources import IndexSource, default_sources

logger = logging.getLogger(__name__)

CONFIG_SECTION = "checker"

# YAML key -> CheckerConfig field
_FILE_KEYS = {
    "concurrency": "concurrency",
    "depth": "depth",
    "check_dependencies": "check_dependencies",
    "deps": "check_dependencies",
    "timeout": "timeout",
    "limit": "limit",
    "pypi_url": "pypi_url",
    "pyswift_url": "pyswift_url",
    "kivyschool_url": "kivyschool_url",
    "output": "output",
    "output_format": "output_format",
    "format": "output_format",
    "chunk_size": "chunk_size",
    "progress": "progress",
}

# CLI dest -> CheckerConfig field
_ARG_KEYS = {
    "CONCURRENCY": "concurrency",
    "DEPTH": "depth",
    "CHECK_DEPS": "check_dependencies",
    "TIMEOUT": "timeout",
    "LIMIT": "limit",
    "PYPI_URL": "pypi_url",
    "PYSWIFT_URL": "pyswift_url",
    "KIVYSCHOOL_URL": "kivyschool_url",
    "OUTPUT": "output",
    "OUTPUT_FORMAT": "output_format",
    "CHUNK_SIZE": "chunk_size",
}


class ConfigError(Exception):
    """Invalid or unreadable configuration."""


@dataclass
class CheckerConfig:
    """Configuration for one checker run."""

    concurrency: int = Constants.DEFAULT_CONCURRENCY
    depth: int = Constants.DEFAULT_DEPTH
    check_dependencies: bool = False
    timeout: int = Constants.REQUEST_TIMEOUT
    limit: int = 0
    pypi_url: str = Constants.REGISTRY_URL_PYPI
    pyswift_url: str = Constants.SIMPLE_URL_PYSWIFT
    kivyschool_url: str = Constants.SIMPLE_URL_KIVYSCHOOL
    output: Optional[str] = None
    output_format: Optional[str] = None
    chunk_size: int = Constants.DEFAULT_CHUNK_SIZE
    progress: bool = True

    @classmethod
    def from_args(cls, args: Any) -> "CheckerConfig":
        """Create config from CLI arguments, layering over ``--config`` if given.

        Raises:
            ConfigError: If the config file or any value is invalid.
        """
        config = cls()
        config_path = getattr(args, "CONFIG", None)
        if config_path:
            config.apply(load_config_file(config_path))
            logger.info("Loaded config from: %s", config_path)

        overrides = {}
        for dest, name in _ARG_KEYS.items():
            value = getattr(args, dest, None)
            if value is not None:
                overrides[name] = value
        if getattr(args, "NO_PROGRESS", False):
            overrides["progress"] = False
        config.apply(overrides)
        config.validate()
        return config

    def apply(self, values: Dict[str, Any]) -> None:
        known = {f.name for f in fields(self)}
        for name, value in values.items():
            if name not in known:
                raise ConfigError(f"Unknown config key: {name}")
            setattr(self, name, value)

    def validate(self) -> None:
        for name in ("concurrency", "depth", "timeout", "limit", "chunk_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if not Constants.MIN_CONCURRENCY <= self.concurrency <= Constants.MAX_CONCURRENCY:
            raise ConfigError(
                f"concurrency must be between {Constants.MIN_CONCURRENCY} and "
                f"{Constants.MAX_CONCURRENCY}, got {self.concurrency}"
            )
        if self.depth < 1:
            raise ConfigError(f"depth must be at least 1, got {self.depth}")
        if self.timeout < 1:
            raise ConfigError(f"timeout must be at least 1 second, got {self.timeout}")
        if self.limit < 0:
            raise ConfigError(f"limit cannot be negative, got {self.limit}")
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be at least 1, got {self.chunk_size}")
        for name in ("pypi_url", "pyswift_url", "kivyschool_url"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{name} must be a non-empty URL string, got {value!r}")
        if self.output is not None and not isinstance(self.output, str):
            raise ConfigError(f"output must be a file path, got {self.output!r}")
        for name in ("check_dependencies", "progress"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be true or false, got {value!r}")
        if self.output_format is not None:
            self.output_format = str(self.output_format).lower()
            if self.output_format not in Constants.OUTPUT_FORMATS:
                raise ConfigError(
                    f"output format must be one of {', '.join(Constants.OUTPUT_FORMATS)}, "
                    f"got {self.output_format}"
                )

    def resolved_output_format(self) -> str:
        """Explicit format, else inferred from the output path, else json."""
        if self.output_format:
            return self.output_format
        lower = (self.output or "").lower()
        if lower.endswith(".csv"):
            return "csv"
        return "json"

    def sources(self) -> List[IndexSource]:
        return default_sources(
            pypi_url=self.pypi_url,
            pyswift_url=self.pyswift_url,
            kivyschool_url=self.kivyschool_url,
        )


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load checker settings from a YAML file.

    Keys may sit at the top level or under a ``checker:`` section.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Config file couldn't be read: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping")
    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' section must be a mapping")

    values = {}
    for key, value in section.items():
        name = _FILE_KEYS.get(str(key).replace("-", "_"))
        if name is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        values[name] = value
    return values
