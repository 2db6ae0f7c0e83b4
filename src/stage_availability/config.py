"""Engine configuration loader."""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_MAX_COMBINATIONS,
    DEFAULT_MIN_BLOCK_MINUTES,
    DEFAULT_MIN_DURATION,
    DEFAULT_TIME_BUDGET_SECONDS,
    ENGINE_CONFIG_FILENAME,
    MIN_BLOCK_BOUNDS,
    MIN_DURATION_BOUNDS,
)
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Limits and defaults for availability searches."""

    max_combinations: int | None = DEFAULT_MAX_COMBINATIONS
    time_budget_seconds: float | None = DEFAULT_TIME_BUDGET_SECONDS
    min_duration_minutes: int = DEFAULT_MIN_DURATION
    min_block_minutes: int = DEFAULT_MIN_BLOCK_MINUTES

    def __post_init__(self) -> None:
        _check_bounds("min_duration_minutes", self.min_duration_minutes, MIN_DURATION_BOUNDS)
        _check_bounds("min_block_minutes", self.min_block_minutes, MIN_BLOCK_BOUNDS)
        if self.max_combinations is not None and self.max_combinations < 1:
            raise ConfigError(f"max_combinations must be positive, got {self.max_combinations}")
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ConfigError(
                f"time_budget_seconds must be positive, got {self.time_budget_seconds}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Create an EngineConfig from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _check_bounds(name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ConfigError(f"{name} must be between {low} and {high}, got {value}")


class ConfigLoader:
    """Loader for engine configuration from a config directory."""

    def __init__(self, config_dir: Path | None = None, config_file: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing engine.json. Defaults to "config".
            config_file: Direct path to a config file. If provided, overrides
                         engine.json from config_dir.
        """
        if config_dir is None:
            config_dir = Path("config")

        self.config_dir = Path(config_dir)
        self.path = config_file if config_file else self._get_path(ENGINE_CONFIG_FILENAME)
        self.engine = self._load(self.path) if self.path else EngineConfig()

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        path = self.config_dir / filename
        return path if path.exists() else None

    def _load(self, path: Path) -> EngineConfig:
        """Load engine settings from a JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError("file not found", path) from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON ({e.msg} at line {e.lineno})", path) from e

        if not isinstance(data, dict):
            raise ConfigError("expected a JSON object", path)

        try:
            config = EngineConfig.from_dict(data)
        except ConfigError as e:
            raise ConfigError(e.message, path) from e
        except TypeError as e:
            raise ConfigError(str(e), path) from e

        logger.info(f"Loaded engine config from {path}")
        return config
