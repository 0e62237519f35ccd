"""Engine configuration loaded from an optional YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

import yaml

from task_intelligence.errors import InvalidInput

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TASK_INTEL_CONFIG"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class EngineConfig:
    """Dispatcher and analyzer settings."""

    max_workers: int = 4
    candidate_pool_size: int = 50
    forecast_days: int = 14
    burnout_window_days: int = 7
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("max_workers", "candidate_pool_size", "forecast_days", "burnout_window_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInput(f"Config: {name} must be a positive integer")
        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise InvalidInput(f"Config: unknown log_level '{self.log_level}'")


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load configuration from ``path`` or ``$TASK_INTEL_CONFIG``.

    A missing file yields the defaults.
    """

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return EngineConfig()

    config_path = Path(path)
    if not config_path.exists():
        logger.debug("Config file %s not found, using defaults", config_path)
        return EngineConfig()

    with open(config_path, encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise InvalidInput(f"Config: cannot parse {config_path}") from exc

    if not isinstance(data, dict):
        raise InvalidInput(f"Config: {config_path} must contain a mapping")

    known = {field.name for field in fields(EngineConfig)}
    for key in sorted(set(data) - known):
        logger.warning("Ignoring unknown config key '%s'", key)

    return EngineConfig(**{key: value for key, value in data.items() if key in known})
