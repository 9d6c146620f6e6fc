"""
Similo Configuration

Tunables for the adaptive matcher. Every constant can be overridden at
construction time or through SIMILO_* environment variables.
"""

import os
import logging
from dataclasses import dataclass, fields
from typing import Optional

logger = logging.getLogger(__name__)


SUCCESS_RATE_MODES = ("windowed", "all_time", "none")

ENV_PREFIX = "SIMILO_"


@dataclass
class SimiloConfig:
    """Configuration for the dynamic weight matcher"""
    learning_rate: float = 0.1
    baseline_contribution: float = 0.5
    weight_min: float = 0.1
    weight_max: float = 3.0
    contribution_window: int = 1000
    stability_window: int = 100
    history_window: int = 1000
    batch_size: int = 50
    stability_threshold: float = 0.3
    max_distance: float = 500.0  # on-screen pixels
    success_rate_mode: str = "windowed"  # windowed, all_time, none
    group_by_context: bool = True
    weights_file: Optional[str] = None
    auto_save: bool = True

    def __post_init__(self):
        if self.weight_min <= 0 or self.weight_min >= self.weight_max:
            raise ValueError(
                f"Invalid weight bounds: [{self.weight_min}, {self.weight_max}]"
            )
        for name in ("contribution_window", "stability_window", "history_window", "batch_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_distance <= 0:
            raise ValueError(f"max_distance must be positive, got {self.max_distance}")
        if self.success_rate_mode not in SUCCESS_RATE_MODES:
            raise ValueError(
                f"Unknown success_rate_mode '{self.success_rate_mode}', "
                f"expected one of {SUCCESS_RATE_MODES}"
            )

    def clamp(self, weight: float) -> float:
        """Keep a weight inside [weight_min, weight_max]"""
        return max(self.weight_min, min(self.weight_max, weight))

    @classmethod
    def from_env(cls, **overrides) -> "SimiloConfig":
        """
        Build a config from SIMILO_* environment variables.

        Unset variables keep the dataclass default; explicit keyword
        overrides win over the environment.

        Example:
            SIMILO_LEARNING_RATE=0.05 SIMILO_WEIGHTS_FILE=data/weights.properties
        """
        values = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            values[f.name] = _parse_env_value(f.name, raw, f.default)

        values.update(overrides)
        return cls(**values)


def _parse_env_value(name: str, raw: str, default):
    """Convert an environment string to the type of the field default"""
    raw = raw.strip()
    if isinstance(default, bool):
        return raw.lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    # Optional[str] fields default to None
    return raw
