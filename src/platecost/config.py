"""
PlateCost configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from platecost.analyzers.sales import OversellPolicy
from platecost.models.catalog import BusinessSettings

# env var -> (section, key); section None means top level
_ENV_VARS: dict[str, tuple[str | None, str]] = {
    "PLATECOST_WORKING_DAYS": ("business", "working_days_per_month"),
    "PLATECOST_HOURS_PER_DAY": ("business", "hours_per_day"),
    "PLATECOST_DISHES_PRODUCED": ("business", "total_dishes_produced"),
    "PLATECOST_DISHES_SOLD": ("business", "total_dishes_sold"),
    "PLATECOST_FOOD_COST_TARGET": ("business", "food_cost_target_pct"),
    "PLATECOST_OVERSELL_POLICY": (None, "oversell_policy"),
    "PLATECOST_DATA_FILE": (None, "data_file"),
    "PLATECOST_CURRENCY": (None, "currency"),
}


class PlateCostConfig(BaseModel):
    """Root configuration for PlateCost."""

    business: BusinessSettings = Field(default_factory=BusinessSettings)
    oversell_policy: OversellPolicy = Field(
        default=OversellPolicy.REJECT,
        description="reject: refuse sales that exceed stock; clamp: floor stock at 0",
    )
    data_file: str | None = Field(default=None, description="YAML business dataset")
    currency: str = Field(default="USD")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> PlateCostConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        for env_name, (section, key) in _ENV_VARS.items():
            value = os.environ.get(env_name)
            if not value:
                continue
            if section is None:
                data[key] = value
            else:
                block = data.get(section) or {}
                block[key] = value
                data[section] = block

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
