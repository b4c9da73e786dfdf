"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from platecost.analyzers.sales import OversellPolicy
from platecost.config import PlateCostConfig


class TestConfig:
    def test_default_config(self) -> None:
        config = PlateCostConfig()
        assert config.business.working_days_per_month == 22
        assert config.business.hours_per_day == 8
        assert config.business.food_cost_target_pct == 30
        assert config.oversell_policy == OversellPolicy.REJECT
        assert config.currency == "USD"
        assert config.data_file is None

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_content = {
            "business": {"working_days_per_month": 26, "total_dishes_sold": 4000},
            "oversell_policy": "clamp",
            "currency": "GBP",
        }
        config_file = tmp_path / "test_config.yaml"
        config_file.write_text(yaml.dump(yaml_content))

        config = PlateCostConfig.load(str(config_file))
        assert config.business.working_days_per_month == 26
        assert config.business.total_dishes_sold == 4000
        assert config.business.hours_per_day == 8
        assert config.oversell_policy == OversellPolicy.CLAMP
        assert config.currency == "GBP"

    def test_load_with_overrides(self) -> None:
        config = PlateCostConfig.load(
            None,
            business={"hours_per_day": 10},
            currency="EUR",
        )
        assert config.business.hours_per_day == 10
        assert config.currency == "EUR"

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLATECOST_WORKING_DAYS", "20")
        monkeypatch.setenv("PLATECOST_FOOD_COST_TARGET", "28.5")
        monkeypatch.setenv("PLATECOST_CURRENCY", "CAD")

        config = PlateCostConfig.load()
        assert config.business.working_days_per_month == 20
        assert config.business.food_cost_target_pct == 28.5
        assert config.currency == "CAD"

    def test_env_beats_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "platecost.yaml"
        config_file.write_text(yaml.dump({"oversell_policy": "clamp"}))
        monkeypatch.setenv("PLATECOST_OVERSELL_POLICY", "reject")
        config = PlateCostConfig.load(str(config_file))
        assert config.oversell_policy == OversellPolicy.REJECT

    def test_invalid_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLATECOST_OVERSELL_POLICY", "sometimes")
        with pytest.raises(ValidationError):
            PlateCostConfig.load()

    def test_missing_config_file(self) -> None:
        config = PlateCostConfig.load("/nonexistent/config.yaml")
        # Should use defaults without error
        assert config.business.working_days_per_month == 22

    def test_env_var_with_empty_section(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "platecost.yaml"
        config_file.write_text("business:\ncurrency: EUR\n")
        monkeypatch.setenv("PLATECOST_HOURS_PER_DAY", "9")
        config = PlateCostConfig.load(str(config_file))
        assert config.business.hours_per_day == 9
        assert config.currency == "EUR"
