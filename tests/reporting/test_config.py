"""
Tests for ReportingConfig loading and validation.
"""

from __future__ import annotations

import pytest
import yaml

from ledger_modules.reporting.config import ReportingConfig


class TestReportingConfig:
    def test_defaults(self):
        config = ReportingConfig.with_defaults()
        assert config.currency == "SEK"
        assert config.language == "sv"
        assert config.include_zero_balances is False
        assert config.include_period_result_in_equity is False

    def test_from_dict(self):
        config = ReportingConfig.from_dict({"entity_name": "Exempel AB", "language": "en"})
        assert config.entity_name == "Exempel AB"
        assert config.language == "en"

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="show_logo"):
            ReportingConfig.from_dict({"show_logo": True})

    @pytest.mark.parametrize("overrides", [{"language": "de"}, {"currency": "KRONOR"}])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            ReportingConfig(**overrides)

    def test_from_yaml_top_level(self, tmp_path):
        path = tmp_path / "reporting.yaml"
        path.write_text(yaml.safe_dump({"include_zero_balances": True}), encoding="utf-8")
        assert ReportingConfig.from_yaml(path).include_zero_balances is True

    def test_from_yaml_nested(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text(
            "reporting:\n  entity_name: Bageriet i Lund AB\n  include_period_result_in_equity: true\n",
            encoding="utf-8",
        )
        config = ReportingConfig.from_yaml(path)
        assert config.entity_name == "Bageriet i Lund AB"
        assert config.include_period_result_in_equity is True

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ReportingConfig.from_yaml(path) == ReportingConfig()

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- sv\n- en\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ReportingConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ReportingConfig.from_yaml(tmp_path / "nope.yaml")
