"""Tests for tax rules loading (tax_rules/*.yaml and user tax_rules_dir).

Uses isolated config directories via tmp_path and W2_CALC_CONFIG_PATH
so a developer's settings.json never leaks into results.
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from w2calc.sdk.tax import (
    BRACKETS_SINGLE_2025,
    Slab,
    TaxRulesNotFoundError,
    compute_tax,
    get_brackets,
    get_tax_rule_years,
    load_bracket_file,
    load_tax_rules,
)


# === FIXTURES ===


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("W2_CALC_CONFIG_PATH", str(config_dir))
    return config_dir


@pytest.fixture
def user_rules_dir(tmp_path, isolated_config):
    """User tax_rules_dir with a flat-rate 2030 table."""
    rules_dir = tmp_path / "rules"
    rules_dir.mkdir()
    rules = {"single": {"tax_brackets": [{"up_to": 10000, "rate": 0.05}, {"rate": 0.20}]}}
    (rules_dir / "2030.yaml").write_text(yaml.safe_dump(rules))
    (isolated_config / "settings.json").write_text(json.dumps({"tax_rules_dir": str(rules_dir)}))
    return rules_dir


# === PACKAGED RULES ===


class TestPackagedRules:

    def test_2025_single_matches_builtin_default(self, isolated_config):
        assert get_brackets("2025", "single") == BRACKETS_SINGLE_2025

    def test_2025_mfj(self, isolated_config):
        brackets = get_brackets(2025, "mfj")
        assert brackets[0] == Slab(0.10, 23850)
        assert brackets[-1].up_to is None
        assert compute_tax(50000, brackets).tax == pytest.approx(5523.0)

    def test_all_statuses_defined(self, isolated_config):
        rules = load_tax_rules("2025")
        for status in ("single", "mfj", "mfs", "hoh"):
            assert len(getattr(rules, status).tax_brackets) == 7

    def test_years_listed(self, isolated_config):
        assert "2025" in get_tax_rule_years()

    def test_missing_year(self, isolated_config):
        with pytest.raises(TaxRulesNotFoundError, match="1999"):
            load_tax_rules("1999")

    def test_missing_year_is_file_not_found(self, isolated_config):
        with pytest.raises(FileNotFoundError):
            get_brackets("1999")

    def test_unknown_filing_status(self, isolated_config):
        with pytest.raises(KeyError):
            get_brackets("2025", "widowed")

    def test_model_attribute_is_not_a_filing_status(self, isolated_config):
        with pytest.raises(KeyError, match="model_config"):
            get_brackets("2025", "model_config")


# === USER RULES DIRECTORY ===


class TestUserRulesDir:

    def test_user_year_available(self, user_rules_dir):
        assert get_tax_rule_years()[:2] == ["2030", "2025"]

    def test_user_brackets_loaded(self, user_rules_dir):
        brackets = get_brackets("2030")
        assert brackets == (Slab(0.05, 10000), Slab(0.20))
        assert compute_tax(20000, brackets).tax == pytest.approx(2500.0)

    def test_user_dir_shadows_packaged_year(self, user_rules_dir):
        rules = {"single": {"tax_brackets": [{"rate": 0.5}]}}
        (user_rules_dir / "2025.yaml").write_text(yaml.safe_dump(rules))
        assert get_brackets("2025") == (Slab(0.5),)

    def test_status_missing_from_user_file(self, user_rules_dir):
        with pytest.raises(KeyError, match="mfj"):
            get_brackets("2030", "mfj")


# === VALIDATION ===


class TestValidation:

    def _write(self, tmp_path, data):
        path = tmp_path / "brackets.yaml"
        path.write_text(yaml.safe_dump(data))
        return path

    def test_bare_list(self, tmp_path):
        path = self._write(tmp_path, [{"up_to": 100, "rate": 0.1}, {"rate": 0.2}])
        assert load_bracket_file(path) == (Slab(0.1, 100), Slab(0.2))

    def test_mapping(self, tmp_path):
        path = self._write(tmp_path, {"tax_brackets": [{"rate": 0.3}]})
        assert load_bracket_file(path) == (Slab(0.3),)

    def test_rate_above_one(self, tmp_path):
        path = self._write(tmp_path, [{"rate": 1.5}])
        with pytest.raises(ValidationError):
            load_bracket_file(path)

    def test_descending_bounds(self, tmp_path):
        path = self._write(tmp_path, [{"up_to": 200, "rate": 0.1}, {"up_to": 100, "rate": 0.2}])
        with pytest.raises(ValidationError):
            load_bracket_file(path)

    def test_uncapped_bracket_not_last(self, tmp_path):
        path = self._write(tmp_path, [{"rate": 0.1}, {"up_to": 100, "rate": 0.2}])
        with pytest.raises(ValidationError):
            load_bracket_file(path)

    def test_unknown_key(self, tmp_path):
        path = self._write(tmp_path, [{"over": 100, "rate": 0.2}])
        with pytest.raises(ValidationError):
            load_bracket_file(path)

    def test_empty_table(self, tmp_path):
        path = self._write(tmp_path, [])
        with pytest.raises(ValidationError):
            load_bracket_file(path)
