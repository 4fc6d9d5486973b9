"""Pytest configuration and fixtures for test suite."""

from pathlib import Path

import pytest
import yaml

from taxguide.calculator.tax_calculator import TaxCalculator, get_year_config
from taxguide.calculator.tax_year_config import TaxYearConfig
from taxguide.config.settings import get_settings
from taxguide.config.tax_config_loader import CONFIG_DIR, clear_config_cache
from taxguide.models.tax_return import TaxReturnInputs


@pytest.fixture(autouse=True)
def reset_config_caches(monkeypatch):
    """Keep environment overrides and cached loaders from leaking between tests."""
    monkeypatch.delenv("TAXGUIDE_PARAMETERS_DIR", raising=False)
    monkeypatch.delenv("TAXGUIDE_TAX_YEAR", raising=False)
    monkeypatch.delenv("TAXGUIDE_LOG_LEVEL", raising=False)
    clear_config_cache()
    get_settings.cache_clear()
    get_year_config.cache_clear()
    yield
    clear_config_cache()
    get_settings.cache_clear()
    get_year_config.cache_clear()


@pytest.fixture(scope="session")
def config():
    return TaxYearConfig.for_2025()


@pytest.fixture
def calculator(config):
    return TaxCalculator(config=config)


@pytest.fixture
def make_inputs():
    """Build ``TaxReturnInputs`` from section keyword arguments."""
    def _make(**sections) -> TaxReturnInputs:
        return TaxReturnInputs.model_validate(sections)
    return _make


@pytest.fixture
def parameters_2025():
    """The packaged 2025 parameter file as a plain dict."""
    with open(CONFIG_DIR / "tax_year_2025.yaml", "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def write_parameters(tmp_path):
    """Write a parameter mapping to ``tmp_path`` and return the directory."""
    def _write(data: dict, tax_year: int = 2025) -> Path:
        path = tmp_path / f"tax_year_{tax_year}.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)
        return tmp_path
    return _write
