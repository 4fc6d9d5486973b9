"""
Tax Configuration Loader.

Loads tax parameters from YAML configuration files, enabling:
- Annual updates without code changes
- Environment-specific overrides
- Validation of required parameters before any calculation runs
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Default config directory
CONFIG_DIR = Path(__file__).parent / "tax_parameters"

REQUIRED_PARAMETERS = (
    "standard_deduction",
    "ordinary_income_brackets",
    "capital_gains_brackets",
    "ss_wage_base",
    "poverty_guidelines",
    "applicable_percentage_bands",
    "state",
)


class TaxConfigError(ValueError):
    """Raised when tax parameters are missing or internally inconsistent."""


@dataclass
class ConfigMetadata:
    """Metadata about a configuration file."""
    version: str
    tax_year: int
    effective_date: str
    source: str  # "IRS", "state", "custom"
    irs_references: List[str] = field(default_factory=list)
    last_updated: str = ""
    updated_by: str = ""
    notes: str = ""


class TaxConfigLoader:
    """
    Loads tax configuration from YAML files.

    Features:
    - File discovery by tax year (tax_year_<YEAR>.yaml)
    - Environment variable overrides for scalar parameters
    - Required-parameter validation
    """

    def __init__(self, config_dir: Optional[Path] = None, env_prefix: str = "TAXGUIDE"):
        """
        Initialize the config loader.

        Args:
            config_dir: Directory containing YAML config files.
                       Defaults to taxguide/config/tax_parameters/
            env_prefix: Prefix for environment overrides, e.g.
                       TAXGUIDE_2025_SALT_CAP=10000
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.env_prefix = env_prefix
        self._configs: Dict[int, Dict[str, Any]] = {}
        self._metadata: Dict[int, ConfigMetadata] = {}

    def available_years(self) -> List[int]:
        """Tax years with a parameter file in the config directory."""
        years = []
        for path in self.config_dir.glob("tax_year_*.yaml"):
            suffix = path.stem[len("tax_year_"):]
            if suffix.isdigit():
                years.append(int(suffix))
        return sorted(years)

    def load_config(self, tax_year: int) -> Dict[str, Any]:
        """
        Load configuration for a specific tax year.

        Args:
            tax_year: The tax year to load (e.g., 2025)

        Returns:
            Dictionary of tax parameters

        Raises:
            TaxConfigError: If no file exists for the year or required
                parameters are missing.
        """
        if tax_year in self._configs:
            return self._configs[tax_year]

        config = self._load_from_file(tax_year)
        config = self._apply_env_overrides(config, tax_year)
        self._validate_config(config, tax_year)

        self._configs[tax_year] = config
        return config

    def _load_from_file(self, tax_year: int) -> Dict[str, Any]:
        """Load configuration from the year's YAML file."""
        year_file = self.config_dir / f"tax_year_{tax_year}.yaml"
        if not year_file.exists():
            supported = ", ".join(str(y) for y in self.available_years()) or "none"
            raise TaxConfigError(
                f"Tax year {tax_year} is not supported (no {year_file.name} in "
                f"{self.config_dir}). Supported years: {supported}"
            )

        logger.info(f"Loading tax config from {year_file}")
        with open(year_file, "r", encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise TaxConfigError(f"Could not parse {year_file}: {exc}") from exc

        if not isinstance(config, dict):
            raise TaxConfigError(f"{year_file} must contain a mapping at the top level")

        if "_metadata" in config:
            self._metadata[tax_year] = ConfigMetadata(**config.pop("_metadata"))
        return config

    def _apply_env_overrides(self, config: Dict[str, Any], tax_year: int) -> Dict[str, Any]:
        """Apply environment variable overrides to scalar parameters."""
        prefix = f"{self.env_prefix}_{tax_year}_"

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            param_name = key[len(prefix):].lower()
            if isinstance(config.get(param_name), (dict, list)):
                logger.warning(f"Ignoring env override for structured parameter: {key}")
                continue
            try:
                if "." in value:
                    config[param_name] = float(value)
                elif value.isdigit():
                    config[param_name] = int(value)
                else:
                    config[param_name] = value
                logger.info(f"Applied env override: {param_name}={value}")
            except (ValueError, TypeError):
                logger.warning(f"Could not parse env override: {key}={value}")

        return config

    def _validate_config(self, config: Dict[str, Any], tax_year: int) -> None:
        """Validate configuration for completeness."""
        missing = [p for p in REQUIRED_PARAMETERS if p not in config]
        if missing:
            logger.error(f"Missing required parameters for {tax_year}: {missing}")
            raise TaxConfigError(f"Missing required parameters for {tax_year}: {missing}")

    def get_metadata(self, tax_year: int) -> Optional[ConfigMetadata]:
        """Get metadata for a tax year's configuration."""
        self.load_config(tax_year)
        return self._metadata.get(tax_year)


# Global singleton
_config_loader: Optional[TaxConfigLoader] = None


def get_config_loader() -> TaxConfigLoader:
    """Get the global config loader instance, honouring EngineSettings.parameters_dir."""
    global _config_loader
    if _config_loader is None:
        from taxguide.config.settings import get_settings

        _config_loader = TaxConfigLoader(config_dir=get_settings().parameters_dir)
    return _config_loader


def clear_config_cache() -> None:
    """Clear the configuration cache (useful for testing)."""
    global _config_loader
    _config_loader = None
