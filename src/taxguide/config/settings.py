"""Engine settings using Pydantic Settings.

Values are read from the environment with the ``TAXGUIDE_`` prefix:

- TAXGUIDE_TAX_YEAR: default tax year used by ``compute`` (default 2025)
- TAXGUIDE_PARAMETERS_DIR: directory holding tax_year_<YEAR>.yaml files
- TAXGUIDE_LOG_LEVEL: level applied by ``configure_logging``
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EngineSettings(BaseSettings):
    """Main engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="TAXGUIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tax_year: int = Field(default=2025, description="Default tax year")
    parameters_dir: Optional[Path] = Field(
        default=None,
        description="Override directory for tax_year_<YEAR>.yaml parameter files",
    )
    log_level: str = Field(default="WARNING", description="Log level for the taxguide logger")

    @field_validator("log_level", mode="before")
    def validate_log_level(cls, v):
        if v is None or str(v).strip() == "":
            return "WARNING"
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("parameters_dir", mode="before")
    def validate_parameters_dir(cls, v):
        if v is None or str(v).strip() == "":
            return None
        return v

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the package logger."""
        logging.getLogger("taxguide").setLevel(self.log_level)
        logger.debug(f"taxguide log level set to {self.log_level}")


@lru_cache
def get_settings() -> EngineSettings:
    """
    Get cached engine settings instance.

    Returns:
        EngineSettings: Cached settings loaded from environment.
    """
    return EngineSettings()
