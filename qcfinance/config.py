from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_TAX_YEAR = 2025


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_path(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value


class Settings(BaseModel):
    tax_year: int = Field(default_factory=lambda: _env_int("QCFIN_TAX_YEAR", DEFAULT_TAX_YEAR))
    parameters_path: str | None = Field(default_factory=lambda: _env_path("QCFIN_PARAMETERS_PATH"))
    cities_path: str | None = Field(default_factory=lambda: _env_path("QCFIN_CITIES_PATH"))
    scenario_root: str = Field(default_factory=lambda: os.getenv("QCFIN_SCENARIO_ROOT", "artifacts/scenarios"))
    max_saved_scenarios: int = Field(default_factory=lambda: _env_int("QCFIN_MAX_SCENARIOS", 10))
    log_dir: str = Field(default_factory=lambda: os.getenv("QCFIN_LOG_DIR", "logs"))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    # Default factories read the environment, so their values go through the validators too.
    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("max_saved_scenarios")
    @classmethod
    def _validate_max_scenarios(cls, value: int) -> int:
        return max(1, value)

    @model_validator(mode="after")
    def _require_supported_year(self) -> "Settings":
        if self.parameters_path is not None:
            return self
        from qcfinance.tax_years import SUPPORTED_YEARS

        if self.tax_year not in SUPPORTED_YEARS:
            raise ValueError(
                f"QCFIN_TAX_YEAR must be one of {list(SUPPORTED_YEARS)}, got {self.tax_year}"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
