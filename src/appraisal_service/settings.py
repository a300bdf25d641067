from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Valuation
    strict_validation: bool = Field(default=False, alias="STRICT_VALIDATION")
    valuation_as_of_year: int | None = Field(default=None, alias="VALUATION_AS_OF_YEAR")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")
