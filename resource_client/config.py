from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    base_url: str = ""

    request_timeout_seconds: float = 20.0
    max_retries: int = 3
    retry_backoff_base_seconds: float = 0.6

    user_agent: str = "resource-client/1.0"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RESOURCE_CLIENT_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_retries must be >= 1")
        return value

    @field_validator("request_timeout_seconds", "retry_backoff_base_seconds")
    @classmethod
    def validate_positive_float_settings(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("value must be > 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
