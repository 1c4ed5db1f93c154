"""
Configuration — environment-driven settings.

    ORDERFLOW_LOG_LEVEL=DEBUG
    ORDERFLOW_STRICT_EFFECTS=true
    ORDERFLOW_RETRY__STORE__MAXIMUM_ATTEMPTS=3
    ORDERFLOW_RETRY__CACHE__INITIAL_INTERVAL=0.1
"""

from __future__ import annotations

from dataclasses import replace
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderflow.effects import ALL_CRITICAL, PARTITIONED, Classification
from orderflow.retry import (
    CACHE,
    DEFAULT,
    EXTERNAL_API,
    STORE,
    PolicyTable,
    RetryPolicy,
    policy_table,
)


class RetrySettings(BaseModel):
    """Overrides for one policy group; unset fields keep the built-in value."""

    model_config = ConfigDict(extra="forbid")

    initial_interval: float | None = Field(default=None, ge=0)
    backoff_coefficient: float | None = Field(default=None, ge=1)
    maximum_interval: float | None = Field(default=None, ge=0)
    maximum_attempts: PositiveInt | None = None
    timeout: PositiveFloat | None = None

    def apply(self, base: RetryPolicy) -> RetryPolicy:
        return replace(base, **self.model_dump(exclude_none=True))


class RetryGroups(BaseModel):
    """One override block per policy group."""

    model_config = ConfigDict(extra="forbid")

    store: RetrySettings = Field(default_factory=RetrySettings)
    external_api: RetrySettings = Field(default_factory=RetrySettings)
    cache: RetrySettings = Field(default_factory=RetrySettings)
    default: RetrySettings = Field(default_factory=RetrySettings)


class OrderflowSettings(BaseSettings):
    """
    Engine settings.
    Loaded from ORDERFLOW_* environment variables and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDERFLOW_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    strict_effects: bool = False
    retry: RetryGroups = Field(default_factory=RetryGroups)

    def policies(self) -> PolicyTable:
        return policy_table(
            store=self.retry.store.apply(STORE),
            external_api=self.retry.external_api.apply(EXTERNAL_API),
            cache=self.retry.cache.apply(CACHE),
            default=self.retry.default.apply(DEFAULT),
        )

    def classification(self) -> Classification:
        return ALL_CRITICAL if self.strict_effects else PARTITIONED


@lru_cache()
def get_settings() -> OrderflowSettings:
    return OrderflowSettings()


__all__ = ("RetrySettings", "RetryGroups", "OrderflowSettings", "get_settings")
