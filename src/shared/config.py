"""Runtime settings, read from ``MARKETPLACE_*`` environment variables."""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MARKETPLACE_", env_file=".env", extra="ignore")

    env: str = "development"
    log_level: str | None = None
    log_dir: str | None = None

    # Revenue
    commission_rate: Decimal = Decimal("0.10")

    # Promotional placements
    distance_sentinel: float = 999999.0
    featured_limit: int = 6
    sponsored_limit: int = 3
    max_placement_limit: int = 50

    @field_validator("commission_rate")
    @classmethod
    def rate_within_bounds(cls, v: Decimal) -> Decimal:
        if not Decimal("0") <= v <= Decimal("1"):
            raise ValueError("commission_rate must be between 0 and 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
