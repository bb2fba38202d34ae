"""Engine configuration using Pydantic settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Social Security Engine"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # 'text' or 'json' (json for production)

    # Present value assumptions
    SS_LIFE_EXPECTANCY: float = 90
    SS_DISCOUNT_RATE: float = 0.03
    SS_COLA_RATE: float = 0.025  # Annual cost-of-living adjustment

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("SS_DISCOUNT_RATE", "SS_COLA_RATE")
    @classmethod
    def validate_rate(cls, v: float) -> float:
        """Rates are annual decimals (0.03 == 3%), never percentages."""
        if not -1 < v < 1:
            raise ValueError(f"Rate must be an annual decimal between -1 and 1, got {v}")
        return v

    @field_validator("SS_LIFE_EXPECTANCY")
    @classmethod
    def validate_life_expectancy(cls, v: float) -> float:
        if not 62 <= v <= 120:
            raise ValueError(f"Life expectancy must be between 62 and 120, got {v}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
