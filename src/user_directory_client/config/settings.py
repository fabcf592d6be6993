"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
PositiveFloat = Annotated[float, Field(gt=0.0)]


class Settings(BaseSettings):
    """Environment-driven client settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    users_api_base_url: HttpUrl = Field(
        default="http://localhost:3000",
        validate_default=True,
        validation_alias="USERS_API_BASE_URL",
    )
    users_api_timeout_seconds: NonNegativeFloat = Field(
        default=10.0,
        validation_alias="USERS_API_TIMEOUT_SECONDS",
    )
    notification_duration_seconds: PositiveFloat = Field(
        default=3.0,
        validation_alias="NOTIFICATION_DURATION_SECONDS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache client settings."""

    return Settings()
