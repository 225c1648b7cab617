"""Configuration for the one-time code store."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_DURATION_MS = 5 * 60 * 1000


class OtpStoreSettings(BaseSettings):
    """Runtime settings for the code store."""

    model_config = SettingsConfigDict(env_prefix="OTP_STORE_")

    max_duration_ms: int = Field(
        default=MAX_DURATION_MS,
        gt=0,
        description="Upper bound applied to every requested validity window",
    )
