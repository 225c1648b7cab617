"""Pydantic based configuration for the code service."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator

from otp_store.config import OtpStoreSettings


class ServerSettings(BaseModel):
    min_digits: int = Field(default=6, ge=1, description="Shortest accepted code")
    max_digits: int = Field(default=8, ge=1, description="Longest accepted code")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the service from a browser",
    )
    store: OtpStoreSettings = Field(default_factory=OtpStoreSettings)

    @model_validator(mode="after")
    def check_digit_range(self) -> "ServerSettings":
        if self.min_digits > self.max_digits:
            raise ValueError("min_digits cannot exceed max_digits")
        return self

    @property
    def min_code(self) -> int:
        return 10 ** (self.min_digits - 1)

    @property
    def max_code(self) -> int:
        return 10**self.max_digits - 1
