"""
Runtime configuration for the mock device.

Values come from environment variables with sensible local defaults; the
command line overrides them. Invalid values raise pydantic's ValidationError.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Default cycle interval per signal mode, in seconds
DEFAULT_INTERVALS = {
    "sine": 0.1,
    "uniform": 1.0,
}


class DeviceConfig(BaseModel):
    base_url: str = "http://127.0.0.1:3010"
    token_file: str = "token.txt"
    interval: Optional[float] = Field(default=None, ge=0)
    request_timeout: float = Field(default=10.0, gt=0)
    auth_backoff_initial: float = Field(default=1.0, ge=0)
    auth_backoff_max: float = Field(default=30.0, ge=0)
    auth_max_attempts: int = Field(default=0, ge=0)  # 0 retries forever
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @classmethod
    def from_env(cls) -> "DeviceConfig":
        """Build config from DEVICE_* environment variables."""
        interval = os.getenv("DEVICE_INTERVAL")
        return cls(
            base_url=os.getenv("DEVICE_BASE_URL", "http://127.0.0.1:3010"),
            token_file=os.getenv("DEVICE_TOKEN_FILE", "token.txt"),
            interval=interval or None,
            request_timeout=os.getenv("DEVICE_REQUEST_TIMEOUT", "10"),
            auth_backoff_initial=os.getenv("DEVICE_AUTH_BACKOFF_INITIAL", "1"),
            auth_backoff_max=os.getenv("DEVICE_AUTH_BACKOFF_MAX", "30"),
            auth_max_attempts=os.getenv("DEVICE_AUTH_MAX_ATTEMPTS", "0"),
            log_level=os.getenv("DEVICE_LOG_LEVEL", "INFO"),
        )

    def with_overrides(self, **overrides) -> "DeviceConfig":
        """Copy with non-None overrides applied and validated."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return DeviceConfig(**values)

    @property
    def auth_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/auth"

    @property
    def logs_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/logs"

    def interval_for(self, mode: str) -> float:
        """Configured interval, or the default for the given signal mode."""
        if self.interval is not None:
            return self.interval
        return DEFAULT_INTERVALS[mode]
