"""Configuration management for errbeat clients."""

import socket
from typing import Any, Callable, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_API_URL, LOG_LEVELS


class Settings(BaseSettings):
    """Client settings, from keyword arguments or ERRBEAT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ERRBEAT_",
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    # Credentials
    app_id: Optional[str] = Field(None, description="Application id on the collector")
    organization_id: Optional[str] = Field(None, description="Organization id on the collector")
    secret_token: Optional[SecretStr] = Field(None, description="Secret token for the collector API")

    active: bool = Field(True, description="Set to false to never send anything")
    client_log_level: str = Field("info", description="Level of errbeat's own log output")
    logger: Optional[Any] = Field(
        None, exclude=True, description="structlog-compatible logger to use instead of the default"
    )
    hostname: str = Field(default_factory=socket.gethostname, description="Reported machine name")
    stack_trace_limit: Optional[int] = Field(
        None, ge=1, description="Max frames captured per stack, counted from the top; unlimited if unset"
    )
    capture_exceptions: bool = Field(True, description="Report uncaught exceptions and exit")
    exception_log_level: str = Field("fatal", description="Level for locally logged captures")
    filter: Optional[Callable[..., Any]] = Field(
        None, exclude=True, description="Called with (error, event); returns the event to send"
    )
    ff_capture_frame: bool = Field(
        False, description="Add the capture call site to stacks without in-app frames"
    )

    # Transport
    api_url: str = Field(DEFAULT_API_URL, description="Collector base URL")
    timeout: float = Field(10.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("client_log_level", "exception_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.app_id
            and self.organization_id
            and self.secret_token
            and self.secret_token.get_secret_value()
        )
