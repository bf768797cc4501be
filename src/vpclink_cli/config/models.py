"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from vpclink_cli.config.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_WAIT_DELAY,
    DEFAULT_WAIT_MIN_INTERVAL,
    DEFAULT_WAIT_TIMEOUT,
)


class ControlPlaneProfile(BaseModel):
    """A named control-plane connection profile."""

    name: str
    url: str = Field(description="Control-plane base URL, e.g. https://apigateway.example.com")
    token: str | None = Field(default=None, description="API key")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth_configured(self) -> bool:
        return self.token is not None


class WaitSettings(BaseModel):
    """Bounds for waiting on asynchronous provisioning."""

    timeout: float = Field(default=DEFAULT_WAIT_TIMEOUT, gt=0, description="Give up after this many seconds")
    delay: float = Field(default=DEFAULT_WAIT_DELAY, ge=0, description="Initial delay before the first poll")
    min_interval: float = Field(
        default=DEFAULT_WAIT_MIN_INTERVAL, gt=0, description="Minimum seconds between polls",
    )


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    wait: WaitSettings = Field(default_factory=WaitSettings)
    profiles: dict[str, ControlPlaneProfile] = Field(default_factory=dict)
