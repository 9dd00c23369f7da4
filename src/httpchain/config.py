"""Configuration models for the HTTP client."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, field_validator

DEFAULT_RETRY_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


class TransportBackend(str, Enum):
    """Backends a client can dispatch requests through."""

    NETWORK = "network"
    IN_PROCESS = "in_process"


class UrlErrorPolicy(str, Enum):
    """How verb helpers react to a malformed target URL."""

    RAISE = "raise"
    DEFER = "defer"


class RetryConfig(BaseModel):
    """Retry configuration used by the retry middleware."""

    max_attempts: PositiveInt = Field(
        default=3,
        description="Total attempts per request, including the first one.",
    )
    backoff_factor: float = Field(
        default=0.5,
        ge=0.0,
        description="Base for exponential backoff timing (seconds).",
    )
    jitter_seconds: float = Field(
        default=0.3,
        ge=0.0,
        description="Random jitter added to backoff to avoid lockstep retries.",
    )
    retry_on_status: frozenset[int] = Field(default=DEFAULT_RETRY_STATUS_CODES)
    retry_on_transport_errors: bool = True

    @field_validator("retry_on_status")
    @classmethod
    def _validate_status(cls, value: frozenset[int]) -> frozenset[int]:
        for status in value:
            if not 100 <= status <= 599:
                raise ValueError(f"invalid HTTP status code in retry_on_status: {status}")
        return value


class ThrottleConfig(BaseModel):
    """Caps and server hints applied to retry delays."""

    enabled: bool = True
    max_delay_seconds: float = Field(default=10.0, ge=0.0)
    use_server_hints: bool = Field(
        default=True,
        description="Honour Retry-After response headers when computing delays.",
    )


class RedirectConfig(BaseModel):
    """Redirect-following behavior."""

    max_redirects: int = Field(
        default=3,
        ge=0,
        description="How many redirects are followed before giving up.",
    )
    strip_sensitive_headers: bool = Field(
        default=True,
        description="Drop Authorization and Cookie headers when a redirect changes origin.",
    )


class TelemetryConfig(BaseModel):
    """Telemetry event emission settings."""

    enabled: bool = True
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    include_headers: bool = False


class ClientConfig(BaseModel):
    """Top-level configuration object for a client."""

    base_url: Optional[str] = Field(
        default=None,
        description="Base URL that relative request targets are joined onto.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers added to every request that does not set them already.",
    )
    timeout: Optional[PositiveFloat] = Field(default=60.0)
    transport: TransportBackend = TransportBackend.NETWORK
    logger: bool = Field(
        default=True,
        description="Install the default logging middleware on new clients.",
    )
    url_errors: UrlErrorPolicy = UrlErrorPolicy.RAISE
    retry: RetryConfig = Field(default_factory=RetryConfig)
    throttle: ThrottleConfig = Field(default_factory=ThrottleConfig)
    redirect: RedirectConfig = Field(default_factory=RedirectConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "://" not in value:
            raise ValueError("base_url must be an absolute URL")
        return value


__all__ = [
    "ClientConfig",
    "DEFAULT_RETRY_STATUS_CODES",
    "RedirectConfig",
    "RetryConfig",
    "TelemetryConfig",
    "ThrottleConfig",
    "TransportBackend",
    "UrlErrorPolicy",
]
