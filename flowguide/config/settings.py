"""
Configuration Management for FlowGuide

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so the demo store, the network
simulation and the call service read their knobs from one place.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Demo store and network simulation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWGUIDE_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".flowguide"),
        description="Directory holding the durable key-value slots"
    )
    storage_key: str = Field(
        default="flowguide-demo-store",
        description="Durable key holding the whole table set"
    )
    auth_storage_key: str = Field(
        default="flowguide-demo-auth",
        description="Durable key holding the demo auth session"
    )

    # Network simulation
    min_latency_ms: int = Field(
        default=150,
        ge=0,
        description="Lower bound of the simulated request latency"
    )
    max_latency_ms: int = Field(
        default=450,
        ge=0,
        description="Upper bound of the simulated request latency"
    )
    failure_probability: float = Field(
        default=0.08,
        ge=0.0,
        le=1.0,
        description="Chance that the first unlucky call raises a network hiccup"
    )
    allow_failure: bool = Field(
        default=True,
        description="Enable the one-shot failure injection"
    )

    @model_validator(mode="after")
    def check_latency_bounds(self) -> "StoreSettings":
        if self.max_latency_ms < self.min_latency_ms:
            raise ValueError("max_latency_ms cannot be below min_latency_ms")
        return self


class CallSettings(BaseSettings):
    """
    Twilio configuration for the outbound call endpoint.

    Every field is optional: missing credentials are reported per request
    so the rest of the app keeps working without them.
    """

    model_config = SettingsConfigDict(
        env_prefix="TWILIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    account_sid: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    auth_token: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    from_number: Optional[str] = Field(
        default=None,
        validation_alias="TWILIO_FROM",
        description="Caller ID used for outbound calls"
    )
    twiml_url: str = Field(
        default="http://demo.twilio.com/docs/voice.xml",
        description="TwiML document played when the call connects"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    demo_mode: bool = Field(
        default=True,
        description="Serve data from the local demo store"
    )

    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency used when formatting amounts"
    )
    server_port: int = Field(
        default=4000,
        ge=1,
        le=65535,
        description="Port for the call service"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def calls(self) -> CallSettings:
        return CallSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.store
        results["store"] = True
    except Exception as e:
        results["store"] = False
        results["store_error"] = str(e)

    try:
        calls = settings.calls
        results["calls"] = calls.is_configured
        if not calls.is_configured:
            results["calls_error"] = (
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM are required"
            )
    except Exception as e:
        results["calls"] = False
        results["calls_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
