"""Outbound call service."""

from flowguide.services.calls.twilio_service import (
    MISSING_CREDENTIALS_MESSAGE,
    CallConfigurationError,
    CallService,
    CallServiceError,
)

__all__ = [
    "MISSING_CREDENTIALS_MESSAGE",
    "CallConfigurationError",
    "CallService",
    "CallServiceError",
]
