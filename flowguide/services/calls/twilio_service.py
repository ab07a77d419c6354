"""
Outbound Call Service using Twilio

Places a voice call to a phone number and plays a TwiML document when
the callee picks up. This is the only part of FlowGuide that talks to a
real third-party service.

Credentials come from ``CallSettings`` (TWILIO_ACCOUNT_SID,
TWILIO_AUTH_TOKEN, TWILIO_FROM). They are checked per call rather than
at startup, so the rest of the app runs without them.
"""

from typing import Any, Callable, Optional

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from flowguide.audit import get_logger
from flowguide.config import CallSettings, get_settings


logger = get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "Twilio credentials (TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_FROM) "
    "are required in environment"
)


class CallServiceError(Exception):
    """The provider rejected or failed to place the call."""
    pass


class CallConfigurationError(CallServiceError):
    """Credentials are missing."""
    pass


class CallService:
    """
    Thin wrapper over the Twilio REST client.

    Args:
        settings: Call settings, read from the environment when omitted
        client_factory: Builds a client from (account_sid, auth_token)
    """

    def __init__(
        self,
        settings: Optional[CallSettings] = None,
        client_factory: Callable[[str, str], Any] = Client,
    ):
        self._settings = settings or get_settings().calls
        self._client_factory = client_factory
        self._client: Optional[Any] = None

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _get_client(self) -> Any:
        """Get or create the Twilio client."""
        if not self.is_configured:
            raise CallConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        if self._client is None:
            self._client = self._client_factory(
                self._settings.account_sid,
                self._settings.auth_token,
            )
        return self._client

    def place_call(self, to: str) -> str:
        """
        Start an outbound call.

        Args:
            to: Destination number in E.164 format

        Returns:
            The provider's call SID

        Raises:
            CallConfigurationError: If credentials are missing
            CallServiceError: If the provider call fails
        """
        client = self._get_client()

        try:
            call = client.calls.create(
                to=to,
                from_=self._settings.from_number,
                url=self._settings.twiml_url,
            )
        except (TwilioException, requests.exceptions.RequestException) as e:
            logger.error("call_failed", to=to, error=str(e))
            raise CallServiceError(str(e)) from e

        logger.info("call_initiated", to=to, sid=call.sid)
        return call.sid
