"""
Trusted time service.

Anchors license checks to the licensing service clock so a tampered
local clock can't mask an expired subscription.
"""
import logging

from asgiref.sync import sync_to_async

from core.domain.exceptions import EnvelopeRejectedError, TrustedTimestampError
from core.instrumentation import Status, StatusCode, get_tracer
from subscriptions.application.services.envelope_verifier import EnvelopeVerifier
from subscriptions.ports.license_client import LicenseClient

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class TrustedTimeService:
    """Service returning the authenticated licensing service time."""

    def __init__(self, license_client: LicenseClient, envelope_verifier: EnvelopeVerifier):
        """Initialize service with its collaborators."""
        self.license_client = license_client
        self.envelope_verifier = envelope_verifier

    async def current_timestamp(self) -> int:
        """
        Fetch and authenticate the current licensing service time.

        Returns:
            Epoch seconds reported by the licensing service

        Raises:
            LicenseServiceError: If the remote call fails
            TrustedTimestampError: If the response can't be authenticated
        """
        with tracer.start_as_current_span("subscription.current_timestamp") as span:
            raw = await sync_to_async(self.license_client.current_timestamp, thread_sensitive=False)()

            try:
                payload = self.envelope_verifier.open(raw, "time")
            except EnvelopeRejectedError as e:
                span.set_status(Status(StatusCode.ERROR, "timestamp rejected"))
                raise TrustedTimestampError() from e

            current_time = payload.get("current_time")
            if isinstance(current_time, bool) or not isinstance(current_time, int):
                logger.error("Signed time payload has no integer current_time")
                span.set_status(Status(StatusCode.ERROR, "timestamp malformed"))
                raise TrustedTimestampError()

            span.set_attribute("subscription.current_time", current_time)
            return current_time
