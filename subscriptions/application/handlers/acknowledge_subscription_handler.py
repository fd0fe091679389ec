"""
AcknowledgeSubscriptionHandler.

Handler activating this cluster's subscription:
cluster identity -> licensing service -> signature check -> trusted time -> state.
"""

import logging

from asgiref.sync import sync_to_async

from core.domain.exceptions import (
    ClusterDetailsUnavailableError,
    ClusterIdentityError,
    EnvelopeRejectedError,
    SubscriptionActivationError,
    SubscriptionException,
)
from core.domain.value_objects import TrialEndSource
from core.instrumentation import Status, StatusCode, get_tracer
from core.metrics import subscription_acknowledgments_total
from subscriptions.application.commands.acknowledge_subscription import (
    AcknowledgeSubscriptionCommand,
)
from subscriptions.application.dto.subscription_dto import SubscriptionDetailsDTO
from subscriptions.application.services.envelope_verifier import EnvelopeVerifier
from subscriptions.application.services.trusted_time_service import TrustedTimeService
from subscriptions.domain.subscription import SubscriptionDetails
from subscriptions.ports.cluster_identity import ClusterIdentityResolver
from subscriptions.ports.license_client import LicenseClient
from subscriptions.ports.subscription_state_store import SubscriptionStateStore

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class AcknowledgeSubscriptionHandler:
    """Handler for AcknowledgeSubscriptionCommand."""

    def __init__(
        self,
        cluster_identity_resolver: ClusterIdentityResolver,
        license_client: LicenseClient,
        envelope_verifier: EnvelopeVerifier,
        trusted_time_service: TrustedTimeService,
        state_store: SubscriptionStateStore,
        trial_end_source: TrialEndSource = TrialEndSource.TRIAL_END_AT,
    ):
        """Initialize handler with its collaborators."""
        self.cluster_identity_resolver = cluster_identity_resolver
        self.license_client = license_client
        self.envelope_verifier = envelope_verifier
        self.trusted_time_service = trusted_time_service
        self.state_store = state_store
        self.trial_end_source = trial_end_source

    async def handle(self, command: AcknowledgeSubscriptionCommand) -> SubscriptionDetailsDTO:
        """
        Handle acknowledge subscription command.

        Every step is terminal on failure. The state is only written in the
        last step, so a failed or cancelled call leaves it untouched (except
        for the reset on a cluster identity failure).

        Args:
            command: AcknowledgeSubscriptionCommand

        Returns:
            SubscriptionDetailsDTO of the installed subscription

        Raises:
            ClusterDetailsUnavailableError: If the cluster identity can't be resolved
            LicenseServiceError: If the licensing service call fails
            SubscriptionConflictError: If the key is bound to another cluster
            SubscriptionActivationError: If the license payload can't be authenticated
            TrustedTimestampError: If the licensing service time can't be authenticated
        """
        with tracer.start_as_current_span("subscription.acknowledge") as span:
            try:
                result = await self._acknowledge(command)
            except SubscriptionException as e:
                subscription_acknowledgments_total.labels(outcome=e.code.lower()).inc()
                span.set_attribute("error", e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            subscription_acknowledgments_total.labels(outcome="success").inc()
            span.set_attribute("subscription.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return result

    async def _acknowledge(self, command: AcknowledgeSubscriptionCommand) -> SubscriptionDetailsDTO:
        try:
            cluster_identity = await sync_to_async(
                self.cluster_identity_resolver.resolve, thread_sensitive=False
            )()
        except ClusterIdentityError as e:
            logger.error(
                "Can't resolve cluster identity, resetting subscription",
                extra={"step": "resolve_cluster_identity", "error": e.message},
            )
            self.state_store.clear()
            raise ClusterDetailsUnavailableError() from e

        raw = await sync_to_async(self.license_client.acknowledge, thread_sensitive=False)(
            command.activation_key, str(cluster_identity)
        )

        try:
            payload = self.envelope_verifier.open(raw, "subscription")
        except EnvelopeRejectedError as e:
            raise SubscriptionActivationError() from e

        try:
            details = SubscriptionDetails.from_payload(payload, self.trial_end_source)
        except ValueError as e:
            logger.error(
                "Verified subscription payload is malformed",
                extra={"step": "build_details", "error": str(e)},
            )
            raise SubscriptionActivationError() from e

        checked_at = await self.trusted_time_service.current_timestamp()

        state = self.state_store.write(details, checked_at, command.activation_key)
        logger.info(
            "Subscription acknowledged",
            extra={"status": details.status.value, "checked_at": checked_at},
        )
        return SubscriptionDetailsDTO.from_state(state)
