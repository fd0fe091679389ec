"""
App configuration for the subscriptions module.

The app config owns the process-wide subscription state store and wires
the handlers that read and mutate it.
"""

import threading

from django.apps import AppConfig, apps
from django.conf import settings


class SubscriptionsConfig(AppConfig):
    """App configuration for subscriptions."""

    name = "subscriptions"
    verbose_name = "Subscriptions"

    def ready(self):
        """Create the state store and the infrastructure adapters."""
        from subscriptions.infrastructure.ecdsa_signature_verifier import ECDSASignatureVerifier
        from subscriptions.infrastructure.http_license_client import HttpLicenseClient
        from subscriptions.infrastructure.in_memory_state_store import (
            InMemorySubscriptionStateStore,
        )
        from subscriptions.infrastructure.kubernetes_cluster_identity import (
            KubernetesClusterIdentityResolver,
        )

        self.state_store = InMemorySubscriptionStateStore()
        # Held while the gate re-acknowledges a stale subscription
        self.refresh_lock = threading.Lock()
        self.cluster_identity_resolver = KubernetesClusterIdentityResolver(
            namespace=settings.CLUSTER_IDENTITY_NAMESPACE
        )
        self.license_client = HttpLicenseClient(
            base_url=settings.SUBSCRIPTION_API_BASE_URL,
            timeout=settings.SUBSCRIPTION_API_TIMEOUT,
        )
        self.signature_verifier = ECDSASignatureVerifier()

    def envelope_verifier(self):
        """Build an envelope verifier for the configured trusted public key."""
        from subscriptions.application.services.envelope_verifier import EnvelopeVerifier

        return EnvelopeVerifier(self.signature_verifier, settings.ECC_PUBLIC_KEY)

    def trusted_time_service(self):
        """Build the trusted time service."""
        from subscriptions.application.services.trusted_time_service import TrustedTimeService

        return TrustedTimeService(self.license_client, self.envelope_verifier())

    def acknowledge_handler(self):
        """Build the acknowledgment handler bound to this process's state."""
        from core.domain.value_objects import TrialEndSource
        from subscriptions.application.handlers.acknowledge_subscription_handler import (
            AcknowledgeSubscriptionHandler,
        )

        return AcknowledgeSubscriptionHandler(
            cluster_identity_resolver=self.cluster_identity_resolver,
            license_client=self.license_client,
            envelope_verifier=self.envelope_verifier(),
            trusted_time_service=self.trusted_time_service(),
            state_store=self.state_store,
            trial_end_source=TrialEndSource(settings.SUBSCRIPTION_TRIAL_END_SOURCE),
        )

    def current_subscription_handler(self):
        """Build the current subscription query handler."""
        from subscriptions.application.handlers.get_current_subscription_handler import (
            GetCurrentSubscriptionHandler,
        )

        return GetCurrentSubscriptionHandler(self.state_store)


def get_subscriptions_config() -> SubscriptionsConfig:
    """Return the installed subscriptions app config."""
    return apps.get_app_config("subscriptions")
