"""
Unit tests for AcknowledgeSubscriptionHandler.
"""
import asyncio

import pytest
from conftest import TRUSTED_TIME, FakeClusterIdentityResolver, FakeLicenseClient, build_envelope

from core.domain.exceptions import (
    ClusterDetailsUnavailableError,
    ClusterIdentityLookupError,
    ClusterIdentityNotFoundError,
    LicenseServiceError,
    SubscriptionActivationError,
    SubscriptionConflictError,
    TrustedTimestampError,
)
from core.domain.value_objects import SubscriptionStatus, TrialEndSource
from subscriptions.application.commands.acknowledge_subscription import (
    AcknowledgeSubscriptionCommand,
)
from subscriptions.application.handlers.acknowledge_subscription_handler import (
    AcknowledgeSubscriptionHandler,
)
from subscriptions.application.services.trusted_time_service import TrustedTimeService
from subscriptions.domain.services import SubscriptionValidator
from subscriptions.domain.subscription import SubscriptionDetails


@pytest.fixture
def make_handler(envelope_verifier, state_store):
    """Fixture building a handler around the given doubles."""

    def _make(resolver, client, trial_end_source=TrialEndSource.TRIAL_END_AT):
        return AcknowledgeSubscriptionHandler(
            cluster_identity_resolver=resolver,
            license_client=client,
            envelope_verifier=envelope_verifier,
            trusted_time_service=TrustedTimeService(client, envelope_verifier),
            state_store=state_store,
            trial_end_source=trial_end_source,
        )

    return _make


def install_previous(state_store):
    details = SubscriptionDetails(
        status=SubscriptionStatus.ACTIVE, name="Previous", start_date=1, end_date=2
    )
    state_store.write(details, 42, "OLD")


@pytest.mark.asyncio
class TestAcknowledgeSubscriptionHandler:
    """Tests for AcknowledgeSubscriptionHandler."""

    async def test_acknowledge_trialing_subscription(
        self, make_handler, cluster_identity_resolver, license_client, state_store
    ):
        """Test a verified trialing subscription is installed."""
        handler = make_handler(cluster_identity_resolver, license_client)

        result = await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert license_client.acknowledge_calls == [("ABC123", "ns-uid-1")]
        assert result.status == "trialing"
        assert result.last_checked_at == TRUSTED_TIME

        state = state_store.read()
        assert state.details.status is SubscriptionStatus.TRIALING
        assert state.details.nodes_limit == 5
        assert state.details.trial_end_at == 1700209600
        assert state.last_checked_at == TRUSTED_TIME
        assert state.activation_key == "ABC123"

    async def test_trial_end_from_end_date(
        self, make_handler, cluster_identity_resolver, license_client, state_store
    ):
        """Test the legacy trial end mapping."""
        handler = make_handler(
            cluster_identity_resolver, license_client, trial_end_source=TrialEndSource.END_DATE
        )

        await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert state_store.read().details.trial_end_at == 1701592000

    @pytest.mark.parametrize(
        "error", [ClusterIdentityNotFoundError(), ClusterIdentityLookupError()]
    )
    async def test_cluster_identity_failure_resets_state(
        self, make_handler, license_client, state_store, error
    ):
        """Test an unresolvable cluster resets the state and stops."""
        install_previous(state_store)
        handler = make_handler(FakeClusterIdentityResolver(error=error), license_client)

        with pytest.raises(ClusterDetailsUnavailableError, match="can't get cluster details"):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert state_store.read().is_empty
        assert license_client.acknowledge_calls == []

    async def test_bad_signature_keeps_state(
        self, make_handler, cluster_identity_resolver, signed_timestamp, trialing_payload, state_store
    ):
        """Test a forged acknowledgment is rejected without touching the state."""
        install_previous(state_store)
        client = FakeLicenseClient(
            acknowledgment=build_envelope("subscription", trialing_payload, "c2lnbmF0dXJl"),
            timestamp=signed_timestamp,
        )
        handler = make_handler(cluster_identity_resolver, client)

        with pytest.raises(SubscriptionActivationError, match="can't activate subscription"):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert state_store.read().details.name == "Previous"
        assert client.timestamp_calls == 0

    async def test_malformed_body(self, make_handler, cluster_identity_resolver, state_store):
        """Test a non-JSON body is an activation failure."""
        handler = make_handler(cluster_identity_resolver, FakeLicenseClient(acknowledgment=b"<html>"))

        with pytest.raises(SubscriptionActivationError):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))
        assert state_store.read().is_empty

    async def test_mistyped_signed_payload(
        self, make_handler, cluster_identity_resolver, signed_subscription, signed_timestamp, trialing_payload
    ):
        """Test a signed payload with a wrongly typed field is an activation failure."""
        trialing_payload["end_date"] = "soon"
        client = FakeLicenseClient(
            acknowledgment=signed_subscription(trialing_payload), timestamp=signed_timestamp
        )
        handler = make_handler(cluster_identity_resolver, client)

        with pytest.raises(SubscriptionActivationError):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

    @pytest.mark.parametrize("error", [LicenseServiceError(), SubscriptionConflictError()])
    async def test_remote_error_propagates(
        self, make_handler, cluster_identity_resolver, state_store, error
    ):
        """Test licensing service errors reach the caller unchanged."""
        install_previous(state_store)
        handler = make_handler(cluster_identity_resolver, FakeLicenseClient(acknowledge_error=error))

        with pytest.raises(type(error)):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))
        assert state_store.read().activation_key == "OLD"

    async def test_timestamp_failure_keeps_state(
        self, make_handler, cluster_identity_resolver, signed_subscription, trialing_payload, state_store
    ):
        """Test an unauthenticated timestamp aborts before the state is written."""
        install_previous(state_store)
        client = FakeLicenseClient(
            acknowledgment=signed_subscription(trialing_payload), timestamp=b"{}"
        )
        handler = make_handler(cluster_identity_resolver, client)

        with pytest.raises(TrustedTimestampError):
            await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))
        assert state_store.read().details.name == "Previous"

    async def test_cancelled_before_write_keeps_state(
        self, make_handler, cluster_identity_resolver, license_client, state_store
    ):
        """Test a cancelled acknowledgment leaves the state untouched."""
        install_previous(state_store)
        handler = make_handler(cluster_identity_resolver, license_client)
        started = asyncio.Event()

        async def never_returns():
            started.set()
            await asyncio.sleep(3600)

        handler.trusted_time_service.current_timestamp = never_returns

        task = asyncio.ensure_future(
            handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))
        )
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert state_store.read().activation_key == "OLD"


@pytest.mark.asyncio
class TestAcknowledgeThenValidate:
    """Tests combining acknowledgment with the validity check."""

    async def test_end_to_end_trialing(
        self, make_handler, cluster_identity_resolver, signed_subscription, signed_timestamp, state_store
    ):
        """Test key "ABC123" on cluster "ns-uid-1" installs the payload verbatim."""
        payload = {"status": "trialing", "name": "pro", "start_date": 1000, "end_date": 2000}
        client = FakeLicenseClient(
            acknowledgment=signed_subscription(payload), timestamp=signed_timestamp
        )
        handler = make_handler(cluster_identity_resolver, client)

        result = await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert client.acknowledge_calls == [("ABC123", "ns-uid-1")]
        assert SubscriptionValidator.is_valid(state_store) is True
        assert (result.status, result.name, result.start_date, result.end_date) == (
            "trialing",
            "pro",
            1000,
            2000,
        )

    @pytest.mark.parametrize("status, valid", [("active", True), ("canceled", False)])
    async def test_validity_after_acknowledgment(
        self,
        make_handler,
        cluster_identity_resolver,
        signed_subscription,
        signed_timestamp,
        trialing_payload,
        state_store,
        status,
        valid,
    ):
        """Test validity follows the acknowledged status."""
        trialing_payload["status"] = status
        client = FakeLicenseClient(
            acknowledgment=signed_subscription(trialing_payload), timestamp=signed_timestamp
        )
        handler = make_handler(cluster_identity_resolver, client)

        await handler.handle(AcknowledgeSubscriptionCommand(activation_key="ABC123"))

        assert SubscriptionValidator.is_valid(state_store) is valid
        assert SubscriptionValidator.is_valid(state_store) is valid
        assert state_store.read().is_empty is not valid
