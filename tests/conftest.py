"""
Pytest configuration and shared fixtures.
"""

import base64
import json

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from core.domain.value_objects import ClusterIdentity
from subscriptions.application.services.envelope_verifier import EnvelopeVerifier
from subscriptions.application.services.trusted_time_service import TrustedTimeService
from subscriptions.apps import get_subscriptions_config
from subscriptions.domain.canonical import canonical_bytes
from subscriptions.infrastructure.ecdsa_signature_verifier import ECDSASignatureVerifier
from subscriptions.infrastructure.in_memory_state_store import InMemorySubscriptionStateStore
from subscriptions.ports.cluster_identity import ClusterIdentityResolver
from subscriptions.ports.license_client import LicenseClient

TRUSTED_TIME = 1700000000


def sign_payload(private_key, payload) -> str:
    """Sign the canonical bytes of a payload and return the base64 signature."""
    signature = private_key.sign(canonical_bytes(payload), ec.ECDSA(hashes.SHA256()))
    return base64.b64encode(signature).decode("ascii")


def build_envelope(payload_field, payload, signature) -> bytes:
    """Build a licensing service response body."""
    return json.dumps({"data": {"signature": signature, payload_field: payload}}).encode("utf-8")


class FakeClusterIdentityResolver(ClusterIdentityResolver):
    """Resolver returning a fixed identity or raising a fixed error."""

    def __init__(self, identity="ns-uid-1", error=None):
        self.identity = identity
        self.error = error
        self.calls = 0

    def resolve(self) -> ClusterIdentity:
        self.calls += 1
        if self.error:
            raise self.error
        return ClusterIdentity(self.identity)


class FakeLicenseClient(LicenseClient):
    """Licensing service double returning canned bodies."""

    def __init__(self, acknowledgment=b"", timestamp=b"", acknowledge_error=None, timestamp_error=None):
        self.acknowledgment = acknowledgment
        self.timestamp = timestamp
        self.acknowledge_error = acknowledge_error
        self.timestamp_error = timestamp_error
        self.acknowledge_calls = []
        self.timestamp_calls = 0

    def acknowledge(self, activation_key: str, cluster_id: str) -> bytes:
        self.acknowledge_calls.append((activation_key, cluster_id))
        if self.acknowledge_error:
            raise self.acknowledge_error
        return self.acknowledgment

    def current_timestamp(self) -> bytes:
        self.timestamp_calls += 1
        if self.timestamp_error:
            raise self.timestamp_error
        return self.timestamp


@pytest.fixture
def private_key():
    """Fixture for the licensing service signing key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def public_key_hex(private_key):
    """Fixture for the trusted public key as hex-encoded DER."""
    der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return der.hex()


@pytest.fixture
def trialing_payload():
    """Fixture for a trialing subscription payload."""
    return {
        "status": "trialing",
        "name": "Kotal Pro",
        "start_date": 1699000000,
        "end_date": 1701592000,
        "canceled_at": None,
        "trial_start_at": 1699000000,
        "trial_end_at": 1700209600,
        "nodes_limit": 5,
    }


@pytest.fixture
def signed_subscription(private_key):
    """Fixture building a signed acknowledgment body for a payload."""

    def _build(payload):
        return build_envelope("subscription", payload, sign_payload(private_key, payload))

    return _build


@pytest.fixture
def signed_timestamp(private_key):
    """Fixture for a signed current-time body."""
    payload = {"current_time": TRUSTED_TIME}
    return build_envelope("time", payload, sign_payload(private_key, payload))


@pytest.fixture
def signature_verifier():
    """Fixture for ECDSASignatureVerifier."""
    return ECDSASignatureVerifier()


@pytest.fixture
def envelope_verifier(signature_verifier, public_key_hex):
    """Fixture for an EnvelopeVerifier trusting the test key."""
    return EnvelopeVerifier(signature_verifier, public_key_hex)


@pytest.fixture
def state_store():
    """Fixture for InMemorySubscriptionStateStore."""
    return InMemorySubscriptionStateStore()


@pytest.fixture
def cluster_identity_resolver():
    """Fixture for a resolver returning "ns-uid-1"."""
    return FakeClusterIdentityResolver()


@pytest.fixture
def license_client(signed_subscription, signed_timestamp, trialing_payload):
    """Fixture for a licensing service returning a trialing subscription."""
    return FakeLicenseClient(
        acknowledgment=signed_subscription(trialing_payload),
        timestamp=signed_timestamp,
    )


@pytest.fixture
def trusted_time_service(license_client, envelope_verifier):
    """Fixture for TrustedTimeService."""
    return TrustedTimeService(license_client, envelope_verifier)


@pytest.fixture
def subscriptions_config(
    monkeypatch, settings, public_key_hex, state_store, cluster_identity_resolver, license_client
):
    """Fixture wiring the installed subscriptions app to test doubles."""
    settings.ECC_PUBLIC_KEY = public_key_hex
    config = get_subscriptions_config()
    monkeypatch.setattr(config, "state_store", state_store)
    monkeypatch.setattr(config, "cluster_identity_resolver", cluster_identity_resolver)
    monkeypatch.setattr(config, "license_client", license_client)
    return config


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
