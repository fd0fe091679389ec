"""
Envelope verification service.

Opens a `{"data": {"signature": ..., <payload>: {...}}}` envelope from the
licensing service and authenticates the payload against the trusted
public key.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict

from core.domain.exceptions import CryptoException, EnvelopeRejectedError
from core.metrics import signature_verifications_total
from subscriptions.domain.canonical import canonical_bytes
from subscriptions.ports.signature_verifier import SignatureVerifier

logger = logging.getLogger(__name__)


class EnvelopeVerifier:
    """Service verifying signed licensing service envelopes."""

    def __init__(self, signature_verifier: SignatureVerifier, public_key: str):
        """
        Initialize the service.

        Args:
            signature_verifier: Signature primitive
            public_key: Encoded trusted public key (decoded on each use)
        """
        self.signature_verifier = signature_verifier
        self.public_key = public_key

    def open(self, raw: bytes, payload_field: str) -> Dict[str, Any]:
        """
        Parse the envelope and verify the signature over its payload.

        The signed message is the canonical encoding of the payload
        sub-object as received, not of a model rebuilt from it.

        Args:
            raw: Raw response body
            payload_field: Name of the signed sub-object inside `data`

        Returns:
            The authenticated payload sub-object

        Raises:
            EnvelopeRejectedError: If any step fails
        """
        try:
            return self._open(raw, payload_field)
        except EnvelopeRejectedError as e:
            signature_verifications_total.labels(payload=payload_field, result=e.step).inc()
            logger.error(
                "Signed envelope rejected",
                extra={"payload": payload_field, "step": e.step, "error": e.message},
            )
            raise

    def _open(self, raw: bytes, payload_field: str) -> Dict[str, Any]:
        try:
            body = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise EnvelopeRejectedError("parse", str(e)) from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise EnvelopeRejectedError("parse", "envelope has no data object")
        payload = data.get(payload_field)
        if not isinstance(payload, dict):
            raise EnvelopeRejectedError("parse", f"envelope has no {payload_field} object")
        encoded_signature = data.get("signature")
        if not isinstance(encoded_signature, str):
            raise EnvelopeRejectedError("parse", "envelope has no signature")

        try:
            key = self.signature_verifier.decode_public_key(self.public_key)
        except CryptoException as e:
            raise EnvelopeRejectedError("decode_public_key", e.message) from e

        try:
            message = canonical_bytes(payload)
        except (TypeError, ValueError) as e:
            raise EnvelopeRejectedError("canonicalize", str(e)) from e

        try:
            signature = base64.b64decode(encoded_signature, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EnvelopeRejectedError("decode_signature", str(e)) from e

        try:
            valid = self.signature_verifier.verify(message, signature, key)
        except CryptoException as e:
            raise EnvelopeRejectedError("verify", e.message) from e
        if not valid:
            raise EnvelopeRejectedError("invalid_signature", "invalid signature")

        signature_verifications_total.labels(payload=payload_field, result="valid").inc()
        return payload
