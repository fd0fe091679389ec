"""
ECDSA signature verifier.

The licensing service signs payloads with ECDSA P-256 over SHA-256 and
ships ASN.1 DER signatures. Its public key is distributed as the hex
encoding of the DER SubjectPublicKeyInfo; PEM is accepted as well.
"""
import binascii

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from core.domain.exceptions import PublicKeyDecodeError, SignatureVerificationError
from subscriptions.ports.signature_verifier import SignatureVerifier


class ECDSASignatureVerifier(SignatureVerifier):
    """Stateless ECDSA (SHA-256) verifier."""

    def decode_public_key(self, encoded: str) -> ec.EllipticCurvePublicKey:
        """
        Decode a hex DER or PEM public key.

        Args:
            encoded: Encoded public key

        Returns:
            EllipticCurvePublicKey

        Raises:
            PublicKeyDecodeError: If the key is empty, malformed or not EC
        """
        if not isinstance(encoded, str) or not encoded.strip():
            raise PublicKeyDecodeError("public key is empty")

        value = encoded.strip()
        try:
            if "BEGIN" in value:
                key = serialization.load_pem_public_key(value.encode("utf-8"))
            else:
                key = serialization.load_der_public_key(binascii.unhexlify(value))
        except (ValueError, TypeError, binascii.Error, UnsupportedAlgorithm) as e:
            raise PublicKeyDecodeError(f"can't decode public key: {e}") from e

        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise PublicKeyDecodeError("public key is not an elliptic-curve key")
        return key

    def verify(self, message: bytes, signature: bytes, key: ec.EllipticCurvePublicKey) -> bool:
        """
        Verify a DER ECDSA signature over the message bytes.

        Args:
            message: Exact signed bytes
            signature: DER-encoded signature
            key: Trusted public key

        Returns:
            True if authentic, False otherwise

        Raises:
            SignatureVerificationError: If arguments are of the wrong kind
        """
        if not isinstance(message, (bytes, bytearray)):
            raise SignatureVerificationError("message must be bytes")
        if not isinstance(signature, (bytes, bytearray)):
            raise SignatureVerificationError("signature must be bytes")
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise SignatureVerificationError("key must be an elliptic-curve public key")

        try:
            key.verify(bytes(signature), bytes(message), ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True
