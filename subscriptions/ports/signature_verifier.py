"""
Signature verifier port (interface).
"""
from abc import ABC, abstractmethod
from typing import Any


class SignatureVerifier(ABC):
    """Abstract verifier for signed license payloads."""

    @abstractmethod
    def decode_public_key(self, encoded: str) -> Any:
        """
        Decode the trusted public key.

        Args:
            encoded: Hex (DER) or PEM encoded public key

        Returns:
            Public key object understood by `verify`

        Raises:
            PublicKeyDecodeError: If the key can't be decoded
        """
        pass

    @abstractmethod
    def verify(self, message: bytes, signature: bytes, key: Any) -> bool:
        """
        Verify a signature over the exact message bytes.

        Args:
            message: Canonical payload bytes
            signature: Raw signature bytes
            key: Public key returned by `decode_public_key`

        Returns:
            True if the signature authenticates the message, False otherwise

        Raises:
            SignatureVerificationError: If the input is malformed
        """
        pass
