"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class SubscriptionException(DomainException):
    """Base exception for subscription-related errors."""

    pass


class ClusterDetailsUnavailableError(SubscriptionException):
    """Raised when the cluster identity can't be resolved during activation."""

    def __init__(self, message: str = "can't get cluster details"):
        super().__init__(message, code="CLUSTER_DETAILS_UNAVAILABLE")


class SubscriptionActivationError(SubscriptionException):
    """
    Raised when an acknowledgment can't be turned into a verified subscription.

    Parsing, key decoding and signature failures all surface with the
    same message.
    """

    def __init__(self, message: str = "can't activate subscription"):
        super().__init__(message, code="SUBSCRIPTION_ACTIVATION_FAILED")


class SubscriptionConflictError(SubscriptionException):
    """Raised when the activation key is already bound to another cluster."""

    def __init__(self, message: str = "subscription already used by another cluster"):
        super().__init__(message, code="SUBSCRIPTION_CONFLICT")


class InvalidSubscriptionError(SubscriptionException):
    """Raised when there is no subscription in an acceptable state."""

    def __init__(self, message: str = "invalid subscription"):
        super().__init__(message, code="STATUS_GONE")


class TrustedTimestampError(SubscriptionException):
    """Raised when the licensing service time can't be authenticated."""

    def __init__(self, message: str = "something went wrong"):
        super().__init__(message, code="TRUSTED_TIMESTAMP_FAILED")


class LicenseServiceError(SubscriptionException):
    """Raised when the remote licensing service call fails."""

    def __init__(self, message: str = "something went wrong"):
        super().__init__(message, code="LICENSE_SERVICE_ERROR")


class ClusterIdentityError(DomainException):
    """Base exception for cluster identity lookups."""

    pass


class ClusterIdentityNotFoundError(ClusterIdentityError):
    """Raised when the identity namespace does not exist."""

    def __init__(self, message: str = "cluster identity namespace not found"):
        super().__init__(message, code="CLUSTER_IDENTITY_NOT_FOUND")


class ClusterIdentityLookupError(ClusterIdentityError):
    """Raised for any other failure while reading the identity namespace."""

    def __init__(self, message: str = "can't read cluster identity"):
        super().__init__(message, code="CLUSTER_IDENTITY_LOOKUP_FAILED")


class CryptoException(DomainException):
    """Base exception for signature primitives."""

    pass


class PublicKeyDecodeError(CryptoException):
    """Raised when the trusted public key can't be decoded."""

    def __init__(self, message: str = "can't decode public key"):
        super().__init__(message, code="PUBLIC_KEY_DECODE_FAILED")


class SignatureVerificationError(CryptoException):
    """Raised when verification input is structurally malformed."""

    def __init__(self, message: str = "can't verify signature"):
        super().__init__(message, code="SIGNATURE_VERIFICATION_FAILED")


class EnvelopeRejectedError(CryptoException):
    """
    Raised when a signed envelope fails any verification step.

    The step name is kept for logging only; callers collapse every
    rejection into one opaque error.
    """

    def __init__(self, step: str, message: str = "envelope rejected"):
        super().__init__(message, code="ENVELOPE_REJECTED")
        self.step = step
