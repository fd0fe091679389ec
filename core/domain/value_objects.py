"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from dataclasses import dataclass
from enum import Enum


class SubscriptionStatus(Enum):
    """Subscription status value object."""

    ACTIVE = "active"
    PAST_DUE = "past_due"
    TRIALING = "trialing"
    CANCELED = "canceled"
    EXPIRED = "expired"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "SubscriptionStatus":
        """
        Map a raw status string to a status.

        Unknown or missing values map to OTHER.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


ACCEPTABLE_STATUSES = frozenset(
    {SubscriptionStatus.ACTIVE, SubscriptionStatus.PAST_DUE, SubscriptionStatus.TRIALING}
)


@dataclass(frozen=True)
class ClusterIdentity:
    """Stable identifier binding a license to one deployment."""

    value: str

    def __post_init__(self):
        """Validate identity."""
        if not self.value:
            raise ValueError("Cluster identity cannot be empty")

    def __str__(self) -> str:
        """Return identity as string."""
        return self.value


class TrialEndSource(Enum):
    """Which payload field feeds SubscriptionDetails.trial_end_at."""

    TRIAL_END_AT = "trial_end_at"
    END_DATE = "end_date"
