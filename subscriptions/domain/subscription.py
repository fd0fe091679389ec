"""
Subscription domain entities.

SubscriptionDetails is built only from a payload whose signature has
already been verified. SubscriptionState is the immutable snapshot held
by the state store.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.domain.value_objects import (
    ACCEPTABLE_STATUSES,
    SubscriptionStatus,
    TrialEndSource,
)


def _epoch(payload: Dict[str, Any], field: str, required: bool) -> Optional[int]:
    """Read an epoch-seconds field, rejecting non-integer values."""
    value = payload.get(field)
    if value is None:
        return 0 if required else None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} must be an integer epoch timestamp")
    return value


@dataclass(frozen=True)
class SubscriptionDetails:
    """
    Subscription domain entity.

    Mirrors the license payload issued by the remote licensing service.
    """

    status: SubscriptionStatus
    name: str
    start_date: int
    end_date: int
    canceled_at: Optional[int] = None
    trial_start_at: Optional[int] = None
    trial_end_at: Optional[int] = None
    nodes_limit: int = 0

    def __post_init__(self):
        """Validate subscription entity."""
        if self.nodes_limit < 0:
            raise ValueError("Nodes limit cannot be negative")

    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        trial_end_source: TrialEndSource = TrialEndSource.TRIAL_END_AT,
    ) -> "SubscriptionDetails":
        """
        Create SubscriptionDetails from a verified subscription payload.

        Args:
            payload: The `subscription` object of the acknowledgment envelope
            trial_end_source: Field used to populate trial_end_at

        Returns:
            SubscriptionDetails entity

        Raises:
            ValueError: If a field has the wrong type
        """
        if not isinstance(payload, dict):
            raise ValueError("Subscription payload must be an object")

        name = payload.get("name") or ""
        if not isinstance(name, str):
            raise ValueError("name must be a string")

        nodes_limit = payload.get("nodes_limit") or 0
        if isinstance(nodes_limit, bool) or not isinstance(nodes_limit, int):
            raise ValueError("nodes_limit must be an integer")

        end_date = _epoch(payload, "end_date", required=True)
        if trial_end_source is TrialEndSource.END_DATE:
            trial_end_at = end_date
        else:
            trial_end_at = _epoch(payload, "trial_end_at", required=False)

        return cls(
            status=SubscriptionStatus.parse(payload.get("status")),
            name=name,
            start_date=_epoch(payload, "start_date", required=True),
            end_date=end_date,
            canceled_at=_epoch(payload, "canceled_at", required=False),
            trial_start_at=_epoch(payload, "trial_start_at", required=False),
            trial_end_at=trial_end_at,
            nodes_limit=nodes_limit,
        )

    @property
    def is_acceptable(self) -> bool:
        """Whether the status grants access to paid functionality."""
        return self.status in ACCEPTABLE_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "status": self.status.value,
            "name": self.name,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "canceled_at": self.canceled_at,
            "trial_start_at": self.trial_start_at,
            "trial_end_at": self.trial_end_at,
            "nodes_limit": self.nodes_limit,
        }


@dataclass(frozen=True)
class SubscriptionState:
    """Process-wide subscription snapshot."""

    details: Optional[SubscriptionDetails] = None
    last_checked_at: int = 0
    activation_key: Optional[str] = None
    refreshed_at_monotonic: float = 0.0

    @classmethod
    def empty(cls) -> "SubscriptionState":
        """Return the state a process starts with."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Whether no subscription has been installed."""
        return self.details is None
