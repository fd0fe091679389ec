"""
AcknowledgeSubscriptionCommand.

Command to activate this cluster's subscription with an activation key.
"""
from dataclasses import dataclass


@dataclass
class AcknowledgeSubscriptionCommand:
    """Command to acknowledge an activation key with the licensing service."""

    activation_key: str
