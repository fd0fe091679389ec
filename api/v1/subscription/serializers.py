"""
Serializers for Subscription API endpoints.
"""

from rest_framework import serializers


class AcknowledgeSubscriptionRequestSerializer(serializers.Serializer):
    """Serializer for acknowledge subscription request."""

    activation_key = serializers.CharField(
        required=True,
        allow_blank=False,
        trim_whitespace=True,
        error_messages={
            "required": "invalid key",
            "blank": "invalid key",
            "null": "invalid key",
            "invalid": "invalid key",
        },
    )


class MessageSerializer(serializers.Serializer):
    """Serializer for a plain success message."""

    message = serializers.CharField()


class AcknowledgeSubscriptionResponseSerializer(serializers.Serializer):
    """Serializer for acknowledge subscription response."""

    data = MessageSerializer()


class SubscriptionDetailsSerializer(serializers.Serializer):
    """Serializer for SubscriptionDetailsDTO."""

    status = serializers.CharField()
    name = serializers.CharField(allow_blank=True)
    start_date = serializers.IntegerField()
    end_date = serializers.IntegerField()
    canceled_at = serializers.IntegerField(allow_null=True)
    trial_start_at = serializers.IntegerField(allow_null=True)
    trial_end_at = serializers.IntegerField(allow_null=True)
    nodes_limit = serializers.IntegerField()
    last_checked_at = serializers.IntegerField()


class CurrentSubscriptionResponseSerializer(serializers.Serializer):
    """Serializer for current subscription response."""

    data = SubscriptionDetailsSerializer()
