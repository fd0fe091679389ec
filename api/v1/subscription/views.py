"""
Subscription API views.

These endpoints are used by the dashboard to:
- Activate the cluster's subscription with an activation key
- Read the subscription installed in this process
"""

from dataclasses import asdict

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_body
from api.v1.subscription.serializers import (
    AcknowledgeSubscriptionRequestSerializer,
    AcknowledgeSubscriptionResponseSerializer,
    CurrentSubscriptionResponseSerializer,
    SubscriptionDetailsSerializer,
)
from core.domain.exceptions import InvalidSubscriptionError
from core.instrumentation import Status, StatusCode, get_tracer
from subscriptions.application.commands.acknowledge_subscription import (
    AcknowledgeSubscriptionCommand,
)
from subscriptions.application.queries.get_current_subscription import (
    GetCurrentSubscriptionQuery,
)
from subscriptions.apps import get_subscriptions_config
from subscriptions.domain.services import SubscriptionValidator

tracer = get_tracer(__name__)


class AcknowledgeSubscriptionView(APIView):
    """View for activating the cluster's subscription."""

    @extend_schema(
        operation_id="acknowledge_subscription",
        summary="Acknowledge Subscription",
        description=(
            "Exchange an activation key with the licensing service, verify the "
            "signed license and install it as this cluster's subscription."
        ),
        tags=["Subscription API"],
        request=AcknowledgeSubscriptionRequestSerializer,
        responses={
            200: AcknowledgeSubscriptionResponseSerializer,
            400: {"description": "Invalid activation key or cluster details unavailable"},
            409: {"description": "Subscription already used by another cluster"},
            410: {"description": "Subscription is not in an acceptable state"},
            500: {"description": "Subscription can't be activated"},
        },
    )
    def post(self, request: Request) -> Response:
        """Acknowledge an activation key."""
        return async_to_sync(self._handle_acknowledge)(request)

    async def _handle_acknowledge(self, request: Request) -> Response:
        """Async handler for acknowledge subscription."""
        with tracer.start_as_current_span("acknowledge_subscription") as span:
            serializer = AcknowledgeSubscriptionRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    validation_error_body(serializer.errors),
                    status=status.HTTP_400_BAD_REQUEST,
                )

            config = get_subscriptions_config()
            handler = config.acknowledge_handler()
            await handler.handle(
                AcknowledgeSubscriptionCommand(
                    activation_key=serializer.validated_data["activation_key"]
                )
            )

            if not SubscriptionValidator.is_valid(config.state_store):
                span.set_status(Status(StatusCode.ERROR, "Subscription not acceptable"))
                raise InvalidSubscriptionError()

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"data": {"message": "subscription activated"}},
                status=status.HTTP_200_OK,
            )


class CurrentSubscriptionView(APIView):
    """View for reading the installed subscription."""

    @extend_schema(
        operation_id="current_subscription",
        summary="Current Subscription",
        description="Return the subscription installed in this process.",
        tags=["Subscription API"],
        responses={
            200: CurrentSubscriptionResponseSerializer,
            410: {"description": "No subscription installed"},
        },
    )
    def get(self, request: Request) -> Response:
        """Return the current subscription snapshot."""
        handler = get_subscriptions_config().current_subscription_handler()
        result = async_to_sync(handler.handle)(GetCurrentSubscriptionQuery())
        return Response(
            {"data": SubscriptionDetailsSerializer(asdict(result)).data},
            status=status.HTTP_200_OK,
        )
