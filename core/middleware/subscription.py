"""
Subscription gate middleware.

Rejects requests to protected API paths with 410 unless this process holds
an acceptable subscription. A subscription that was last refreshed more
than SUBSCRIPTION_RECHECK_INTERVAL seconds ago is re-acknowledged with its
stored activation key before the check.
"""

import logging
import time
from typing import Optional

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from api.exceptions import domain_error_body, domain_error_status
from core.domain.exceptions import (
    InvalidSubscriptionError,
    LicenseServiceError,
    SubscriptionConflictError,
    SubscriptionException,
)
from core.metrics import subscription_rejections_total
from subscriptions.application.commands.acknowledge_subscription import (
    AcknowledgeSubscriptionCommand,
)
from subscriptions.apps import get_subscriptions_config
from subscriptions.domain.services import SubscriptionValidator

logger = logging.getLogger(__name__)

# Remote failures keep their own status, anything else is an invalid subscription
_PASSTHROUGH_ERRORS = (LicenseServiceError, SubscriptionConflictError)


class SubscriptionGateMiddleware(MiddlewareMixin):
    """
    Middleware enforcing a valid subscription on protected paths.

    This middleware:
    1. Skips paths outside SUBSCRIPTION_PROTECTED_PATHS or inside
       SUBSCRIPTION_EXEMPT_PATHS
    2. Re-acknowledges a stale subscription
    3. Returns 410 if the subscription is not valid
    4. Attaches the snapshot to request.subscription_state
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """Gate the request on the subscription state."""
        if not self._is_protected(request.path):
            return None

        config = get_subscriptions_config()

        if self._is_stale(config.state_store.read()):
            response = self._refresh(config)
            if response is not None:
                return response

        if not SubscriptionValidator.is_valid(config.state_store):
            return self._reject(InvalidSubscriptionError(), request.path)

        request.subscription_state = config.state_store.read()  # type: ignore
        return None

    @staticmethod
    def _is_protected(path: str) -> bool:
        if any(path.startswith(exempt) for exempt in settings.SUBSCRIPTION_EXEMPT_PATHS):
            return False
        return any(path.startswith(protected) for protected in settings.SUBSCRIPTION_PROTECTED_PATHS)

    @staticmethod
    def _is_stale(state) -> bool:
        if state.activation_key is None:
            return False
        elapsed = time.monotonic() - state.refreshed_at_monotonic
        return elapsed > settings.SUBSCRIPTION_RECHECK_INTERVAL

    def _refresh(self, config) -> Optional[HttpResponse]:
        """Re-acknowledge the stored activation key, one request at a time."""
        if not config.refresh_lock.acquire(blocking=False):
            logger.debug("Re-acknowledgment already running, using current snapshot")
            return None
        try:
            state = config.state_store.read()
            if not self._is_stale(state):
                return None
            return self._reacknowledge(config, state.activation_key)
        finally:
            config.refresh_lock.release()

    def _reacknowledge(self, config, activation_key: str) -> Optional[HttpResponse]:
        logger.info("Subscription check is stale, re-acknowledging")
        try:
            async_to_sync(config.acknowledge_handler().handle)(
                AcknowledgeSubscriptionCommand(activation_key=activation_key)
            )
        except SubscriptionException as e:
            logger.warning(
                "Subscription re-acknowledgment failed",
                extra={"error_code": e.code, "error": e.message},
            )
            if isinstance(e, _PASSTHROUGH_ERRORS):
                return JsonResponse(domain_error_body(e), status=domain_error_status(e))
            return self._reject(InvalidSubscriptionError(), None)
        return None

    @staticmethod
    def _reject(exc: InvalidSubscriptionError, path: Optional[str]) -> HttpResponse:
        subscription_rejections_total.inc()
        logger.warning("Request rejected, no valid subscription", extra={"path": path})
        return JsonResponse(domain_error_body(exc), status=domain_error_status(exc))
