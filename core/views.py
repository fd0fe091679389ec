"""
Core views for health checks and system status.
"""

import logging

import requests
from django.conf import settings
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from subscriptions.ports.license_client import CURRENT_TIMESTAMP_PATH

logger = logging.getLogger(__name__)

LICENSE_SERVICE_PROBE_TIMEOUT = 5


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "cluster-subscription-service"})


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "license_service": self._check_license_service(),
        }

        all_healthy = all(checks.values())
        status_code = 200 if all_healthy else 503

        return JsonResponse(
            {
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
            status=status_code,
        )

    def _check_license_service(self) -> bool:
        """Probe the licensing service current-time endpoint."""
        base_url = settings.SUBSCRIPTION_API_BASE_URL
        if not base_url:
            return False
        try:
            response = requests.get(
                base_url.rstrip("/") + CURRENT_TIMESTAMP_PATH,
                headers={"Content-Type": "application/json", "Connection": "close"},
                timeout=LICENSE_SERVICE_PROBE_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.warning("Licensing service probe failed: %s", e)
            return False

        if response.status_code >= 500:
            logger.warning(
                "Licensing service is not available at the moment",
                extra={"status_code": response.status_code},
            )
            return False
        return True
