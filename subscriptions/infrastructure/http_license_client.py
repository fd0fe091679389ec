"""
HTTP client for the remote licensing service.

Requests are bounded by a fixed timeout and never retried here; the
caller decides whether to run the whole flow again.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests

from core.domain.exceptions import LicenseServiceError, SubscriptionConflictError
from core.metrics import license_service_request_duration_seconds
from subscriptions.ports.license_client import (
    ACKNOWLEDGMENT_PATH,
    CURRENT_TIMESTAMP_PATH,
    LicenseClient,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class HttpLicenseClient(LicenseClient):
    """Licensing service client backed by `requests`."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Licensing service base URL
            timeout: Per-request timeout in seconds
            session: Optional requests session (a new one is created otherwise)
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def acknowledge(self, activation_key: str, cluster_id: str) -> bytes:
        """POST the activation key and cluster id to the acknowledgment endpoint."""
        response = self._send(
            "POST",
            ACKNOWLEDGMENT_PATH,
            error_message="can't activate subscription",
            json={"activation_key": activation_key, "cluster_id": cluster_id},
        )
        if response.status_code == requests.codes.conflict:
            logger.warning("Activation key already bound to another cluster")
            raise SubscriptionConflictError()
        return self._body(response, ACKNOWLEDGMENT_PATH, "can't activate subscription")

    def current_timestamp(self) -> bytes:
        """GET the signed current time."""
        response = self._send("GET", CURRENT_TIMESTAMP_PATH, error_message="something went wrong")
        return self._body(response, CURRENT_TIMESTAMP_PATH, "something went wrong")

    def _send(
        self,
        method: str,
        path: str,
        error_message: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """Send a request, translating transport failures into LicenseServiceError."""
        if not self.base_url:
            logger.error("Licensing service base URL is not configured", extra={"path": path})
            raise LicenseServiceError(error_message)

        start_time = time.time()
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            license_service_request_duration_seconds.labels(
                endpoint=path, outcome="transport_error"
            ).observe(time.time() - start_time)
            logger.error(
                "Licensing service request failed",
                extra={"path": path, "error": str(e), "error_type": type(e).__name__},
            )
            raise LicenseServiceError(error_message) from e

        license_service_request_duration_seconds.labels(
            endpoint=path, outcome=str(response.status_code)
        ).observe(time.time() - start_time)
        return response

    def _body(self, response: requests.Response, path: str, error_message: str) -> bytes:
        """Return the body of a 200 response."""
        if response.status_code != requests.codes.ok:
            logger.error(
                "Licensing service returned unexpected status",
                extra={"path": path, "status_code": response.status_code},
            )
            raise LicenseServiceError(error_message)
        return response.content
