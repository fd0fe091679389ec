"""
App configuration for Cluster Subscription Service.
"""

import atexit
import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

_SKIPPED_COMMANDS = ["collectstatic", "shell", "test", "check"]


class ClusterSubscriptionServiceConfig(AppConfig):
    """App configuration for ClusterSubscriptionService."""

    name = "ClusterSubscriptionService"
    verbose_name = "Cluster Subscription Service"

    def ready(self):
        """Called when Django starts."""
        # Skip for management commands
        if len(sys.argv) > 1 and sys.argv[1] in _SKIPPED_COMMANDS:
            return

        # RUN_MAIN is "false" in the reloader's parent process
        if os.environ.get("RUN_MAIN") == "false":
            return

        if not settings.OTEL_ENABLED:
            return

        if not hasattr(self, "_initialized"):
            logger.info("Setting up observability...")
            self.setup_observability()
            self._initialized = True
            logger.info("Observability setup complete")

    def setup_observability(self):
        """Setup observability after apps are ready."""
        from core.instrumentation import setup_opentelemetry, shutdown_opentelemetry

        try:
            setup_opentelemetry()
        except (OSError, ValueError) as e:
            logger.warning("Failed to setup OpenTelemetry: %s", e)
            return
        atexit.register(shutdown_opentelemetry)
