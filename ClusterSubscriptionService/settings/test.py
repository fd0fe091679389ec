"""
Test settings for ClusterSubscriptionService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

SUBSCRIPTION_API_BASE_URL = "http://licensing.test"
SUBSCRIPTION_API_TIMEOUT = 1
CLUSTER_IDENTITY_NAMESPACE = "kube-system"
SUBSCRIPTION_TRIAL_END_SOURCE = "trial_end_at"
SUBSCRIPTION_RECHECK_INTERVAL = 86400

OTEL_ENABLED = False

# Disable logging during tests
LOGGING_CONFIG = None
