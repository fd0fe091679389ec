"""
Development settings for ClusterSubscriptionService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

SUBSCRIPTION_API_BASE_URL = os.environ.get(
    "SUBSCRIPTION_API_BASE_URL", "http://localhost:8081"
)

# Re-check more often while developing against a local licensing service
SUBSCRIPTION_RECHECK_INTERVAL = int(os.environ.get("SUBSCRIPTION_RECHECK_INTERVAL", "600"))
