"""
Prometheus metrics for the subscription service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Gauge, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Subscription metrics
subscription_acknowledgments_total = Counter(
    "subscription_acknowledgments_total",
    "Total subscription acknowledgments",
    ["outcome"],
)

signature_verifications_total = Counter(
    "signature_verifications_total",
    "Total signature verifications of licensing service payloads",
    ["payload", "result"],
)

subscription_valid = Gauge(
    "subscription_valid",
    "Whether a subscription is installed in this process (1) or not (0)",
)

subscription_rejections_total = Counter(
    "subscription_rejections_total",
    "Requests rejected for lack of a valid subscription",
)

# Licensing service metrics
license_service_request_duration_seconds = Histogram(
    "license_service_request_duration_seconds",
    "Licensing service request duration in seconds",
    ["endpoint", "outcome"],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
