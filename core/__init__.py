"""
Core module for shared infrastructure.

This module contains:
- Domain exceptions and value objects
- Middleware components (observability, metrics, subscription gate)
- Prometheus metrics and OpenTelemetry setup
- Health check views
"""
