"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ClusterDetailsUnavailableError,
    CryptoException,
    DomainException,
    InvalidSubscriptionError,
    LicenseServiceError,
    SubscriptionActivationError,
    SubscriptionConflictError,
    TrustedTimestampError,
)

logger = logging.getLogger(__name__)

_INTERNAL_ERRORS = (
    SubscriptionActivationError,
    TrustedTimestampError,
    LicenseServiceError,
    CryptoException,
)


def domain_error_status(exc: DomainException) -> int:
    """Map a domain exception to its HTTP status code."""
    if isinstance(exc, ClusterDetailsUnavailableError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, SubscriptionConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvalidSubscriptionError):
        return status.HTTP_410_GONE
    if isinstance(exc, _INTERNAL_ERRORS):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def domain_error_body(exc: DomainException) -> Dict[str, Any]:
    """Build the error payload for a domain exception."""
    return {"error": {"code": exc.code, "message": exc.message}}


def validation_error_body(errors: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten serializer errors to one message per field."""
    fields = {
        field: str(messages[0]) if isinstance(messages, list) and messages else str(messages)
        for field, messages in errors.items()
    }
    return {"error": {"code": "VALIDATION_ERROR", "message": "invalid request", "fields": fields}}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response:
            code = (
                exc.default_code.upper().replace("-", "_")
                if hasattr(exc, "default_code")
                else "API_ERROR"
            )
            detail = response.data.get("detail", exc.default_detail) if isinstance(
                response.data, dict
            ) else exc.default_detail
            response.data = {"error": {"code": code, "message": detail}}
            if trace_id:
                response["X-Trace-ID"] = trace_id
            return response

    if isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    return _handle_unexpected_exception(exc, context, trace_id)


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = domain_error_status(exc)
    if status_code >= 500:
        logger.error("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response(domain_error_body(exc), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    response = exception_handler(exc, context)
    if not response:
        response = Response(
            {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    else:
        response.data = {
            "error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}
        }
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response
