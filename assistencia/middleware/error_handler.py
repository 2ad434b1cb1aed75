# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Error handling middleware with JSON error bodies.
Provides the application exception taxonomy and its mapping to responses.
"""

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from typing import Any, Dict, List, Optional, Tuple
from opentelemetry import trace
import logging
import traceback

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class CustomException(Exception):
    """Base class for custom application exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class PreconditionFailedException(CustomException):
    """Exception for missing required input fields."""

    def __init__(self, message: str):
        super().__init__(message, 400, "precondition-failed")


class ValidationException(CustomException):
    """Exception for field constraint violations."""

    def __init__(self, message: str, validation_errors: Optional[List] = None):
        super().__init__(message, 400, "validation-error")
        self.validation_errors = validation_errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errors": [
                error.to_dict() if hasattr(error, "to_dict") else error
                for error in self.validation_errors
            ]
        }


class DuplicateValueException(CustomException):
    """Exception for a natural key already held by another record."""

    def __init__(self, message: str):
        super().__init__(message, 400, "duplicate-value")


class HasDependentsException(CustomException):
    """Exception for deletions blocked by referencing records."""

    def __init__(self, message: str):
        super().__init__(message, 400, "has-dependents")


class InvalidCredentialsException(CustomException):
    """Exception for failed logins. Does not say which credential was wrong."""

    def __init__(self, message: str = "Invalid email and/or password"):
        super().__init__(message, 400, "invalid-credentials")


class AuthenticationException(CustomException):
    """Exception for missing or invalid tokens."""

    def __init__(self, message: str):
        super().__init__(message, 401, "authentication-required")


class NotFoundException(CustomException):
    """Exception for resource not found errors."""

    def __init__(self, message: str):
        super().__init__(message, 404, "resource-not-found")


class ReferenceNotFoundException(CustomException):
    """Exception for a soft reference pointing at a missing record."""

    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message, 404, "reference-not-found")
        self.reference = reference


class ErrorHandlerMiddleware:
    """Centralized error handling middleware."""

    def __init__(self, app: Flask):
        self.app = app
        self.register_error_handlers()

    def register_error_handlers(self):
        """Register error handlers with Flask application."""

        @self.app.errorhandler(CustomException)
        def handle_custom_exception(error: CustomException):
            return self.handle_custom_exception(error)

        @self.app.errorhandler(HTTPException)
        def handle_http_exception(error: HTTPException):
            return self.handle_http_exception(error)

        # Handle generic exceptions
        @self.app.errorhandler(Exception)
        def handle_generic_exception(error):
            return self.handle_unexpected_error(error)

    def handle_custom_exception(self, error: CustomException) -> Tuple[Any, int]:
        """
        Handle expected domain failures.

        Args:
            error: Application exception

        Returns:
            Tuple of (JSON response, status code)
        """
        with tracer.start_as_current_span("error_handler.custom_exception") as span:
            span.set_attributes({
                "error.type": error.error_type,
                "error.status": error.status_code,
                "http.method": request.method,
                "http.path": request.path
            })

            logger.warning(
                f"Custom exception: {error.error_type}",
                extra={
                    "error_type": error.error_type,
                    "status_code": error.status_code,
                    "detail": error.message,
                    "path": request.path,
                    "method": request.method
                }
            )

            return jsonify(error.to_dict()), error.status_code

    def handle_http_exception(self, error: HTTPException) -> Tuple[Any, int]:
        """Handle werkzeug HTTP errors (malformed JSON and the like)."""
        detail = str(error.description) if error.description else error.name

        logger.warning(
            f"Client error: {error.name}",
            extra={
                "status_code": error.code,
                "detail": detail,
                "path": request.path,
                "method": request.method
            }
        )

        return jsonify({"error": detail}), error.code

    def handle_unexpected_error(self, error: Exception) -> Tuple[Any, int]:
        """
        Handle unexpected exceptions not caught by specific handlers.

        Args:
            error: Unexpected exception

        Returns:
            Tuple of (JSON response, status code)
        """
        with tracer.start_as_current_span("error_handler.unexpected_error") as span:
            span.set_attributes({
                "error.type": "unexpected-error",
                "error.class": error.__class__.__name__,
                "http.method": request.method,
                "http.path": request.path
            })

            # Record exception in span
            span.record_exception(error)

            logger.error(
                f"Unexpected error: {error.__class__.__name__}",
                extra={
                    "error_type": "unexpected-error",
                    "error_class": error.__class__.__name__,
                    "error_message": str(error),
                    "path": request.path,
                    "method": request.method,
                    "traceback": traceback.format_exc()
                },
                exc_info=True
            )

            body = {"error": INTERNAL_ERROR_MESSAGE}
            if self.app.config.get('ENVIRONMENT') == 'development':
                body["detail"] = f"{error.__class__.__name__}: {str(error)}"

            return jsonify(body), 500
