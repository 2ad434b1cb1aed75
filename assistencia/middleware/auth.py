# SPDX-License-Identifier: Apache-2.0

"""
Authentication middleware for bearer token validation.

This module provides the ``require_auth`` decorator used by every protected
route. It only answers "authenticated or not"; there are no roles or
permissions to check.
"""

from functools import wraps
from flask import request, g, current_app
from typing import Optional, Callable
from opentelemetry import trace
import logging

from ..services.auth import AuthService, TokenValidationError
from .error_handler import AuthenticationException

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

TOKEN_NOT_PROVIDED = "Token not provided"
TOKEN_INVALID = "Token invalid"


class AuthMiddleware:
    """
    Bearer token middleware for Flask applications.

    Handles token extraction and validation, and stores the authenticated
    user id on ``flask.g``.
    """

    def __init__(self, auth_service: AuthService):
        """
        Initialize the authentication middleware.

        Args:
            auth_service: JWT authentication service
        """
        self.auth_service = auth_service

    def extract_token_from_request(self) -> Optional[str]:
        """
        Extract the token from the Authorization header.

        Returns:
            Token string, or None when the header is absent
        """
        auth_header = request.headers.get('Authorization', '')

        if not auth_header:
            return None

        # "Bearer <token>"; anything after the first space is the token
        _, _, token = auth_header.partition(' ')
        return token.strip()

    def authenticate(self) -> str:
        """
        Validate the request token.

        Returns:
            Authenticated user id

        Raises:
            AuthenticationException: token missing or invalid
        """
        with tracer.start_as_current_span("auth.middleware.validate_request") as span:
            token = self.extract_token_from_request()
            if token is None:
                span.set_attribute("auth.result", "missing_token")
                logger.warning("Authentication failed: missing token")
                raise AuthenticationException(TOKEN_NOT_PROVIDED)

            try:
                user_id = self.auth_service.validate_token(token)
            except TokenValidationError as e:
                span.set_attribute("auth.result", "invalid_token")
                logger.warning(f"Authentication failed: {str(e)}")
                raise AuthenticationException(TOKEN_INVALID)

            span.set_attributes({"auth.result": "success", "user.id": user_id})
            return user_id


def require_auth(f: Callable) -> Callable:
    """
    Decorator to require a valid bearer token for Flask routes.

    The authenticated user id is available as ``g.user_id``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.user_id = current_app.auth_middleware.authenticate()
        return f(*args, **kwargs)

    return decorated_function
