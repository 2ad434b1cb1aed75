# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
User (caseworker) workflows and password login.
"""

import logging
from typing import Any, Dict, List, Mapping, Tuple

from opentelemetry import trace

from ..domain.validation import validate_user
from ..middleware.error_handler import (
    InvalidCredentialsException,
    NotFoundException,
    PreconditionFailedException,
    ValidationException
)
from ..models.entities import User
from ..models.enums import UserRole
from .auth import AuthService
from .integrity import IntegrityService
from .repositories import Repositories

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


def normalize_email(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class UserService:
    """Signup, lookup, rename, deletion and login for users."""

    def __init__(self, repositories: Repositories, integrity: IntegrityService, auth_service: AuthService):
        self.repositories = repositories
        self.integrity = integrity
        self.auth_service = auth_service

    def create(self, payload: Mapping[str, Any]) -> User:
        """
        Sign up a user. The password is validated in plain text and then
        stored only as a bcrypt hash.

        Raises:
            PreconditionFailedException: name, password or email missing
            ValidationException: constraint violations
            DuplicateValueException: email already registered
        """
        with tracer.start_as_current_span("users.create") as span:
            name = payload.get("name")
            password = payload.get("password")
            email = normalize_email(payload.get("email"))

            if not name or not password or not email:
                raise PreconditionFailedException("Name, password, and email are required")

            candidate = {
                "name": name.strip() if isinstance(name, str) else name,
                "email": email,
                "password": password,
                "userType": payload.get("userType") or UserRole.DEFAULT.value,
            }
            violations = validate_user(candidate)
            if violations:
                raise ValidationException("Invalid user", violations)

            self.integrity.ensure_unique_email(email)

            user = User(
                name=candidate["name"],
                email=email,
                password=self.auth_service.hash_password(password),
                userType=candidate["userType"],
            )
            self.repositories.users.insert(user)

            span.set_attribute("user.id", user.id)
            logger.info("User created", extra={"user_id": user.id})
            return user

    def list(self) -> List[User]:
        with tracer.start_as_current_span("users.list"):
            return self.repositories.users.list()

    def get_by_email(self, email: str) -> User:
        with tracer.start_as_current_span("users.get_by_email"):
            user = self.repositories.users.find_by_email(normalize_email(email))
            if user is None:
                raise NotFoundException("Email not registered")
            return user

    def get(self, user_id: str) -> User:
        user = self.repositories.users.find_by_id(user_id)
        if user is None:
            raise NotFoundException("User not registered")
        return user

    def update(self, user_id: str, payload: Mapping[str, Any]) -> User:
        """Rename a user. Only the name is validated; the stored hash is left alone."""
        with tracer.start_as_current_span("users.update") as span:
            span.set_attribute("user.id", user_id)

            name = payload.get("name")
            if not name:
                raise PreconditionFailedException("Name is required")
            if isinstance(name, str):
                name = name.strip()

            user = self.get(user_id)

            violations = validate_user({"name": name}, only=["name"])
            if violations:
                raise ValidationException("Invalid user", violations)

            user.name = name
            self.repositories.users.update(user)

            logger.info("User updated", extra={"user_id": user.id})
            return user

    def delete(self, user_id: str) -> str:
        with tracer.start_as_current_span("users.delete") as span:
            span.set_attribute("user.id", user_id)

            user = self.get(user_id)
            self.repositories.users.delete(user.id)

            logger.info("User deleted", extra={"user_id": user.id})
            return user.id

    def authenticate(self, payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], str]:
        """
        Check email and password and issue a token.

        An unknown email and a wrong password fail the same way.

        Returns:
            Tuple of (user payload without password, token)
        """
        with tracer.start_as_current_span("users.authenticate") as span:
            email = normalize_email(payload.get("email"))
            password = payload.get("password")

            if not email or not password:
                raise PreconditionFailedException("Email and password are required")

            user = self.repositories.users.find_by_email(email)
            if user is None or not self.auth_service.verify_password(str(password), user.password):
                span.set_attribute("auth.result", "invalid_credentials")
                logger.warning("Login failed", extra={"email": email})
                raise InvalidCredentialsException()

            token = self.auth_service.sign_token(user.id)

            span.set_attributes({"auth.result": "success", "user.id": user.id})
            logger.info("Login succeeded", extra={"user_id": user.id})
            return user.to_response(), token
