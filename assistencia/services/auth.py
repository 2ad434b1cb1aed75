# SPDX-License-Identifier: Apache-2.0

"""
Authentication service for JWT token management and password hashing.

This module provides token signing and verification with RS256 and password
hashing with bcrypt. Tokens identify a user by id and nothing else.
"""

import os
import jwt
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

DEFAULT_SALT_ROUNDS = 10
DEFAULT_TOKEN_EXPIRES_HOURS = 24


class TokenValidationError(Exception):
    """Raised when token validation fails."""
    pass


def generate_key_pair() -> Tuple[str, str]:
    """Generate an RSA key pair for RS256 signing, as (private PEM, public PEM)."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048
    )

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('utf-8')

    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode('utf-8')

    return private_pem, public_pem


class AuthService:
    """
    JWT authentication service with RS256 signing and bcrypt password hashing.

    Keys come from ``JWT_PRIVATE_KEY``/``JWT_PUBLIC_KEY``; without them a
    development key pair is generated, so tokens do not survive a restart.
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        public_key: Optional[str] = None,
        salt_rounds: Optional[int] = None,
        token_expires_hours: Optional[int] = None
    ):
        """
        Initialize the authentication service.

        Args:
            private_key: RS256 private key for token signing (PEM format)
            public_key: RS256 public key for token verification (PEM format)
            salt_rounds: bcrypt cost factor
            token_expires_hours: Token lifetime in hours
        """
        private_key = private_key or os.getenv("JWT_PRIVATE_KEY")
        public_key = public_key or os.getenv("JWT_PUBLIC_KEY")

        if not private_key or not public_key:
            logger.warning("No JWT key pair configured, generating development key pair")
            private_key, public_key = generate_key_pair()

        # Keys passed through env files often carry escaped newlines
        self.private_key = private_key.replace("\\n", "\n")
        self.public_key = public_key.replace("\\n", "\n")
        self.algorithm = "RS256"
        self.salt_rounds = salt_rounds or int(os.getenv("SALT_ROUNDS", DEFAULT_SALT_ROUNDS))
        self.token_expires_hours = token_expires_hours or int(
            os.getenv("JWT_EXPIRES_HOURS", DEFAULT_TOKEN_EXPIRES_HOURS)
        )

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt with salt.

        Args:
            password: Plain text password to hash

        Returns:
            Hashed password string
        """
        with tracer.start_as_current_span("auth.hash_password") as span:
            span.set_attribute("auth.operation", "hash_password")

            salt = bcrypt.gensalt(rounds=self.salt_rounds)
            hashed = bcrypt.hashpw(password.encode('utf-8'), salt)

            logger.debug("Password hashed successfully")
            return hashed.decode('utf-8')

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            password: Plain text password to verify
            hashed_password: Stored hashed password

        Returns:
            True if password matches, False otherwise
        """
        with tracer.start_as_current_span("auth.verify_password") as span:
            span.set_attribute("auth.operation", "verify_password")

            try:
                result = bcrypt.checkpw(
                    password.encode('utf-8'),
                    hashed_password.encode('utf-8')
                )
            except ValueError as e:
                # Stored value is not a bcrypt hash
                span.set_attribute("auth.verification_result", "error")
                logger.error(f"Password verification error: {str(e)}")
                return False

            span.set_attribute("auth.verification_result", "success" if result else "failed")
            return result

    def sign_token(self, subject: str) -> str:
        """
        Issue a token identifying ``subject``.

        Args:
            subject: User id

        Returns:
            Encoded JWT
        """
        with tracer.start_as_current_span("auth.sign_token") as span:
            span.set_attributes({"auth.operation": "sign_token", "user.id": subject})

            now = datetime.now(timezone.utc)
            expires_at = now + timedelta(hours=self.token_expires_hours)

            token = jwt.encode(
                {"sub": subject, "iat": now, "exp": expires_at},
                self.private_key,
                algorithm=self.algorithm
            )

            logger.info(
                "JWT token issued",
                extra={"user_id": subject, "expires_at": expires_at.isoformat()}
            )
            return token

    def validate_token(self, token: str) -> str:
        """
        Validate a token and return its subject.

        Args:
            token: JWT token string to validate

        Returns:
            User id carried by the token

        Raises:
            TokenValidationError: If token is invalid or expired
        """
        with tracer.start_as_current_span("auth.validate_token") as span:
            span.set_attribute("auth.operation", "validate_token")

            try:
                payload = jwt.decode(
                    token,
                    self.public_key,
                    algorithms=[self.algorithm],
                    options={"verify_exp": True, "require": ["sub", "exp"]}
                )

            except jwt.ExpiredSignatureError:
                span.set_attribute("auth.validation_result", "expired")
                logger.warning("Token validation failed: token expired")
                raise TokenValidationError("Token has expired")

            except jwt.InvalidTokenError as e:
                span.set_attribute("auth.validation_result", "invalid")
                logger.warning(f"Token validation failed: {str(e)}")
                raise TokenValidationError(f"Invalid token: {str(e)}")

            span.set_attributes({
                "auth.validation_result": "success",
                "user.id": payload["sub"]
            })
            return payload["sub"]
