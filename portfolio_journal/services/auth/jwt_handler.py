# portfolio_journal/services/auth/jwt_handler.py
"""
JWT access token handling.

Portfolio Journal does not manage passwords or sessions: an identity
provider issues HS256 access tokens signed with the shared JWT_SECRET_KEY,
and this module verifies them. create_access_token() exists for that
provider's role in development (seed script) and in tests.

Token claims:
    sub:   User ID (string)
    email: User's email
    exp:   Expiration timestamp
    iat:   Issued at timestamp
    type:  "access"
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from portfolio_journal.config import settings
from portfolio_journal.services.exceptions import (
    InvalidCredentialsError,
    ServiceError,
    TokenExpiredError,
)


def _secret_key() -> str:
    if not settings.jwt_secret_key:
        raise ServiceError("JWT_SECRET_KEY is not configured")
    return settings.jwt_secret_key


class JWTHandler:
    """Creates and validates access tokens. Stateless."""

    @staticmethod
    def create_access_token(
        user_id: int,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user_id: The user's database ID
            email: The user's email address
            expires_delta: Optional custom lifetime (default from settings)

        Returns:
            Encoded JWT string
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "exp": now + expires_delta,
            "iat": now,
            "type": "access",
        }

        return jwt.encode(payload, _secret_key(), algorithm=settings.jwt_algorithm)

    @staticmethod
    def validate_access_token(token: str) -> dict[str, Any]:
        """
        Validate an access token and return its payload.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidCredentialsError: If the token is invalid, malformed or
                                     not an access token
        """
        try:
            payload = jwt.decode(
                token,
                _secret_key(),
                algorithms=[settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Access token has expired")
        except JWTError as e:
            raise InvalidCredentialsError(f"Invalid token: {str(e)}")

        if payload.get("type") != "access":
            raise InvalidCredentialsError("Invalid token type")

        return payload

    @staticmethod
    def get_user_id(token: str) -> int:
        """
        Validate a token and return its subject as a user ID.

        Raises:
            InvalidCredentialsError: If the subject is missing or not an integer
        """
        payload = JWTHandler.validate_access_token(token)
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidCredentialsError("Invalid token subject")
