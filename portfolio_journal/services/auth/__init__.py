"""
Authentication services for Portfolio Journal.

Only access token verification lives here; users authenticate against an
external identity provider that shares the JWT signing key.

Usage:
    from portfolio_journal.services.auth import JWTHandler

    user_id = JWTHandler.get_user_id(token)
"""

from portfolio_journal.services.auth.jwt_handler import JWTHandler

__all__ = [
    "JWTHandler",
]
