"""
Bearer token identity for API Tester endpoints.

Tokens are issued by the external auth service (login / OAuth). This module
only verifies them and exposes the owner id to route handlers, so every
history and statistics operation receives the owner explicitly.
"""

import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import config
from .exceptions import AuthenticationError


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """
    Decode and verify a JWT.

    Args:
        token: The raw JWT string

    Returns:
        The decoded payload

    Raises:
        AuthenticationError: If the signature is invalid or the token expired
    """
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationError("Invalid token")


def get_current_owner(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency returning the authenticated owner id."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")

    payload = decode_token(credentials.credentials)
    owner_id = payload.get("id") or payload.get("sub")
    if not owner_id:
        raise AuthenticationError("Token does not identify a user")
    return str(owner_id)
