"""
Credential Gateway

Turns the `Authorization` header of a request into an Identity, or
refuses it. The identity is returned to the caller and handed to each
flow as an argument; nothing is stashed on the request.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sabor_arte.core.exceptions import InvalidCredential, Unauthenticated
from sabor_arte.services.auth import BaseAuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a valid session token."""
    user_id: str
    email: Optional[str] = None


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from a `Bearer <token>` header value.

    Returns None for a missing header, another scheme or an empty token.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None

    token = token.strip()
    return token or None


class CredentialGateway:
    """Mandatory gate for order submission, finalization and history."""

    def __init__(self, auth: BaseAuthService):
        self._auth = auth

    async def authenticate(self, authorization: Optional[str]) -> Identity:
        """
        Resolve the header to an Identity.

        Raises:
            Unauthenticated: No bearer token was presented (auth service not called)
            InvalidCredential: The auth service rejected the token
        """
        token = parse_bearer_token(authorization)
        if token is None:
            raise Unauthenticated("Access denied. No token provided.")

        result = await self._auth.get_user(token)
        if not result.success or result.user is None:
            logger.info(f"Token rejected ({result.error_code})")
            raise InvalidCredential("Invalid or expired token.", detail=result.error_message)

        return Identity(user_id=result.user.id, email=result.user.email)
