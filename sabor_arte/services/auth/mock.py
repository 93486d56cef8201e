"""
Mock Auth Service Implementation

Simulates Supabase Auth without making API calls.
Used in development mode (ENV_MODE=development) and in tests to:
    - Run the complete signup/login/order flow locally
    - Develop without a Supabase project
    - Assert exactly which auth calls a flow made

Behavior:
    - Rejects malformed emails, short passwords and duplicate emails with
      the same messages Supabase uses
    - Issues random opaque tokens that expire after `session_ttl_seconds`
    - Records every call in `calls`

Passwords are kept in process memory only. This service is not a
credential store.
"""

import logging
import re
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sabor_arte.services.auth.base import (
    AuthResult,
    AuthSession,
    AuthUser,
    BaseAuthService,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[\w\.\+-]+@[\w-]+(\.[\w-]+)+$")
MIN_PASSWORD_LENGTH = 6


class MockAuthService(BaseAuthService):
    """
    In-memory implementation of the auth service.

    Attributes:
        session_ttl_seconds: Lifetime of issued sessions
        calls: Ordered log of (operation, email-or-None) tuples

    Example:
        >>> auth = MockAuthService()
        >>> result = await auth.sign_up("ana@example.com", "secret1")
        >>> result.session.access_token
        'mock_...'
    """

    def __init__(self, session_ttl_seconds: int = 3600):
        self.session_ttl_seconds = session_ttl_seconds
        self.calls: list[tuple[str, Optional[str]]] = []

        self._users: dict[str, tuple[AuthUser, str]] = {}
        self._sessions: dict[str, tuple[str, datetime]] = {}

        logger.info(f"MockAuthService initialized (session_ttl={session_ttl_seconds}s)")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    def _issue_session(self, user: AuthUser) -> AuthSession:
        token = f"mock_{secrets.token_urlsafe(24)}"
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.session_ttl_seconds)
        self._sessions[token] = (user.email, expires_at)
        return AuthSession(access_token=token, expires_in=self.session_ttl_seconds)

    def expire_session(self, access_token: str) -> None:
        """Move a session's expiry into the past."""
        email, _ = self._sessions[access_token]
        self._sessions[access_token] = (email, datetime.now(timezone.utc) - timedelta(seconds=1))

    async def sign_up(self, email: str, password: str) -> AuthResult:
        """Create a user and sign it in immediately (auto-confirm)."""
        self.calls.append(("sign_up", email))
        normalized = email.strip().lower()

        if not EMAIL_PATTERN.match(normalized):
            return AuthResult(
                success=False,
                error_message="Unable to validate email address: invalid format",
                error_code="validation_failed",
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(
                success=False,
                error_message=f"Password should be at least {MIN_PASSWORD_LENGTH} characters.",
                error_code="weak_password",
            )
        if normalized in self._users:
            return AuthResult(
                success=False,
                error_message="User already registered",
                error_code="user_already_exists",
            )

        user = AuthUser(id=str(uuid.uuid4()), email=normalized)
        self._users[normalized] = (user, password)
        logger.info(f"Mock: Created user {user.id}")

        return AuthResult(success=True, user=user, session=self._issue_session(user))

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Check the stored password and issue a session."""
        self.calls.append(("sign_in_with_password", email))
        entry = self._users.get(email.strip().lower())

        if entry is None or entry[1] != password:
            return AuthResult(
                success=False,
                error_message="Invalid login credentials",
                error_code="invalid_credentials",
            )

        user = entry[0]
        return AuthResult(success=True, user=user, session=self._issue_session(user))

    async def get_user(self, access_token: str) -> AuthResult:
        """Resolve a token issued by this service."""
        self.calls.append(("get_user", None))
        entry = self._sessions.get(access_token)

        if entry is None:
            return AuthResult(
                success=False,
                error_message="invalid JWT: unable to parse or verify signature",
                error_code="bad_jwt",
            )

        email, expires_at = entry
        if expires_at <= datetime.now(timezone.utc):
            return AuthResult(
                success=False,
                error_message="invalid JWT: token is expired",
                error_code="bad_jwt",
            )

        user, _ = self._users[email]
        return AuthResult(success=True, user=user)

    async def health_check(self) -> bool:
        """Mock service is always healthy."""
        return True
