"""
Account Flows

Registration runs three dependent calls, each with its own failure kind:

    1. create the identity          → RegistrationRejected (nothing persisted)
    2. insert the profile row       → ProfilePersistFailure (identity orphaned)
    3. issue a session              → SessionIssueFailure (account usable via login)

No step is rolled back or retried. Steps 2 and 3 are logged with the
identity id so the orphaned state can be reconciled by an operator.
"""

import logging

from sabor_arte.core.exceptions import (
    AuthServiceUnavailable,
    InvalidCredential,
    ProfilePersistFailure,
    RegistrationRejected,
    SessionIssueFailure,
)
from sabor_arte.models import Profile
from sabor_arte.schemas import LoginRequest, RegisterRequest, SessionResponse
from sabor_arte.services.auth import AuthSession, BaseAuthService
from sabor_arte.services.store import BaseRowStore, StoreError

logger = logging.getLogger(__name__)

# AuthResult codes for calls that never got an answer
UNREACHABLE_CODES = ("timeout", "transport_error")


class RegistrationFlow:
    """Account creation + profile row + first session."""

    def __init__(self, auth: BaseAuthService, store: BaseRowStore):
        self._auth = auth
        self._store = store

    async def register(self, request: RegisterRequest) -> SessionResponse:
        signup = await self._auth.sign_up(request.email, request.password)
        if not signup.success or signup.user is None:
            raise RegistrationRejected(
                signup.error_message or "Registration failed.",
                detail=signup.error_code,
            )

        user = signup.user
        try:
            await self._store.insert(
                Profile.__tablename__,
                {
                    "id": user.id,
                    "nome": request.name,
                    "email": request.email,
                    "telefone": request.phone or None,
                },
            )
        except StoreError as e:
            logger.error(f"Profile insert failed for new identity {user.id}; auth record kept - {e}")
            raise ProfilePersistFailure(
                "Account created, but saving the profile failed.",
                detail=str(e),
            )

        session = signup.session or await self._sign_in(request, user.id)

        logger.info(f"Registered identity {user.id}")
        return SessionResponse(message="Registration successful!", token=session.access_token)

    async def _sign_in(self, request: RegisterRequest, user_id: str) -> AuthSession:
        result = await self._auth.sign_in_with_password(request.email, request.password)
        if not result.success or result.session is None:
            logger.error(f"Session issue failed for new identity {user_id} - {result.error_message}")
            raise SessionIssueFailure(
                "Account created, but signing in failed. Please log in.",
                detail=result.error_message,
            )
        return result.session


class LoginFlow:
    """Password login."""

    def __init__(self, auth: BaseAuthService):
        self._auth = auth

    async def login(self, request: LoginRequest) -> SessionResponse:
        result = await self._auth.sign_in_with_password(request.email, request.password)
        if not result.success or result.session is None:
            if result.error_code in UNREACHABLE_CODES:
                logger.error(f"Login unavailable - {result.error_message}")
                raise AuthServiceUnavailable(
                    "Login is temporarily unavailable. Please try again.",
                    detail=result.error_message,
                )
            raise InvalidCredential(f"Invalid credentials: {result.error_message or 'sign in failed'}")

        return SessionResponse(message="Login successful!", token=result.session.access_token)
