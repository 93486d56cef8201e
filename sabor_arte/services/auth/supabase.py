"""
Supabase Auth Service Implementation

Production implementation using the Supabase Auth (GoTrue) REST API.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment

API Documentation:
    https://supabase.com/docs/reference/self-hosting-auth/introduction
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from sabor_arte.core.config import Settings
from sabor_arte.services.auth.base import (
    AuthResult,
    AuthSession,
    AuthUser,
    BaseAuthService,
)

logger = logging.getLogger(__name__)


class SupabaseAuthService(BaseAuthService):
    """
    Production Supabase Auth implementation.

    Talks to `<SUPABASE_URL>/auth/v1` with the project's anon key. One
    `httpx.AsyncClient` is kept for the process lifetime and closed on
    shutdown. Every request is bounded by EXTERNAL_CALL_TIMEOUT.

    Example:
        >>> service = SupabaseAuthService(settings)
        >>> result = await service.get_user(token)
        >>> print(result.user.id)
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the HTTP client for the project's auth endpoint.

        Raises:
            ValueError: If SUPABASE_URL or SUPABASE_ANON_KEY is not configured
        """
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_ANON_KEY are required for production mode. "
                "Set them in your .env file or environment variables."
            )

        self._anon_key = settings.supabase_anon_key
        self._client = httpx.AsyncClient(
            base_url=f"{settings.supabase_url.rstrip('/')}/auth/v1",
            headers={"apikey": self._anon_key},
            timeout=settings.external_call_timeout,
            transport=transport,
        )

        logger.info("SupabaseAuthService initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "supabase"

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull the human-readable message out of a GoTrue error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
        return f"HTTP {response.status_code}"

    @staticmethod
    def _error_code(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"http_{response.status_code}"
        return str(body.get("error_code") or body.get("code") or f"http_{response.status_code}")

    @staticmethod
    def _parse_user(data: dict[str, Any]) -> Optional[AuthUser]:
        if not data or not data.get("id"):
            return None
        return AuthUser(id=data["id"], email=data.get("email"))

    @staticmethod
    def _parse_session(data: dict[str, Any]) -> Optional[AuthSession]:
        if not data.get("access_token"):
            return None
        return AuthSession(access_token=data["access_token"], expires_in=data.get("expires_in"))

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> tuple[Optional[httpx.Response], AuthResult]:
        """
        Send one request, folding transport failures into an AuthResult.

        Returns:
            (response, result): `response` is None when the call never
            produced one; `result` is only meaningful in that case or on
            non-2xx status.
        """
        start_time = datetime.now()

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"Supabase: {operation} timed out after {elapsed_ms:.0f}ms")
            return None, AuthResult(
                success=False,
                error_message="Authentication service timed out",
                error_code="timeout",
                response_time_ms=elapsed_ms,
            )
        except httpx.HTTPError as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"Supabase: {operation} transport error - {e}")
            return None, AuthResult(
                success=False,
                error_message="Unable to reach authentication service",
                error_code="transport_error",
                response_time_ms=elapsed_ms,
            )

        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
        if response.is_error:
            message = self._error_message(response)
            logger.info(f"Supabase: {operation} rejected ({response.status_code}) - {message}")
            return response, AuthResult(
                success=False,
                error_message=message,
                error_code=self._error_code(response),
                response_time_ms=elapsed_ms,
            )

        return response, AuthResult(success=True, response_time_ms=elapsed_ms)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        """
        Create a user via POST /signup.

        With email confirmation disabled GoTrue answers with a session that
        embeds the user; with it enabled, with the bare user object.
        """
        response, result = await self._request(
            "sign_up", "POST", "/signup", json={"email": email, "password": password}
        )
        if not result.success:
            return result

        data = response.json()
        user_data = data.get("user") or data

        # With confirmation on, a taken email yields a placeholder user without identities
        if user_data.get("identities") == []:
            logger.info("Supabase: sign_up rejected - email already registered")
            return AuthResult(
                success=False,
                error_message="User already registered",
                error_code="user_already_exists",
                response_time_ms=result.response_time_ms,
            )

        user = self._parse_user(user_data)
        if user is None:
            return AuthResult(
                success=False,
                error_message="Sign up returned no user",
                error_code="unexpected_response",
                response_time_ms=result.response_time_ms,
            )

        logger.info(f"Supabase: Created user {user.id}")
        return AuthResult(
            success=True,
            user=user,
            session=self._parse_session(data),
            response_time_ms=result.response_time_ms,
        )

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Exchange credentials via POST /token?grant_type=password."""
        response, result = await self._request(
            "sign_in",
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if not result.success:
            return result

        data = response.json()
        session = self._parse_session(data)
        user = self._parse_user(data.get("user") or {})
        if session is None or user is None:
            return AuthResult(
                success=False,
                error_message="Sign in returned no session",
                error_code="unexpected_response",
                response_time_ms=result.response_time_ms,
            )

        return AuthResult(success=True, user=user, session=session, response_time_ms=result.response_time_ms)

    async def get_user(self, access_token: str) -> AuthResult:
        """Resolve a token via GET /user."""
        response, result = await self._request(
            "get_user",
            "GET",
            "/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not result.success:
            return result

        user = self._parse_user(response.json())
        if user is None:
            return AuthResult(
                success=False,
                error_message="Token did not resolve to a user",
                error_code="user_not_found",
                response_time_ms=result.response_time_ms,
            )

        return AuthResult(success=True, user=user, response_time_ms=result.response_time_ms)

    async def health_check(self) -> bool:
        """Verify connectivity via GET /health."""
        _, result = await self._request("health_check", "GET", "/health")
        if result.success:
            logger.debug("Supabase: Health check passed")
        return result.success

    async def close(self) -> None:
        await self._client.aclose()
