"""
Auth Service Factory

Provides a single entry point for building the auth service.
Automatically selects Mock or Supabase based on ENV_MODE configuration.

Usage:
    from sabor_arte.services.auth import build_auth_service

    auth_service = build_auth_service(settings)
    result = await auth_service.get_user(token)

Environment Switching:
    - ENV_MODE=development → MockAuthService (no API calls)
    - ENV_MODE=staging → SupabaseAuthService (staging project)
    - ENV_MODE=production → SupabaseAuthService
"""

import logging

from sabor_arte.core.config import Settings
from sabor_arte.services.auth.base import (
    AuthResult,
    AuthSession,
    AuthUser,
    BaseAuthService,
)
from sabor_arte.services.auth.mock import MockAuthService
from sabor_arte.services.auth.supabase import SupabaseAuthService

logger = logging.getLogger(__name__)


def build_auth_service(settings: Settings) -> BaseAuthService:
    """
    Build the configured auth service instance.

    Raises:
        ValueError: If real services are selected but Supabase is not configured
    """
    if settings.is_development:
        logger.info("Auth Service: Using MockAuthService (development mode)")
        return MockAuthService(session_ttl_seconds=settings.session_ttl_seconds)

    logger.info(
        f"Auth Service: Using SupabaseAuthService "
        f"({settings.env_mode.value} mode)"
    )
    return SupabaseAuthService(settings)


__all__ = [
    "build_auth_service",
    "BaseAuthService",
    "AuthResult",
    "AuthSession",
    "AuthUser",
    "MockAuthService",
    "SupabaseAuthService",
]
