"""
Auth Service Abstract Base Class

Defines the interface contract for the credential-issuing collaborator.
Both MockAuthService and SupabaseAuthService implement these methods,
so the flows behave identically whichever one is active.

Implementations never raise for an upstream rejection or a transport
problem: they return an AuthResult with `success=False` and the upstream
message, and the calling flow decides which error kind it maps to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthUser:
    """
    Identity as known by the auth service.

    Attributes:
        id: Stable opaque user identifier
        email: Email the identity was registered with
    """
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    """
    Issued session.

    Attributes:
        access_token: Bearer credential presented on later calls
        expires_in: Lifetime in seconds, when the provider reports it
    """
    access_token: str
    expires_in: Optional[int] = None


@dataclass
class AuthResult:
    """
    Standardized result from any auth operation.

    Attributes:
        success: Whether the operation succeeded
        user: Resolved or created identity
        session: Issued session, if the operation issues one
        error_message: Upstream error description if it failed
        error_code: Machine-readable error code
        response_time_ms: Time taken by the call
    """
    success: bool
    user: Optional[AuthUser] = None
    session: Optional[AuthSession] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0


class BaseAuthService(ABC):
    """
    Abstract base class for auth services.

    Example:
        >>> result = await auth.sign_in_with_password("ana@example.com", "secret1")
        >>> if result.success:
        ...     print(result.session.access_token)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the auth provider (e.g. "mock", "supabase")."""
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthResult:
        """
        Create an identity with a password credential.

        Returns:
            AuthResult: `user` is set on success; `session` is set only when
            the provider signs the new user in immediately.
        """
        pass

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """
        Exchange email and password for a session.

        Returns:
            AuthResult: `user` and `session` are set on success
        """
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthResult:
        """
        Resolve a session token to its identity.

        Returns:
            AuthResult: `user` is set when the token is valid and unexpired
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the auth service.

        Returns:
            bool: True if service is reachable and operational
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
