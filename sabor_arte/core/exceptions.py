"""
Storefront Error Taxonomy

Every failure a flow can report maps to exactly one of these classes.
The API layer turns them into a JSON body carrying the message and the
`code`, so clients can tell e.g. a rejected signup from a signup that
left an account without a profile.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for all user-visible storefront failures."""

    status_code: int = 500
    code: str = "InternalError"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail  # logged, never returned


class ConfigurationError(Exception):
    """Required configuration is missing; the process must not start."""


# Request input

class ValidationError(StorefrontError):
    status_code = 400
    code = "ValidationError"


# Credential gateway

class Unauthenticated(StorefrontError):
    status_code = 401
    code = "Unauthenticated"


class InvalidCredential(StorefrontError):
    status_code = 401
    code = "InvalidCredential"


class AuthServiceUnavailable(StorefrontError):
    """The auth service timed out or could not be reached."""
    status_code = 503
    code = "AuthServiceUnavailable"


# Registration

class RegistrationRejected(StorefrontError):
    status_code = 400
    code = "RegistrationRejected"


class ProfilePersistFailure(StorefrontError):
    """Identity was created but its profile row was not written."""
    status_code = 500
    code = "ProfilePersistFailure"


class SessionIssueFailure(StorefrontError):
    """Account and profile exist but no session could be issued."""
    status_code = 500
    code = "SessionIssueFailure"


# Store

class PersistenceError(StorefrontError):
    status_code = 500
    code = "PersistenceError"


class DataIntegrityError(StorefrontError):
    status_code = 500
    code = "DataIntegrityError"


__all__ = [
    "StorefrontError",
    "ConfigurationError",
    "ValidationError",
    "Unauthenticated",
    "InvalidCredential",
    "AuthServiceUnavailable",
    "RegistrationRejected",
    "ProfilePersistFailure",
    "SessionIssueFailure",
    "PersistenceError",
    "DataIntegrityError",
]
