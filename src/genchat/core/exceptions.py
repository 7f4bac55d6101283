"""Error taxonomy shared by the service and API layers.

Every error carries an HTTP ``status_code`` and a stable, machine-readable
``code``; the API renders both alongside the human-readable message.
"""

from __future__ import annotations


class GenChatError(Exception):
    """Base class for all expected request-terminating errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------


class ValidationError(GenChatError):
    """Raised when a required field is missing or blank."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Missing required fields"


class DuplicateEmailError(GenChatError):
    """Raised on signup when the email is already registered."""

    status_code = 400
    code = "DUPLICATE_EMAIL"
    default_message = "User already exists"


class InvalidCredentialsError(GenChatError):
    """Raised when the email is unknown or the password does not match."""

    status_code = 400
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class GoogleOnlyAccountError(GenChatError):
    """Raised on password login for an account created through Google."""

    status_code = 400
    code = "GOOGLE_ONLY_ACCOUNT"
    default_message = "Please login with Google"


class AuthenticationError(GenChatError):
    """Raised when a protected route is called without a session."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class InvalidSessionError(GenChatError):
    """Raised when the session token is malformed, forged or expired."""

    status_code = 403
    code = "INVALID_SESSION"
    default_message = "Invalid token"


class ForbiddenError(GenChatError):
    """Raised when a session acts on another user's data."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(GenChatError):
    """Raised for an unknown user or conversation."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


# ---------------------------------------------------------------------------
# Server errors
# ---------------------------------------------------------------------------


class UpstreamError(GenChatError):
    """Raised when the text-completion service fails or times out."""

    status_code = 503
    code = "UPSTREAM_ERROR"
    default_message = "The assistant is unavailable right now. Please try again."


class PersistenceError(GenChatError):
    """Raised when the backing store is unreachable or a write fails."""

    status_code = 500
    code = "PERSISTENCE_ERROR"
    default_message = "Could not save your data. Please try again."


class OAuthError(GenChatError):
    """Raised when the Google authorization-code exchange fails."""

    status_code = 400
    code = "OAUTH_ERROR"
    default_message = "Google sign-in failed"
