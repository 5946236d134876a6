"""
Identity error taxonomy.

Each error carries the key it was raised for (an email or a record id) and
the HTTP status the transport should answer with. Handlers map the whole
family through IdentityError.to_dict(); nothing here knows about FastAPI.
"""

from typing import Any, Dict, Optional, Union


class IdentityError(Exception):
    """Base class for identity failures that surface to the caller."""

    status_code: int = 400
    code: str = "identity_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"detail": self.message, "code": self.code, **self.details}


class ConflictError(IdentityError):
    """An account with this email already exists."""

    status_code = 409
    code = "conflict"

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}", {"email": email})
        self.email = email


class NotFoundError(IdentityError):
    """No record matches the given email or identifier."""

    status_code = 404
    code = "not_found"

    def __init__(self, key: Union[str, int], resource: str = "user"):
        field = "email" if isinstance(key, str) else "id"
        super().__init__(
            f"{resource.capitalize()} not found: {key}",
            {"resource": resource, field: key},
        )
        self.key = key
        self.resource = resource


class AuthenticationError(IdentityError):
    """Base for failures that should be answered with 401."""

    status_code = 401
    code = "unauthorized"


class InvalidTokenError(AuthenticationError):
    """Token signature is wrong or the token cannot be parsed."""

    code = "invalid_token"

    def __init__(self, reason: str = "Invalid token"):
        super().__init__(reason)


class TokenExpiredError(InvalidTokenError):
    """Token verified but is past its expiry."""

    code = "token_expired"

    def __init__(self, subject: Optional[str] = None):
        super().__init__("Token has expired")
        self.subject = subject


class MalformedHeaderError(AuthenticationError):
    """Authorization header is missing or not of the form 'Bearer <token>'."""

    code = "malformed_authorization_header"

    def __init__(self, reason: str = "Authorization header must be 'Bearer <token>'"):
        super().__init__(reason)


class SigningKeyError(RuntimeError):
    """
    Token signing is misconfigured.

    Raised while building the token service at startup. Not an IdentityError,
    so no request handler turns it into a response.
    """
