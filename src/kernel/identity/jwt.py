"""
Bearer token issuance and verification.

Tokens are stateless HS256 JWTs carrying the user's email as subject. Nothing
is stored server-side, so a token stays usable until its exp claim passes.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from src.config import get_settings
from src.kernel.identity.exceptions import (
    InvalidTokenError,
    MalformedHeaderError,
    SigningKeyError,
    TokenExpiredError,
)
from src.logging_config import get_logger

logger = get_logger(__name__)

BEARER_SCHEME = "bearer"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenClaims(BaseModel):
    """Decoded claims of a verified token."""

    sub: str  # User email
    iat: datetime
    exp: datetime


class TokenResponse(BaseModel):
    """Token handed back to a client after login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until the token expires


def parse_authorization_header(header: Optional[str]) -> str:
    """
    Extract the token from an 'Authorization: Bearer <token>' value.

    The scheme is matched case-insensitively and must be followed by exactly
    one space and a non-empty token.

    Raises:
        MalformedHeaderError: header is absent or not of that form
    """
    if not header:
        raise MalformedHeaderError("Missing Authorization header")

    scheme, sep, token = header.partition(" ")
    if not sep or scheme.lower() != BEARER_SCHEME:
        raise MalformedHeaderError()
    if not token or token != token.strip() or " " in token:
        raise MalformedHeaderError()
    return token


class TokenService:
    """
    JWT token creation and verification.

    The signing key is fixed at construction and never exposed or logged.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
        clock: Clock = utc_now,
    ):
        settings = get_settings()
        secret_key = secret_key if secret_key is not None else settings.secret_key
        if not secret_key:
            raise SigningKeyError("SECRET_KEY is not configured; refusing to sign tokens")

        self._secret_key = secret_key
        self.algorithm = algorithm or settings.algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes
        self._clock = clock

    def __repr__(self) -> str:
        return f"<TokenService algorithm={self.algorithm} expire_minutes={self.expire_minutes}>"

    def now(self) -> datetime:
        return self._clock()

    def issue(self, subject: str) -> str:
        """
        Create a signed token for a subject.

        Args:
            subject: The user's email

        Returns:
            Encoded JWT with sub, iat and exp claims
        """
        now = self.now()
        expire = now + timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def issue_response(self, subject: str) -> TokenResponse:
        """Issue a token wrapped in the login response shape."""
        return TokenResponse(
            access_token=self.issue(subject),
            expires_in=self.expire_minutes * 60,
        )

    def decode(self, token: str) -> TokenClaims:
        """
        Verify the signature and return the claims.

        Expiry is not checked here; see is_expired().

        Raises:
            InvalidTokenError: bad signature, malformed token or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

        subject = payload.get("sub")
        if not subject or "exp" not in payload or "iat" not in payload:
            raise InvalidTokenError("Token is missing required claims")

        try:
            return TokenClaims(
                sub=subject,
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError("Token has malformed time claims") from exc

    def extract_subject(self, token: str) -> str:
        """Return the subject of a correctly signed token."""
        return self.decode(token).sub

    def is_expired(self, token: str) -> bool:
        """True once the current time reaches the token's exp claim."""
        return self._claims_expired(self.decode(token))

    def _claims_expired(self, claims: TokenClaims) -> bool:
        return self.now() >= claims.exp

    def validate(self, token: str, expected_subject: str) -> bool:
        """
        Check that a token is for expected_subject and still fresh.

        Never raises; an unparseable token is simply not valid.
        """
        try:
            claims = self.decode(token)
        except InvalidTokenError:
            return False
        return claims.sub == expected_subject and not self._claims_expired(claims)

    def resolve_subject(self, authorization: Optional[str]) -> str:
        """
        Resolve the acting identity from an Authorization header value.

        Raises:
            MalformedHeaderError: header missing or not 'Bearer <token>'
            InvalidTokenError: token fails verification
            TokenExpiredError: token verified but expired
        """
        token = parse_authorization_header(authorization)
        claims = self.decode(token)
        if self._claims_expired(claims):
            logger.info("Rejected expired token", extra={"email": claims.sub})
            raise TokenExpiredError(claims.sub)
        return claims.sub


# Default service instance
_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get or create the process-wide token service."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service


def reset_token_service() -> None:
    """Forget the process-wide instance so the next call re-reads settings."""
    global _token_service
    _token_service = None
