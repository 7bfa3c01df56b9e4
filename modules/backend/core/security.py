"""
Security Utilities.

Bearer-token issuing and verification. The rest of the application only
relies on one contract: a verified token yields a stable subject claim.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.exceptions import InvalidTokenError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

logger = get_logger(__name__)

BEARER_PREFIX = "bearer"


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode, normally {"sub": <subject>}
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise InvalidTokenError()


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the raw token out of an Authorization header value.

    Raises:
        InvalidTokenError: If the header is absent or not a Bearer credential
    """
    if not authorization:
        raise InvalidTokenError()

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_PREFIX or not token:
        raise InvalidTokenError()
    return token


class TokenVerifier:
    """
    Verifies Authorization headers and extracts the subject claim.

    Usage:
        verifier = TokenVerifier()
        if verifier.verify(header):
            subject = verifier.subject_of(header)
    """

    def __init__(self, subject_claim: str | None = None) -> None:
        self._subject_claim = subject_claim

    @property
    def subject_claim(self) -> str:
        if self._subject_claim is None:
            self._subject_claim = get_app_config().security.jwt.subject_claim
        return self._subject_claim

    def subject_of(self, authorization: str | None) -> str:
        """
        Return the verified subject claim.

        Raises:
            InvalidTokenError: If the header is malformed, the token fails
                verification, or the subject claim is missing
        """
        payload = decode_token(extract_bearer_token(authorization))
        subject = payload.get(self.subject_claim)
        if not isinstance(subject, str) or not subject:
            logger.warning("Token has no subject claim", extra={"claim": self.subject_claim})
            raise InvalidTokenError()
        return subject

    def verify(self, authorization: str | None) -> bool:
        """Return True if the header carries a valid token with a subject."""
        try:
            self.subject_of(authorization)
        except InvalidTokenError:
            return False
        return True


def verify_request(verifier: TokenVerifier, authorization: str | None) -> bool:
    """
    Pre-check an inbound request's credential.

    Raises:
        InvalidTokenError: If the request is not carrying a valid token
    """
    if not verifier.verify(authorization):
        raise InvalidTokenError()
    return True
