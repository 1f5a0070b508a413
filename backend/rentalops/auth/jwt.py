"""Access tokens for the RentalOps API.

Tokens are minted by the platform's sign-in service and name the user in the
``sub`` claim. This module verifies them on every request; it can also mint
them for scripts and tests.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from rentalops.config import settings

ACCESS_TOKEN_TYPE = "access"


class TokenError(Exception):
    """The bearer token cannot be used to identify a user."""


@dataclass(frozen=True)
class AccessClaims:
    user_id: uuid.UUID
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    user_id: uuid.UUID | str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Mint an access token for ``user_id``.

    Args:
        user_id: The user's id; stored as a string in ``sub``.
        expires_delta: Lifetime of the token. Defaults to
            ``settings.jwt_access_token_expire_minutes`` minutes.
        extra_claims: Additional claims; they cannot override ``sub``,
            ``exp``, ``iat`` or ``type``.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))
    payload = dict(extra_claims or {})
    payload.update({"sub": str(user_id), "exp": expire, "iat": now, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Verify the signature and expiry of a token and return its payload.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def read_access_token(token: str) -> AccessClaims:
    """Decode a bearer token and check that it is an access token for a user id.

    Raises:
        TokenError: With a message suitable for a 401 response.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise TokenError("Could not validate credentials") from None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise TokenError("Invalid token type")

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except (KeyError, ValueError):
        raise TokenError("Could not validate credentials") from None

    return AccessClaims(
        user_id=user_id,
        issued_at=datetime.fromtimestamp(payload["iat"], timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc),
    )
