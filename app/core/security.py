"""Password hashing and bearer-token helpers for the identity store.

Passwords: bcrypt over a SHA-256 pre-hash so inputs longer than bcrypt's
72-byte limit are not silently truncated.

Tokens: HS256 JWTs carrying
  - sub:  account id (string)
  - uid:  public vendor identifier, e.g. "VEN-3F9A0C21D7"
  - role: "vendor" | "official"
  - iat / exp
"""

import base64
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from app.domain.enums import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, resolved from a bearer token and the account row."""

    account_id: int
    public_id: str
    role: Role
    official_title: str | None = None

    @property
    def is_official(self) -> bool:
        return self.role is Role.OFFICIAL


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Return True if *password* matches *hashed*; never raises on malformed hashes."""
    if not password or not hashed:
        return False
    try:
        return bool(bcrypt.checkpw(_prehash(password), hashed.encode("utf-8")))
    except (ValueError, TypeError):
        return False


def create_access_token(
    identity: Identity,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.account_id),
        "uid": identity.public_id,
        "role": identity.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Decode and validate a token.

    Raises:
        ValueError: if the token is expired, tampered with, or lacks the
            claims this service relies on.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ValueError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise ValueError(f"Invalid token: {e!s}") from e

    try:
        payload["sub"] = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise ValueError("Invalid token: malformed subject claim") from e
    return payload
