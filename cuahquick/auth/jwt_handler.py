from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from cuahquick.core import config

REASON_EXPIRED = "expired"
REASON_INVALID = "invalid"


@dataclass(frozen=True)
class SessionClaims:
    id: int
    role: str
    email: str | None = None


@dataclass(frozen=True)
class TokenVerification:
    claims: SessionClaims | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.claims is not None


def create_access_token(
    user_id: int,
    role: str,
    email: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["exp"]},
    )


def verify_access_token(token: str) -> TokenVerification:
    """Decode ``token`` without raising; failures come back as a reason."""
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        return TokenVerification(reason=REASON_EXPIRED)
    except jwt.InvalidTokenError:
        return TokenVerification(reason=REASON_INVALID)

    user_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(user_id, int) or not isinstance(role, str):
        return TokenVerification(reason=REASON_INVALID)

    return TokenVerification(claims=SessionClaims(id=user_id, role=role, email=payload.get("email")))
