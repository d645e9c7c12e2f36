from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from linalg_practice.core.config import settings

PRACTICE_KEY_TYPE = "practice"


class PracticeKeyError(Exception):
    """The practice key is missing, malformed, expired or signed with another secret."""


@dataclass(frozen=True, slots=True)
class PracticeKeyClaims:
    instance_id: str
    session_id: str | None
    user_id: str | None
    guest_id: str | None


def create_practice_key(
    *,
    instance_id: str,
    session_id: str | None,
    user_id: str | None,
    guest_id: str | None,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "iss": settings.practice_key_issuer,
        "sub": instance_id,
        "sid": session_id,
        "uid": user_id,
        "gid": guest_id,
        "type": PRACTICE_KEY_TYPE,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=settings.practice_key_ttl_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.practice_key_secret, algorithm="HS256")


def decode_practice_key(token: str) -> PracticeKeyClaims:
    try:
        payload = jwt.decode(
            token,
            settings.practice_key_secret,
            algorithms=["HS256"],
            issuer=settings.practice_key_issuer,
        )
    except jwt.ExpiredSignatureError as exc:
        raise PracticeKeyError("Practice key expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise PracticeKeyError("Invalid practice key.") from exc

    if payload.get("type") != PRACTICE_KEY_TYPE or not isinstance(payload.get("sub"), str):
        raise PracticeKeyError("Invalid practice key.")
    return PracticeKeyClaims(
        instance_id=payload["sub"],
        session_id=payload.get("sid"),
        user_id=payload.get("uid"),
        guest_id=payload.get("gid"),
    )
