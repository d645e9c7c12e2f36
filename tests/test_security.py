from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from linalg_practice.core.config import settings
from linalg_practice.core.security import PracticeKeyError, create_practice_key, decode_practice_key


def test_practice_key_round_trip() -> None:
    token = create_practice_key(instance_id="inst-1", session_id="sess-1", user_id=None, guest_id="guest-1")

    claims = decode_practice_key(token)

    assert claims.instance_id == "inst-1"
    assert claims.session_id == "sess-1"
    assert claims.user_id is None
    assert claims.guest_id == "guest-1"


def test_expired_practice_key_is_rejected() -> None:
    issued = datetime.now(UTC) - timedelta(minutes=settings.practice_key_ttl_minutes + 1)
    token = create_practice_key(instance_id="inst", session_id=None, user_id="u", guest_id=None, now=issued)

    with pytest.raises(PracticeKeyError, match="expired"):
        decode_practice_key(token)


def test_tampered_or_foreign_keys_are_rejected() -> None:
    token = create_practice_key(instance_id="inst", session_id=None, user_id="u", guest_id=None)

    with pytest.raises(PracticeKeyError):
        decode_practice_key(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))

    foreign = jwt.encode(
        {"iss": settings.practice_key_issuer, "sub": "inst", "type": "access"},
        settings.practice_key_secret,
        algorithm="HS256",
    )
    with pytest.raises(PracticeKeyError):
        decode_practice_key(foreign)

    with pytest.raises(PracticeKeyError):
        decode_practice_key("not-a-token")
