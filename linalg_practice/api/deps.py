from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Header, Request, Response
from sqlalchemy.orm import Session

from linalg_practice.core.config import settings
from linalg_practice.db.session import SessionLocal
from linalg_practice.services.practice import Actor

GUEST_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DBSession = Annotated[Session, Depends(get_db)]


def _guest_cookie(request: Request) -> str | None:
    value = request.cookies.get(settings.guest_cookie_name)
    return value.strip() if value and value.strip() else None


def get_actor(
    request: Request,
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
    x_guest_id: Annotated[str | None, Header(alias="X-Guest-Id")] = None,
) -> Actor:
    """Who is practicing, without minting a guest id."""
    if x_user_id and x_user_id.strip():
        request.state.user_id = x_user_id.strip()
        return Actor(user_id=x_user_id.strip())
    guest_id = (x_guest_id or "").strip() or _guest_cookie(request)
    if guest_id:
        request.state.guest_id = guest_id
    return Actor(guest_id=guest_id)


def ensure_actor(
    response: Response,
    actor: Annotated[Actor, Depends(get_actor)],
) -> Actor:
    """Like ``get_actor``, issuing a guest cookie to anonymous callers."""
    if not actor.is_anonymous:
        return actor
    guest_id = str(uuid4())
    response.set_cookie(
        settings.guest_cookie_name,
        guest_id,
        max_age=GUEST_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
        secure=settings.app_env == "production",
    )
    return Actor(guest_id=guest_id)


CurrentActor = Annotated[Actor, Depends(get_actor)]
GuestOrUser = Annotated[Actor, Depends(ensure_actor)]
