"""FastAPI dependencies: service wiring, pagination, path-id parsing."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from socialapi.db.engine import get_session
from socialapi.db.repository import (
    SQLCommentRepository, SQLFollowRepository, SQLLikeRepository,
    SQLPostRepository, SQLUserRepository,
)
from socialapi.services import CommentService, InteractionService, PostService, UserService

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


# ── Services (one set per request, sharing the request's session) ────────────


def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(SQLUserRepository(session))


def get_post_service(session: AsyncSession = Depends(get_session)) -> PostService:
    return PostService(SQLPostRepository(session), SQLUserRepository(session))


def get_comment_service(session: AsyncSession = Depends(get_session)) -> CommentService:
    return CommentService(SQLCommentRepository(session), SQLPostRepository(session))


def get_interaction_service(session: AsyncSession = Depends(get_session)) -> InteractionService:
    return InteractionService(
        SQLLikeRepository(session),
        SQLFollowRepository(session),
        SQLUserRepository(session),
        SQLPostRepository(session),
    )


# ── Pagination ────────────────────────────────────────────────────────────────


@dataclass
class Page:
    limit: int = DEFAULT_LIMIT
    offset: int = 0


def _to_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def pagination(
    limit: Optional[str] = Query(None, description="Page size, 1-100 (default 20)"),
    offset: Optional[str] = Query(None, description="Rows to skip (default 0)"),
) -> Page:
    """Lenient paging: bad values fall back to the defaults, oversize limits clamp."""
    lim = _to_int(limit)
    if lim is None or lim <= 0:
        lim = DEFAULT_LIMIT
    lim = min(lim, MAX_LIMIT)

    off = _to_int(offset)
    if off is None or off < 0:
        off = 0
    return Page(limit=lim, offset=off)


def parse_id(value: str, what: str) -> str:
    """Normalize a UUID path parameter or answer 400."""
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise HTTPException(400, f"invalid {what} ID")
