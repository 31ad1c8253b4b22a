"""Authentication: bcrypt password hashing, signed access tokens, FastAPI deps."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from socialapi.db.engine import get_session
from socialapi.db.tables import UserRow

# ---- Password hashing (bcrypt, default cost) ----


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), stored.encode())
    except ValueError:
        # Malformed stored hash
        return False


# ---- JWT (HS256, signed with settings.JWT_SECRET) ----

_JWT_ALGO = "HS256"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64url_decode(s: str) -> bytes:
    s += "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s)


def _signature(sig_input: bytes) -> bytes:
    return hmac.new(settings.JWT_SECRET.encode(), sig_input, hashlib.sha256).digest()


def _sign(payload: dict) -> str:
    header = _b64url(json.dumps({"alg": _JWT_ALGO, "typ": "JWT"}).encode())
    body = _b64url(json.dumps(payload).encode())
    sig = _signature(f"{header}.{body}".encode())
    return f"{header}.{body}.{_b64url(sig)}"


def decode_token(token: str) -> Optional[dict]:
    """Return the token's claims, or None if it is malformed, forged or expired."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    try:
        expected = _signature(f"{parts[0]}.{parts[1]}".encode())
        if not hmac.compare_digest(expected, _b64url_decode(parts[2])):
            return None
        payload = json.loads(_b64url_decode(parts[1]))
    except ValueError:
        return None
    if not isinstance(payload, dict) or payload.get("exp", 0) < time.time():
        return None
    return payload


def create_access_token(user_id: str, ttl_seconds: int | None = None) -> str:
    now = int(time.time())
    ttl = ttl_seconds if ttl_seconds is not None else settings.JWT_TTL_HOURS * 3600
    return _sign({
        "sub": user_id,
        "iat": now,
        "exp": now + ttl,
        "type": "access",
        "jti": uuid.uuid4().hex[:8],
    })


# ---- FastAPI dependency ----

_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    session: AsyncSession = Depends(get_session),
) -> Optional[str]:
    if not creds:
        return None
    payload = decode_token(creds.credentials)
    if not payload or payload.get("type") != "access":
        return None
    result = await session.execute(select(UserRow.id).where(UserRow.id == payload.get("sub")))
    return result.scalar_one_or_none()


async def require_user_id(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user_id
