# jobboard/token.py
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any

import jwt
from jwt.utils import base64url_decode, base64url_encode

from .config import settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def issue_token(claims: dict[str, Any], secret: str | None = None, ttl: int | None = None) -> str:
    """Sign ``claims`` into a compact HS256 JWT valid for ``ttl`` seconds."""
    now = int(datetime.now(timezone.utc).timestamp())
    ttl = settings.TOKEN_TTL_SECONDS if ttl is None else ttl
    payload = {**claims, "iat": now, "exp": now + ttl}
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, secret: str | None = None) -> dict[str, Any] | None:
    """
    Decode ``token`` and return its claims.

    Returns None on anything that is not a well-formed, correctly signed,
    unexpired token carrying sub/iat/exp. Callers treat None as
    "unauthenticated" and never need to catch.
    """
    if not token or not isinstance(token, str) or not _is_canonical(token):
        return None
    try:
        return jwt.decode(
            token,
            secret or settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as exc:
        logger.debug("token rejected: %s", exc)
        return None


def _is_canonical(token: str) -> bool:
    # base64url ignores the spare low bits of the last char, so two
    # spellings can decode to the same bytes; only the one we emit counts
    segments = token.split(".")
    if len(segments) != 3:
        return False
    try:
        return all(
            base64url_encode(base64url_decode(seg.encode("ascii"))).decode("ascii") == seg
            for seg in segments
        )
    except (ValueError, UnicodeError):
        return False


def create_access_token(user, session_id: str | None = None, ttl: int | None = None) -> str:
    claims = {"sub": user.id, "email": user.email, "role": user.role.value}
    if session_id is not None:
        claims["sid"] = session_id
    return issue_token(claims, ttl=ttl)
