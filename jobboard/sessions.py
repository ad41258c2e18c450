"""
Server-side login sessions.

Every login writes one row holding the SHA-256 of the bearer token it was
issued with. A token is only good while its row is active: not revoked and
not past ``expires_at``. Rows are never deleted, revocation just flags them.
"""
from __future__ import annotations
import hashlib
import logging
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .models import utcnow
from .token import create_access_token, verify_token

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_session(
    db: Session,
    user: models.User,
    *,
    user_agent: str | None = None,
    ip_address: str | None = None,
    ttl: int | None = None,
) -> tuple[models.UserSession, str]:
    """Insert a session row for ``user`` and return it with its bearer token."""
    ttl = settings.TOKEN_TTL_SECONDS if ttl is None else ttl
    session = models.UserSession(
        id=models.new_id(),
        user_id=user.id,
        user_agent=(user_agent or "")[:512] or None,
        ip_address=ip_address,
        token_hash="",
        expires_at=utcnow() + timedelta(seconds=ttl),
    )
    token = create_access_token(user, session_id=session.id, ttl=ttl)
    session.token_hash = hash_token(token)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session, token


def validate_session(db: Session, token: str) -> tuple[models.User, models.UserSession] | None:
    """
    Resolve a bearer token to its user and session.

    Returns None unless the signature checks out, the embedded session id
    names a row with this token's hash that is neither revoked nor expired,
    and the owning user is active and not locked out.
    """
    claims = verify_token(token)
    if claims is None or not claims.get("sid"):
        return None

    now = utcnow()
    session = db.execute(
        select(models.UserSession).where(
            models.UserSession.id == claims["sid"],
            models.UserSession.token_hash == hash_token(token),
            models.UserSession.is_revoked.is_(False),
            models.UserSession.expires_at > now,
        )
    ).scalar_one_or_none()
    if session is None:
        return None

    user = session.user
    if user is None or user.id != claims.get("sub") or not user.is_active or user.is_locked:
        return None

    session.last_activity = now
    db.commit()
    return user, session


def revoke_session(db: Session, session_id: str, reason: str) -> bool:
    """Soft-revoke one session. Returns False if it was missing or already revoked."""
    result = db.execute(
        update(models.UserSession)
        .where(models.UserSession.id == session_id, models.UserSession.is_revoked.is_(False))
        .values(is_revoked=True, revoked_at=utcnow(), revoked_reason=reason)
    )
    db.commit()
    return result.rowcount > 0


def revoke_all_sessions(db: Session, user_id: str, reason: str, *, keep: str | None = None) -> int:
    """Soft-revoke every live session of ``user_id`` except ``keep``."""
    stmt = update(models.UserSession).where(
        models.UserSession.user_id == user_id, models.UserSession.is_revoked.is_(False)
    )
    if keep is not None:
        stmt = stmt.where(models.UserSession.id != keep)
    result = db.execute(stmt.values(is_revoked=True, revoked_at=utcnow(), revoked_reason=reason))
    db.commit()
    logger.info("revoked %d session(s) for user %s: %s", result.rowcount, user_id, reason)
    return result.rowcount


def list_active_sessions(db: Session, user_id: str) -> list[models.UserSession]:
    return (
        db.execute(
            select(models.UserSession)
            .where(
                models.UserSession.user_id == user_id,
                models.UserSession.is_revoked.is_(False),
                models.UserSession.expires_at > utcnow(),
            )
            .order_by(models.UserSession.created_at.desc())
        )
        .scalars()
        .all()
    )
