from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from . import crud, models, security
from .config import settings
from .database import get_db
from .models import UserRole
from .sessions import create_session, validate_session
from .token import create_access_token, verify_token

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    user: models.User
    # None when tokens are stateless
    session: models.UserSession | None = None


def authenticate_user(db: Session, email: str, password: str) -> tuple[models.User | None, str | None]:
    """
    Authenticates a user by email and password.

    Returns ``(user, None)`` on success, otherwise ``(None, reason)``. Repeated
    wrong passwords lock the account for a while; a locked or deactivated
    account is refused before the password is even checked.
    """
    user = crud.get_user_by_email(db, email)
    if not user:
        return None, "Invalid email or password"
    if user.is_locked:
        return None, "Account is temporarily locked"
    if not user.is_active:
        return None, "Account is deactivated"
    if not user.password_hash:
        return None, "Password login not available for this account"
    if not security.verify_password(password, user.password_hash):
        crud.record_failed_login(db, user)
        if user.is_locked:
            logger.warning("locked account %s after %d failed logins", user.id, user.failed_login_attempts)
        return None, "Invalid email or password"
    return crud.record_successful_login(db, user, password), None


def client_ip(request: Request) -> str:
    """Best guess at the caller's address behind a proxy or CDN."""
    forwarded = request.headers.get("cf-connecting-ip") or request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def issue_login_token(db: Session, user: models.User, request: Request) -> str:
    """Token for a fresh login: session-backed unless sessions are switched off."""
    if not settings.AUTH_SESSIONS:
        return create_access_token(user)
    _, token = create_session(
        db,
        user,
        user_agent=request.headers.get("user-agent"),
        ip_address=client_ip(request),
    )
    return token


def get_token_from_cookie_or_header(request: Request) -> str | None:
    """Extract token from either Authorization header or access_token cookie"""
    # First try authorization header
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:]  # Remove "Bearer " prefix

    # Then try cookie
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        return cookie_token[7:]  # Remove "Bearer " prefix

    return None


def get_auth_context(request: Request, db: Session = Depends(get_db)) -> AuthContext:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Get token from cookie or header
    token = get_token_from_cookie_or_header(request)
    if not token:
        raise credentials_exception

    if settings.AUTH_SESSIONS:
        resolved = validate_session(db, token)
        if resolved is None:
            raise credentials_exception
        user, session = resolved
        return AuthContext(user=user, session=session)

    claims = verify_token(token)
    if claims is None:
        raise credentials_exception
    user = crud.get_user_by_id(db, claims["sub"])
    if user is None:
        raise credentials_exception
    return AuthContext(user=user)


def get_current_user(ctx: AuthContext = Depends(get_auth_context)) -> models.User:
    return ctx.user


class RoleChecker:
    """Dependency that lets a request through only for one ``UserRole``."""

    def __init__(self, role: UserRole):
        self.role = role

    def __call__(self, user: models.User = Depends(get_current_user)) -> models.User:
        if UserRole(user.role) is not self.role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires the {self.role.value} role",
            )
        return user


require_job_seeker = RoleChecker(UserRole.JOB_SEEKER)
require_recruiter = RoleChecker(UserRole.RECRUITER)
