"""
Authentication endpoints: register, login, logout, current user.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, models, security
from ..auth import AuthContext, authenticate_user, get_auth_context, get_current_user, issue_login_token
from ..database import get_db
from ..schemas import (
    ApiResponse,
    AuthOut,
    PasswordChange,
    RevokedOut,
    SessionOut,
    UserCreate,
    UserLogin,
    UserOut,
    UserUpdate,
)
from ..sessions import list_active_sessions, revoke_all_sessions, revoke_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthOut], status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    if payload.username and crud.get_user_by_username(db, payload.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    # a concurrent register can slip past the checks above; the unique
    # indexes on email and username catch it
    try:
        user = crud.create_user(
            db,
            payload.email,
            payload.password,
            display_name=payload.display_name,
            role=payload.role,
            username=payload.username,
        )
    except IntegrityError:
        db.rollback()
        logger.info("duplicate registration for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    token = issue_login_token(db, user, request)
    logger.info("registered %s user %s", user.role.value, user.id)
    return {"data": {"user": user, "token": token}}


@router.post("/login", response_model=ApiResponse[AuthOut])
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    user, error = authenticate_user(db, payload.email, payload.password)
    if not user:
        logger.info("login refused for %s: %s", payload.email, error)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error)
    token = issue_login_token(db, user, request)
    return {"data": {"user": user, "token": token}}


@router.post("/logout", response_model=ApiResponse[None])
def logout(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    # stateless tokens have nothing to revoke; the client drops the token
    if ctx.session is not None:
        revoke_session(db, ctx.session.id, "User logout")
    return {"message": "Logged out"}


@router.post("/logout-all", response_model=ApiResponse[RevokedOut])
def logout_all(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    revoked = revoke_all_sessions(db, ctx.user.id, "User logout all")
    return {"data": {"revoked": revoked}}


@router.get("/sessions", response_model=ApiResponse[list[SessionOut]])
def sessions(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": list_active_sessions(db, user.id)}


@router.get("/me", response_model=ApiResponse[UserOut])
def me(current_user: models.User = Depends(get_current_user)):
    return {"data": current_user}


@router.put("/me", response_model=ApiResponse[UserOut])
def update_me(
    payload: UserUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True)
    if data.get("username"):
        existing = crud.get_user_by_username(db, data["username"])
        if existing and existing.id != current_user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
    # NOT NULL columns: an explicit null leaves them unchanged
    for key in ("display_name", "theme", "preferences"):
        if key in data and data[key] is None:
            del data[key]
    return {"data": crud.update_user(db, current_user, data)}


@router.put("/password", response_model=ApiResponse[RevokedOut])
def change_password(
    payload: PasswordChange,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Change the password and sign out every other session."""
    if not security.verify_password(payload.current_password, ctx.user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    crud.set_password(db, ctx.user, payload.new_password)
    keep = ctx.session.id if ctx.session is not None else None
    revoked = revoke_all_sessions(db, ctx.user.id, "Password changed", keep=keep)
    return {"data": {"revoked": revoked}, "message": "Password updated"}
