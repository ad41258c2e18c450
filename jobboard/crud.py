from __future__ import annotations
import hashlib
import secrets
from datetime import timedelta
from typing import Any, Iterable

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.orm import Session, joinedload

from . import models, security
from .config import settings
from .models import utcnow

# --- Users ---

def _contains(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere, escaped with a backslash."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

def normalize_email(email: str) -> str:
    return email.strip().lower()

def get_user_by_id(db: Session, user_id: str) -> models.User | None:
    return db.get(models.User, user_id)

def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == normalize_email(email)).first()

def get_user_by_username(db: Session, username: str) -> models.User | None:
    return db.query(models.User).filter(models.User.username == username.strip().lower()).first()

def create_user(
    db: Session,
    email: str,
    password: str,
    display_name: str | None = None,
    role: models.UserRole = models.UserRole.JOB_SEEKER,
    username: str | None = None,
) -> models.User:
    email = normalize_email(email)
    user = models.User(
        email=email,
        username=username.strip().lower() if username else None,
        display_name=display_name or email.split("@")[0],
        password_hash=security.hash_password(password),
        role=role,
        provider="email",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def update_user(db: Session, user: models.User, data: dict[str, Any]) -> models.User:
    if "username" in data:
        data["username"] = data["username"].strip().lower() if data["username"] else None
    for field, value in data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user

def set_password(db: Session, user: models.User, password: str) -> None:
    user.password_hash = security.hash_password(password)
    db.commit()

def record_failed_login(db: Session, user: models.User) -> models.User:
    """Bump the failure counter and lock the account once it hits the limit."""
    user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
    if user.failed_login_attempts >= settings.MAX_FAILED_LOGINS:
        user.locked_until = utcnow() + timedelta(minutes=settings.LOCKOUT_MINUTES)
    db.commit()
    return user

def record_successful_login(db: Session, user: models.User, password: str) -> models.User:
    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_active_at = utcnow()
    if security.password_needs_rehash(user.password_hash):
        user.password_hash = security.hash_password(password)
    db.commit()
    db.refresh(user)
    return user

def deactivate_user(db: Session, user: models.User) -> None:
    user.is_active = False
    db.commit()

# --- Profiles & companies ---

def get_profile(db: Session, user_id: str) -> models.Profile | None:
    return db.query(models.Profile).filter(models.Profile.user_id == user_id).first()

def create_profile(db: Session, user_id: str, data: dict[str, Any]) -> models.Profile:
    profile = models.Profile(user_id=user_id, **data)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile

def update_profile(db: Session, profile: models.Profile, data: dict[str, Any]) -> models.Profile:
    for field, value in data.items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile

def get_company_by_user(db: Session, user_id: str) -> models.Company | None:
    return db.query(models.Company).filter(models.Company.user_id == user_id).first()

def create_company(db: Session, user_id: str, data: dict[str, Any]) -> models.Company:
    company = models.Company(user_id=user_id, **data)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company

def update_company(db: Session, company: models.Company, data: dict[str, Any]) -> models.Company:
    for field, value in data.items():
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    return company

# --- Jobs ---

def get_job(db: Session, job_id: str) -> models.Job | None:
    return (
        db.query(models.Job)
        .options(joinedload(models.Job.company))
        .filter(models.Job.id == job_id)
        .first()
    )

def list_jobs(
    db: Session,
    *,
    search: str | None = None,
    location: str | None = None,
    job_type: models.JobType | None = None,
    experience_level: models.ExperienceLevel | None = None,
    salary_min: int | None = None,
    status: models.JobStatus | None = None,
    company_id: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[models.Job], int]:
    """
    Filtered, paginated job listing, newest first.

    Without an explicit status only active jobs are returned. ``salary_min``
    keeps jobs whose upper bound reaches it.
    """
    conditions = [models.Job.status == (status or models.JobStatus.ACTIVE)]
    if company_id:
        conditions.append(models.Job.company_id == company_id)
    if search:
        term = _contains(search)
        conditions.append(
            or_(models.Job.title.ilike(term, escape="\\"), models.Job.description.ilike(term, escape="\\"))
        )
    if location:
        conditions.append(models.Job.location.ilike(_contains(location), escape="\\"))
    if job_type:
        conditions.append(models.Job.job_type == job_type)
    if experience_level:
        conditions.append(models.Job.experience_level == experience_level)
    if salary_min:
        conditions.append(models.Job.salary_max >= salary_min)

    total = db.execute(select(func.count()).select_from(models.Job).where(*conditions)).scalar_one()
    jobs = (
        db.execute(
            select(models.Job)
            .options(joinedload(models.Job.company))
            .where(*conditions)
            .order_by(models.Job.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        .scalars()
        .all()
    )
    return list(jobs), total

def list_company_jobs(db: Session, company_id: str) -> list[models.Job]:
    return (
        db.query(models.Job)
        .options(joinedload(models.Job.company))
        .filter(models.Job.company_id == company_id)
        .order_by(models.Job.created_at.desc())
        .all()
    )

def create_job(db: Session, company: models.Company, data: dict[str, Any]) -> models.Job:
    job = models.Job(company_id=company.id, **data)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job

def update_job(db: Session, job: models.Job, data: dict[str, Any]) -> models.Job:
    for field, value in data.items():
        setattr(job, field, value)
    db.commit()
    db.refresh(job)
    return job

def delete_job(db: Session, job: models.Job) -> None:
    db.delete(job)
    db.commit()

# --- Applications ---

def get_application(db: Session, application_id: str) -> models.Application | None:
    return db.get(models.Application, application_id)

def get_application_by_job_and_user(db: Session, job_id: str, user_id: str) -> models.Application | None:
    return (
        db.query(models.Application)
        .filter(models.Application.job_id == job_id, models.Application.user_id == user_id)
        .first()
    )

def create_application(db: Session, job_id: str, user_id: str, cover_letter: str | None = None) -> models.Application:
    application = models.Application(job_id=job_id, user_id=user_id, cover_letter=cover_letter)
    db.add(application)
    db.commit()
    db.refresh(application)
    return application

def list_user_applications(db: Session, user_id: str) -> list[models.Application]:
    return (
        db.query(models.Application)
        .options(joinedload(models.Application.job).joinedload(models.Job.company))
        .filter(models.Application.user_id == user_id)
        .order_by(models.Application.created_at.desc())
        .all()
    )

def list_job_applications(db: Session, job_id: str) -> list[models.Application]:
    return (
        db.query(models.Application)
        .options(joinedload(models.Application.applicant).joinedload(models.User.profile))
        .filter(models.Application.job_id == job_id)
        .order_by(models.Application.created_at.desc())
        .all()
    )

def update_application_status(
    db: Session, application: models.Application, status: models.ApplicationStatus
) -> models.Application:
    application.status = status
    db.commit()
    db.refresh(application)
    return application

# --- Items ---

ITEM_SORT_COLUMNS = {
    "createdAt": models.Item.created_at,
    "updatedAt": models.Item.updated_at,
    "title": models.Item.title,
}

def create_item(db: Session, user_id: str, data: dict[str, Any]) -> models.Item:
    item = models.Item(user_id=user_id, **data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item

def get_item(db: Session, item_id: str, user_id: str) -> models.Item | None:
    """Ownership-scoped lookup: another user's item is simply not found."""
    return (
        db.query(models.Item)
        .filter(models.Item.id == item_id, models.Item.user_id == user_id)
        .first()
    )

def update_item(db: Session, item: models.Item, data: dict[str, Any]) -> models.Item:
    for field, value in data.items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item

def delete_item(db: Session, item_id: str, user_id: str) -> bool:
    item = get_item(db, item_id, user_id)
    if not item:
        return False
    db.delete(item)
    db.commit()
    return True

def list_items(
    db: Session,
    user_id: str,
    *,
    status: models.ItemStatus | None = None,
    search: str | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[models.Item], int]:
    conditions = [models.Item.user_id == user_id]
    if status:
        conditions.append(models.Item.status == status)
    if search:
        conditions.append(models.Item.title.ilike(_contains(search), escape="\\"))

    order = asc if sort_order == "asc" else desc
    column = ITEM_SORT_COLUMNS.get(sort_by, models.Item.created_at)

    total = db.execute(select(func.count()).select_from(models.Item).where(*conditions)).scalar_one()
    items = (
        db.execute(
            select(models.Item).where(*conditions).order_by(order(column)).limit(limit).offset(offset)
        )
        .scalars()
        .all()
    )
    return list(items), total

def count_items_by_status(db: Session, user_id: str) -> dict[str, int]:
    counts = {s.value: 0 for s in models.ItemStatus}
    rows = db.execute(
        select(models.Item.status, func.count())
        .where(models.Item.user_id == user_id)
        .group_by(models.Item.status)
    ).all()
    for status, count in rows:
        counts[status.value] = count
    return counts

def bulk_update_item_status(
    db: Session, user_id: str, item_ids: Iterable[str], status: models.ItemStatus
) -> int:
    items = (
        db.query(models.Item)
        .filter(models.Item.user_id == user_id, models.Item.id.in_(list(item_ids)))
        .all()
    )
    for item in items:
        item.status = status
    db.commit()
    return len(items)

def bulk_delete_items(db: Session, user_id: str, item_ids: Iterable[str]) -> int:
    items = (
        db.query(models.Item)
        .filter(models.Item.user_id == user_id, models.Item.id.in_(list(item_ids)))
        .all()
    )
    for item in items:
        db.delete(item)
    db.commit()
    return len(items)

# --- API keys ---

API_KEY_PREFIX = "sk_"

def hash_api_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()

def create_api_key(
    db: Session,
    user_id: str,
    name: str,
    scopes: list[str] | None = None,
    expires_in_days: int | None = None,
) -> tuple[models.ApiKey, str]:
    """Create a key and return it with the raw secret, which is never stored."""
    raw_key = API_KEY_PREFIX + secrets.token_urlsafe(32)
    key = models.ApiKey(
        user_id=user_id,
        name=name,
        key_hash=hash_api_key(raw_key),
        key_preview=f"{API_KEY_PREFIX}...{raw_key[-6:]}",
        scopes=scopes or ["read"],
        expires_at=utcnow() + timedelta(days=expires_in_days) if expires_in_days else None,
    )
    db.add(key)
    db.commit()
    db.refresh(key)
    return key, raw_key

def list_api_keys(db: Session, user_id: str) -> list[models.ApiKey]:
    return (
        db.query(models.ApiKey)
        .filter(models.ApiKey.user_id == user_id)
        .order_by(models.ApiKey.created_at.desc())
        .all()
    )

def deactivate_api_key(db: Session, key_id: str, user_id: str) -> bool:
    key = (
        db.query(models.ApiKey)
        .filter(models.ApiKey.id == key_id, models.ApiKey.user_id == user_id)
        .first()
    )
    if not key:
        return False
    key.is_active = False
    db.commit()
    return True
