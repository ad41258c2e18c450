"""
Job seeker profiles and recruiter company pages, one of each per user.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_job_seeker, require_recruiter
from ..database import get_db
from ..schemas import ApiResponse, CompanyCreate, CompanyOut, CompanyUpdate, ProfileIn, ProfileOut

router = APIRouter(prefix="/api", tags=["profiles"])


@router.get("/profile", response_model=ApiResponse[ProfileOut])
def get_profile(user: models.User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    profile = crud.get_profile(db, user.id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return {"data": profile}


@router.post("/profile", response_model=ApiResponse[ProfileOut], status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProfileIn,
    user: models.User = Depends(require_job_seeker),
    db: Session = Depends(get_db),
):
    if crud.get_profile(db, user.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Profile already exists")
    return {"data": crud.create_profile(db, user.id, payload.model_dump(exclude_none=True))}


@router.put("/profile", response_model=ApiResponse[ProfileOut])
def update_profile(
    payload: ProfileIn,
    user: models.User = Depends(require_job_seeker),
    db: Session = Depends(get_db),
):
    """Partial update; the first PUT creates the profile."""
    profile = crud.get_profile(db, user.id)
    if not profile:
        return {"data": crud.create_profile(db, user.id, payload.model_dump(exclude_none=True))}
    data = payload.model_dump(exclude_unset=True)
    for key in ("skills", "experience", "education"):
        if key in data and data[key] is None:
            data[key] = []
    return {"data": crud.update_profile(db, profile, data)}


@router.get("/company", response_model=ApiResponse[CompanyOut])
def get_company(user: models.User = Depends(require_recruiter), db: Session = Depends(get_db)):
    company = crud.get_company_by_user(db, user.id)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"data": company}


@router.post("/company", response_model=ApiResponse[CompanyOut], status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    if crud.get_company_by_user(db, user.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company already exists")
    return {"data": crud.create_company(db, user.id, payload.model_dump())}


@router.put("/company", response_model=ApiResponse[CompanyOut])
def update_company(
    payload: CompanyUpdate,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    company = crud.get_company_by_user(db, user.id)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    data = payload.model_dump(exclude_unset=True)
    # name and description are NOT NULL
    for required in ("name", "description"):
        if required in data and data[required] is None:
            del data[required]
    return {"data": crud.update_company(db, company, data)}
