from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_job_seeker, require_recruiter
from ..database import get_db
from ..models import JobStatus
from ..schemas import (
    ApiResponse,
    ApplicationCreate,
    ApplicationOut,
    ApplicationStatusUpdate,
    JobApplicationOut,
    MyApplicationOut,
)
from .jobs import get_owned_job

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])

ALREADY_APPLIED = "Already applied"


@router.post("", response_model=ApiResponse[ApplicationOut], status_code=status.HTTP_201_CREATED)
def apply(
    payload: ApplicationCreate,
    user: models.User = Depends(require_job_seeker),
    db: Session = Depends(get_db),
):
    job = crud.get_job(db, payload.job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.status != JobStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Job is not accepting applications"
        )
    if crud.get_application_by_job_and_user(db, job.id, user.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_APPLIED)
    # a concurrent apply can slip past the check above; the unique
    # constraint on (job_id, user_id) catches it
    try:
        application = crud.create_application(db, job.id, user.id, payload.cover_letter)
    except IntegrityError:
        db.rollback()
        logger.info("duplicate application for job %s by user %s", job.id, user.id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_APPLIED)
    return {"data": application, "message": "Application submitted"}


@router.get("/my", response_model=ApiResponse[list[MyApplicationOut]])
def my_applications(user: models.User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    return {"data": crud.list_user_applications(db, user.id)}


@router.get("/job/{job_id}", response_model=ApiResponse[list[JobApplicationOut]])
def job_applications(
    job_id: str,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, job_id, user)
    return {"data": crud.list_job_applications(db, job.id)}


@router.put("/{application_id}/status", response_model=ApiResponse[ApplicationOut])
def update_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    application = crud.get_application(db, application_id)
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    get_owned_job(db, application.job_id, user)
    return {"data": crud.update_application_status(db, application, payload.status)}
