from __future__ import annotations

import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_recruiter
from ..database import get_db
from ..models import ExperienceLevel, JobStatus, JobType
from ..schemas import ApiResponse, JobCreate, JobOut, JobPage, JobUpdate

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def get_owned_job(db: Session, job_id: str, user: models.User) -> models.Job:
    """Load a job the recruiter may modify: 404 if missing, 403 if another company's."""
    job = crud.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.company.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not own this job")
    return job


def _check_salary_range(salary_min: int | None, salary_max: int | None) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="salaryMin cannot exceed salaryMax"
        )


@router.get("", response_model=ApiResponse[JobPage])
def list_jobs(
    search: str | None = Query(None, max_length=200),
    location: str | None = Query(None, max_length=200),
    job_type: JobType | None = Query(None, alias="jobType"),
    experience_level: ExperienceLevel | None = Query(None, alias="experienceLevel"),
    salary_min: int | None = Query(None, alias="salaryMin", ge=0),
    job_status: JobStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1, le=10_000),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    jobs, total = crud.list_jobs(
        db,
        search=search,
        location=location,
        job_type=job_type,
        experience_level=experience_level,
        salary_min=salary_min,
        status=job_status,
        page=page,
        limit=limit,
    )
    return {
        "data": {
            "jobs": jobs,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit),
            },
        }
    }


@router.get("/my/all", response_model=ApiResponse[list[JobOut]])
def my_jobs(user: models.User = Depends(require_recruiter), db: Session = Depends(get_db)):
    company = crud.get_company_by_user(db, user.id)
    if not company:
        return {"data": []}
    return {"data": crud.list_company_jobs(db, company.id)}


@router.get("/{job_id}", response_model=ApiResponse[JobOut])
def get_job(job_id: str, db: Session = Depends(get_db)):
    job = crud.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return {"data": job}


@router.post("", response_model=ApiResponse[JobOut], status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    company = crud.get_company_by_user(db, user.id)
    if not company:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Create a company profile before posting jobs"
        )
    _check_salary_range(payload.salary_min, payload.salary_max)
    return {"data": crud.create_job(db, company, payload.model_dump())}


@router.put("/{job_id}", response_model=ApiResponse[JobOut])
def update_job(
    job_id: str,
    payload: JobUpdate,
    user: models.User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, job_id, user)
    data = payload.model_dump(exclude_unset=True)
    # columns that may not be cleared
    for key in ("title", "description", "requirements", "location", "job_type", "experience_level", "status"):
        if key in data and data[key] is None:
            del data[key]
    if data.get("skills", []) is None:
        data["skills"] = []
    _check_salary_range(data.get("salary_min", job.salary_min), data.get("salary_max", job.salary_max))
    return {"data": crud.update_job(db, job, data)}


@router.delete("/{job_id}", response_model=ApiResponse[None])
def delete_job(job_id: str, user: models.User = Depends(require_recruiter), db: Session = Depends(get_db)):
    job = get_owned_job(db, job_id, user)
    crud.delete_job(db, job)
    return {"message": "Job deleted"}
