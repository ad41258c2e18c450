from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel

from .models import (
    ApplicationStatus,
    ExperienceLevel,
    ItemStatus,
    JobStatus,
    JobType,
    Theme,
    UserRole,
)

T = TypeVar("T")


class CamelModel(BaseModel):
    """The SPA speaks camelCase; snake_case names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    error: str | None = None
    message: str | None = None


# Auth

class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    display_name: str | None = Field(None, max_length=255)
    username: str | None = Field(None, min_length=2, max_length=64)
    role: UserRole = UserRole.JOB_SEEKER

class UserLogin(CamelModel):
    email: str
    password: str = Field(min_length=1)

class UserUpdate(CamelModel):
    display_name: str | None = Field(None, min_length=1, max_length=255)
    username: str | None = Field(None, max_length=64)
    avatar_url: str | None = None
    theme: Theme | None = None
    preferences: dict[str, Any] | None = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(min_length=8)

class UserOut(CamelModel):
    id: str
    email: EmailStr
    username: str | None = None
    display_name: str
    avatar_url: str | None = None
    role: UserRole
    theme: Theme = Theme.SYSTEM
    preferences: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

class AuthOut(BaseModel):
    user: UserOut
    token: str

class SessionOut(CamelModel):
    id: str
    user_agent: str | None = None
    ip_address: str | None = None
    created_at: datetime
    last_activity: datetime | None = None
    expires_at: datetime

class RevokedOut(BaseModel):
    revoked: int


# Profiles & companies

class ExperienceEntry(CamelModel):
    company: str
    title: str
    start_date: str
    end_date: str | None = None
    description: str | None = None

class EducationEntry(CamelModel):
    school: str
    degree: str
    field: str
    start_date: str
    end_date: str | None = None

class ProfileIn(CamelModel):
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    experience: list[ExperienceEntry] | None = None
    education: list[EducationEntry] | None = None
    resume_url: str | None = None
    avatar_url: str | None = None

class ProfileOut(CamelModel):
    id: str
    user_id: str
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    resume_url: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime

class CompanyCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    industry: str | None = None
    location: str | None = None
    website: str | None = Field(None, max_length=2048)
    logo: str | None = None
    size: str | None = None

class CompanyUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    industry: str | None = None
    location: str | None = None
    website: str | None = Field(None, max_length=2048)
    logo: str | None = None
    size: str | None = None

class CompanyOut(CamelModel):
    id: str
    user_id: str
    name: str
    description: str
    industry: str | None = None
    location: str | None = None
    website: str | None = None
    logo: str | None = None
    size: str | None = None
    created_at: datetime
    updated_at: datetime


# Jobs

class JobCreate(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    description: str = Field(min_length=1)
    requirements: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=512)
    job_type: JobType
    experience_level: ExperienceLevel
    salary_min: int | None = Field(None, ge=0)
    salary_max: int | None = Field(None, ge=0)
    skills: list[str] = Field(default_factory=list)
    status: JobStatus = JobStatus.ACTIVE

class JobUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    description: str | None = Field(None, min_length=1)
    requirements: str | None = Field(None, min_length=1)
    location: str | None = Field(None, min_length=1, max_length=512)
    job_type: JobType | None = None
    experience_level: ExperienceLevel | None = None
    salary_min: int | None = Field(None, ge=0)
    salary_max: int | None = Field(None, ge=0)
    skills: list[str] | None = None
    status: JobStatus | None = None

class JobOut(CamelModel):
    id: str
    company_id: str
    company: CompanyOut | None = None
    title: str
    description: str
    requirements: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel
    salary_min: int | None = None
    salary_max: int | None = None
    skills: list[str] = Field(default_factory=list)
    status: JobStatus
    created_at: datetime
    updated_at: datetime

class PagePagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

class JobPage(BaseModel):
    jobs: list[JobOut]
    pagination: PagePagination


# Applications

class ApplicationCreate(CamelModel):
    job_id: str
    cover_letter: str | None = None

class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus

class ApplicationOut(CamelModel):
    id: str
    job_id: str
    user_id: str
    cover_letter: str | None = None
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

class MyApplicationOut(ApplicationOut):
    job: JobOut | None = None

class ApplicantOut(CamelModel):
    id: str
    email: EmailStr
    display_name: str
    role: UserRole
    created_at: datetime

class JobApplicationOut(ApplicationOut):
    applicant: ApplicantOut | None = None
    profile: ProfileOut | None = None


# Items

class ItemCreate(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    description: str | None = None
    status: ItemStatus = ItemStatus.DRAFT
    metadata: dict[str, Any] = Field(default_factory=dict)

class ItemUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    description: str | None = None
    status: ItemStatus | None = None
    metadata: dict[str, Any] | None = None

class ItemOut(CamelModel):
    id: str
    user_id: str
    title: str
    description: str | None = None
    status: ItemStatus
    # the ORM attribute is ``meta``; the wire name stays "metadata"
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata")
    )
    created_at: datetime
    updated_at: datetime

class OffsetPagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool

class ItemPage(BaseModel):
    success: bool = True
    data: list[ItemOut]
    pagination: OffsetPagination

class ItemStats(BaseModel):
    draft: int = 0
    active: int = 0
    archived: int = 0

class BulkStatusUpdate(CamelModel):
    ids: list[str] = Field(min_length=1)
    status: ItemStatus

class BulkDelete(CamelModel):
    ids: list[str] = Field(min_length=1)

class BulkResult(BaseModel):
    affected: int


# API keys

class ApiKeyCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    scopes: list[Literal["read", "write"]] = Field(default_factory=lambda: ["read"])
    expires_in_days: int | None = Field(None, ge=1, le=365)

class ApiKeyOut(CamelModel):
    id: str
    name: str
    key_preview: str
    scopes: list[str]
    last_used: datetime | None = None
    request_count: int = 0
    is_active: bool
    expires_at: datetime | None = None
    created_at: datetime

class ApiKeyCreated(ApiKeyOut):
    key: str


# Operational

class ClientErrorReport(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    message: str = Field(max_length=10000)
    url: HttpUrl
    timestamp: str | None = None
    stack: str | None = Field(None, max_length=50000)
    component_stack: str | None = Field(None, max_length=50000)
    error_boundary: str | None = Field(None, max_length=500)
    source: str | None = Field(None, max_length=500)
    lineno: int | None = None
    colno: int | None = None
