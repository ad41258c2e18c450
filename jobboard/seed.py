"""
Demo data for a fresh database.

Creates two job seekers with profiles, two recruiters with companies, four
open jobs and two applications. Every demo account uses the password
``password123``. Run with ``python -m jobboard.seed``.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from . import crud
from .models import ApplicationStatus, ExperienceLevel, JobType, UserRole

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

JOB_SEEKERS = [
    {
        "email": "john.doe@example.com",
        "display_name": "John Doe",
        "profile": {
            "phone": "+1234567890",
            "location": "San Francisco, CA",
            "bio": "Full-stack developer with 5 years of experience",
            "skills": ["JavaScript", "TypeScript", "React", "Node.js", "Python"],
            "experience": [
                {
                    "company": "Tech Solutions",
                    "title": "Senior Developer",
                    "start_date": "2020-01",
                    "description": "Led development of web applications",
                }
            ],
            "education": [
                {
                    "school": "University of California",
                    "degree": "Bachelor",
                    "field": "Computer Science",
                    "start_date": "2014-09",
                    "end_date": "2018-06",
                }
            ],
        },
    },
    {
        "email": "jane.smith@example.com",
        "display_name": "Jane Smith",
        "profile": {
            "phone": "+1987654321",
            "location": "New York, NY",
            "bio": "UX/UI Designer passionate about creating intuitive experiences",
            "skills": ["Figma", "Adobe XD", "UI/UX Design", "Prototyping", "User Research"],
            "experience": [
                {
                    "company": "Design Studio",
                    "title": "UI Designer",
                    "start_date": "2019-06",
                    "description": "Designed user interfaces for mobile apps",
                }
            ],
            "education": [
                {
                    "school": "Parsons School of Design",
                    "degree": "Bachelor",
                    "field": "Design",
                    "start_date": "2015-09",
                    "end_date": "2019-05",
                }
            ],
        },
    },
]

RECRUITERS = [
    {
        "email": "recruiter@techcorp.com",
        "display_name": "Tech Corp Recruiter",
        "company": {
            "name": "Tech Corp",
            "description": "Leading technology company specializing in cloud solutions",
            "industry": "Technology",
            "location": "San Francisco, CA",
            "website": "https://techcorp.example.com",
            "size": "1000-5000",
        },
        "jobs": [
            {
                "title": "Senior Full-Stack Developer",
                "description": "We are looking for an experienced full-stack developer to join our team "
                "and work on cutting-edge cloud applications.",
                "requirements": "5+ years of experience with React, Node.js, and cloud technologies. "
                "Strong problem-solving skills.",
                "location": "San Francisco, CA",
                "job_type": JobType.FULL_TIME,
                "experience_level": ExperienceLevel.SENIOR,
                "salary_min": 120000,
                "salary_max": 180000,
                "skills": ["React", "Node.js", "TypeScript", "AWS", "Docker"],
            },
            {
                "title": "Frontend Developer",
                "description": "Join our frontend team to build beautiful and responsive user interfaces.",
                "requirements": "3+ years of React experience, strong CSS skills, attention to detail.",
                "location": "Remote",
                "job_type": JobType.FULL_TIME,
                "experience_level": ExperienceLevel.MID,
                "salary_min": 90000,
                "salary_max": 130000,
                "skills": ["React", "TypeScript", "CSS", "Tailwind"],
            },
        ],
    },
    {
        "email": "hr@startupinc.com",
        "display_name": "Startup Inc HR",
        "company": {
            "name": "Startup Inc",
            "description": "Fast-growing startup revolutionizing e-commerce",
            "industry": "E-commerce",
            "location": "Austin, TX",
            "website": "https://startupinc.example.com",
            "size": "50-200",
        },
        "jobs": [
            {
                "title": "UX/UI Designer",
                "description": "Design delightful user experiences for our e-commerce platform.",
                "requirements": "2+ years of UI/UX design experience, proficiency in Figma, portfolio required.",
                "location": "Austin, TX",
                "job_type": JobType.FULL_TIME,
                "experience_level": ExperienceLevel.MID,
                "salary_min": 70000,
                "salary_max": 100000,
                "skills": ["Figma", "UI/UX Design", "Prototyping", "User Research"],
            },
            {
                "title": "Marketing Intern",
                "description": "Learn digital marketing in a fast-paced startup environment.",
                "requirements": "Currently pursuing marketing degree, social media savvy, creative mindset.",
                "location": "Austin, TX",
                "job_type": JobType.INTERNSHIP,
                "experience_level": ExperienceLevel.ENTRY,
                "salary_min": 30000,
                "salary_max": 40000,
                "skills": ["Social Media", "Content Creation", "Analytics"],
            },
        ],
    },
]

# (applicant email, job title, cover letter, status)
APPLICATIONS = [
    (
        "john.doe@example.com",
        "Senior Full-Stack Developer",
        "I am excited to apply for this position. My experience with React and Node.js makes me a great fit.",
        ApplicationStatus.PENDING,
    ),
    (
        "jane.smith@example.com",
        "UX/UI Designer",
        "I would love to contribute my design skills to your team.",
        ApplicationStatus.ACCEPTED,
    ),
]


def seed_database(db: Session) -> bool:
    """Insert the demo rows. Returns False when they are already there."""
    if crud.get_user_by_email(db, RECRUITERS[0]["email"]):
        logger.info("database already seeded, skipping")
        return False

    seekers = {}
    for entry in JOB_SEEKERS:
        user = crud.create_user(
            db, entry["email"], DEMO_PASSWORD, display_name=entry["display_name"], role=UserRole.JOB_SEEKER
        )
        crud.create_profile(db, user.id, entry["profile"])
        seekers[user.email] = user

    jobs = {}
    for entry in RECRUITERS:
        user = crud.create_user(
            db, entry["email"], DEMO_PASSWORD, display_name=entry["display_name"], role=UserRole.RECRUITER
        )
        company = crud.create_company(db, user.id, entry["company"])
        for job_data in entry["jobs"]:
            job = crud.create_job(db, company, dict(job_data))
            jobs[job.title] = job

    for email, title, cover_letter, status in APPLICATIONS:
        application = crud.create_application(db, jobs[title].id, seekers[email].id, cover_letter)
        if status is not ApplicationStatus.PENDING:
            crud.update_application_status(db, application, status)

    logger.info(
        "seeded %d users, %d jobs, %d applications",
        len(JOB_SEEKERS) + len(RECRUITERS),
        len(jobs),
        len(APPLICATIONS),
    )
    return True


def main() -> None:
    from .database import Base, SessionLocal, engine

    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
    except Exception:
        db.rollback()
        logger.exception("seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
