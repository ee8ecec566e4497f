"""
Lookups and writes shared by the job, employer and application routes.

Every helper takes the database handle explicitly; routes receive it through
``Depends(get_db)``.
"""

import logging
from datetime import datetime
from typing import List

from fastapi import HTTPException

from jobplatform import config
from jobplatform.schemas.job import normalize_skills
from jobplatform.utils.identifiers import parse_object_id, reference_query, to_object_id
from jobplatform.utils.permissions import Requester, ensure_job_owner, find_job_by_reference, resolve_parent_job

logger = logging.getLogger(__name__)


def employer_job_query(requester: Requester) -> dict:
    """Jobs an employer owns, matched on either ownership claim."""
    posted_by = {"postedBy": reference_query(requester.user_id)}
    if requester.company_id:
        return {"$or": [{"companyId": requester.company_id}, posted_by]}
    return posted_by


async def find_owned_job(db, job_id: str, requester: Requester, action: str = "manage") -> dict:
    oid = parse_object_id(job_id, "job")
    job = await find_job_by_reference(db, oid)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_job_owner(requester, job, action)
    return job


async def find_owned_application(db, app_id: str, requester: Requester, action: str = "manage"):
    """Load an application plus its parent job, enforcing job ownership."""
    oid = parse_object_id(app_id, "application")
    application = await db.applications.find_one({"_id": oid})
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    job = await resolve_parent_job(db, application)
    ensure_job_owner(requester, job, action)
    return application, job


async def delete_job_cascade(db, job: dict) -> int:
    """Delete a job and every application pointing at it, whatever the reference type."""
    await db.jobs.delete_one({"_id": job["_id"]})
    result = await db.applications.delete_many({"job": reference_query(job["_id"])})
    logger.info("Deleted job %s and %d applications", job["_id"], result.deleted_count)
    return result.deleted_count


async def applications_for_job(db, job_id) -> List[dict]:
    return await db.applications.find(
        {"job": reference_query(job_id)}
    ).sort("appliedAt", -1).to_list(1000)


async def populate_applicants(db, applications: List[dict]) -> List[dict]:
    """Attach ``applicantDetails`` (user without password) to each application."""
    populated = []
    for app in applications:
        details = None
        applicant_id = to_object_id(app.get("applicant"))
        if applicant_id is not None:
            details = await db.users.find_one({"_id": applicant_id}, {"password": 0})
        populated.append({**app, "applicantDetails": details})
    return populated


async def update_application(db, application: dict, changes: dict, requester: Requester):
    changes = {**changes, "updatedAt": datetime.utcnow(), "updatedBy": requester.user_id}
    await db.applications.update_one({"_id": application["_id"]}, {"$set": changes})


async def verify_employer_company(db, current_user: dict, provided_company_id=None) -> dict:
    """The employer's company record; the caller may not post for another company."""
    company_id = current_user.get("companyId")
    if not company_id:
        raise HTTPException(status_code=400, detail="Employer account not linked to a company")

    if provided_company_id and str(provided_company_id) != str(company_id):
        raise HTTPException(status_code=400, detail="Provided companyId does not match logged-in employer")

    company = await db.companies.find_one({"companyId": company_id})
    if not company:
        raise HTTPException(status_code=400, detail="Company record not found for this employer")
    return company


def new_job_document(job, current_user: dict, company: dict) -> dict:
    """Build a job with the company snapshot taken at creation time."""
    now = datetime.utcnow()
    return {
        "title": (job.title or "").strip(),
        "description": (job.description or "").strip(),
        "requirements": (job.requirements or "").strip(),
        "location": (job.location or "").strip(),
        "skills": normalize_skills(job.skills),
        "type": (job.type or "Full-time").strip(),
        "companyId": str(current_user["companyId"]),
        "company": {
            "name": company.get("companyName") or current_user.get("companyName") or "",
            "logo": company.get("logo") or current_user.get("companyLogo") or config.DEFAULT_COMPANY_LOGO,
        },
        "postedBy": str(current_user["_id"]),
        "createdAt": now,
        "updatedAt": now,
    }


def page_bounds(page: int, limit: int, min_limit: int, max_limit: int):
    """Clamp ``page``/``limit`` query values instead of rejecting them."""
    page = max(1, page or 1)
    limit = min(max_limit, max(min_limit, limit or min_limit))
    return page, limit, (page - 1) * limit
