"""
Ownership policy for jobs and applications.

A job belongs to an employer through either of two independent claims:

* the job's ``companyId`` equals the employer's ``companyId`` (both set), or
* the job's ``postedBy`` equals the employer's user id.

Older jobs only carry ``postedBy``; newer ones carry ``companyId`` as well.
Both claims are honoured so neither generation of records is orphaned.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from bson import ObjectId
from fastapi import HTTPException

from jobplatform.utils.identifiers import to_object_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requester:
    user_id: str
    role: str
    company_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: dict) -> "Requester":
        company_id = user.get("companyId")
        return cls(
            user_id=str(user["_id"]),
            role=user.get("role", ""),
            company_id=str(company_id) if company_id else None,
        )


def can_manage_job(requester: Requester, job: dict) -> bool:
    job_company = job.get("companyId")
    if job_company and requester.company_id and str(job_company) == requester.company_id:
        return True

    posted_by = job.get("postedBy")
    return posted_by is not None and str(posted_by) == requester.user_id


def ensure_job_owner(requester: Requester, job: dict, action: str = "manage"):
    if not can_manage_job(requester, job):
        logger.debug(
            "Denied %s on job %s for user %s (company %s)",
            action, job.get("_id"), requester.user_id, requester.company_id,
        )
        raise HTTPException(status_code=403, detail=f"Unauthorized to {action} this job")


async def find_job_by_reference(db, reference: Any) -> Optional[dict]:
    """Look a job up by a stored reference, retrying with the opposite id type."""
    if reference is None:
        return None

    oid = to_object_id(reference)
    if oid is not None:
        job = await db.jobs.find_one({"_id": oid})
        if job:
            return job

    # Retry with the other representation of the same reference
    if isinstance(reference, ObjectId):
        return await db.jobs.find_one({"_id": str(reference)})
    return await db.jobs.find_one({"_id": reference})


async def resolve_parent_job(db, application: dict) -> dict:
    job = await find_job_by_reference(db, application.get("job"))
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job
