# ========================================
# jobplatform/routes/job.py - PUBLIC JOB BOARD + BASIC EMPLOYER ACTIONS
# ========================================

import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from jobplatform.database import get_db
from jobplatform.schemas.job import JobCreate
from jobplatform.utils.auth import require_employer
from jobplatform.utils.identifiers import parse_object_id, serialize_doc
from jobplatform.utils.permissions import Requester, find_job_by_reference
from jobplatform.utils.records import (
    delete_job_cascade,
    find_owned_job,
    new_job_document,
    page_bounds,
    verify_employer_company,
)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. GET ALL JOBS (newest first)
@router.get("")
async def get_all_jobs(
    page: int = Query(1),
    limit: int = Query(50),
    db=Depends(get_db),
):
    page, limit, skip = page_bounds(page, limit, 1, 100)
    jobs = await db.jobs.find().sort("createdAt", -1).skip(skip).limit(limit).to_list(limit)
    return serialize_doc(jobs)


# ✅ 2. SEARCH JOBS BY TITLE, LOCATION OR SKILLS
@router.get("/search")
async def search_jobs(
    title: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    skills: Optional[str] = Query(None, description="Comma-separated skills, any match"),
    db=Depends(get_db),
):
    query = {}
    if title:
        query["title"] = {"$regex": re.escape(title.strip()), "$options": "i"}
    if location:
        query["location"] = {"$regex": re.escape(location.strip()), "$options": "i"}
    if skills:
        skill_list = [s.strip() for s in skills.split(",") if s.strip()]
        if skill_list:
            query["skills"] = {"$in": skill_list}

    jobs = await db.jobs.find(query).sort("createdAt", -1).to_list(500)
    return serialize_doc(jobs)


# ✅ 3. GET SINGLE JOB
@router.get("/{job_id}")
async def get_job_by_id(job_id: str, db=Depends(get_db)):
    oid = parse_object_id(job_id, "job")

    job = await find_job_by_reference(db, oid)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return serialize_doc(job)

# ===========================
# EMPLOYER ENDPOINTS
# ===========================

# ✅ 4. POST A JOB
@router.post("", status_code=201)
async def create_job(
    job: JobCreate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    """Create a job posting for the employer's company."""

    company = await verify_employer_company(db, current_user)

    if not (job.title or "").strip() or not (job.description or "").strip() or not (job.location or "").strip():
        raise HTTPException(status_code=400, detail="Missing required fields")

    job_doc = new_job_document(job, current_user, company)
    result = await db.jobs.insert_one(job_doc)

    return {"message": "Job posted successfully", "jobId": str(result.inserted_id)}


# ✅ 5. DELETE JOB (cascades to its applications)
@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "delete")

    deleted = await delete_job_cascade(db, job)

    return {"message": "Job and related applications deleted", "applicationsDeleted": deleted}
