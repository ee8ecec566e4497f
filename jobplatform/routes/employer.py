# ========================================
# jobplatform/routes/employer.py - EMPLOYER DASHBOARD
# ========================================

import io
import logging
import re
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from pymongo import ReturnDocument

from jobplatform.database import get_db
from jobplatform.schemas.application import (
    APPLICATION_STATUSES,
    REVIEW_STATUSES,
    ApplicationReviewUpdate,
    ApplicationStatusUpdate,
)
from jobplatform.schemas.company import CompanyUpdate
from jobplatform.schemas.job import JobCreate, JobUpdate, normalize_skills
from jobplatform.utils.auth import require_employer
from jobplatform.utils.export import collect_resume_files, create_zip_response_headers, export_resumes_to_zip
from jobplatform.utils.identifiers import serialize_doc
from jobplatform.utils.permissions import Requester
from jobplatform.utils.records import (
    applications_for_job,
    delete_job_cascade,
    employer_job_query,
    find_owned_application,
    find_owned_job,
    new_job_document,
    page_bounds,
    populate_applicants,
    update_application,
    verify_employer_company,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employer", tags=["Employer"])

SORTABLE_FIELDS = ("createdAt", "updatedAt", "title", "location", "type")


async def paged_jobs(db, query: dict, page: int, limit: int, sort_field="createdAt", sort_dir=-1) -> dict:
    total = await db.jobs.count_documents(query)
    jobs = await db.jobs.find(query).sort(sort_field, sort_dir).skip((page - 1) * limit).limit(limit).to_list(limit)
    return {"total": total, "page": page, "limit": limit, "jobs": serialize_doc(jobs)}


def text_match(q: str, fields) -> dict:
    regex = {"$regex": re.escape(q), "$options": "i"}
    return {"$or": [{field: regex} for field in fields]}

# ===========================
# JOB MANAGEMENT
# ===========================

# ✅ 1. GET MY JOBS (paginated, optional ?q=)
@router.get("/jobs")
async def get_employer_jobs(
    page: int = Query(1),
    limit: int = Query(10),
    q: Optional[str] = Query(None),
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    page, limit, _ = page_bounds(page, limit, 5, 50)
    query = employer_job_query(Requester.from_user(current_user))

    if q and q.strip():
        query = {"$and": [query, text_match(q.strip(), ["title", "company.name", "description"])]}

    return await paged_jobs(db, query, page, limit)


# ✅ 2. POST A JOB
@router.post("/jobs", status_code=201)
async def post_job(
    job: JobCreate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    company = await verify_employer_company(db, current_user, job.company_id)

    if not (job.title or "").strip() or not (job.description or "").strip():
        raise HTTPException(status_code=400, detail="title and description are required")

    job_doc = new_job_document(job, current_user, company)
    result = await db.jobs.insert_one(job_doc)
    job_doc["_id"] = result.inserted_id

    return {"message": "Job posted successfully", "job": serialize_doc(job_doc)}


# ✅ 3. SEARCH MY JOBS
@router.get("/jobs/search")
async def search_employer_jobs(
    q: Optional[str] = Query(""),
    page: int = Query(1),
    limit: int = Query(20),
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    page, limit, _ = page_bounds(page, limit, 5, 50)
    query = employer_job_query(Requester.from_user(current_user))

    q = (q or "").strip()
    if q:
        fields = ["title", "description", "location", "company.name", "skills"]
        query = {"$and": [query, text_match(q, fields)]}

    return await paged_jobs(db, query, page, limit)


# ✅ 4. FILTER MY JOBS BY TYPE / SKILL / LOCATION
@router.get("/jobs/filter")
async def filter_employer_jobs(
    job_type: Optional[str] = Query(None, alias="type"),
    skill: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(20),
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    page, limit, _ = page_bounds(page, limit, 5, 50)
    conditions = [employer_job_query(Requester.from_user(current_user))]

    if job_type and job_type.strip():
        conditions.append({"type": job_type.strip()})
    if skill and skill.strip():
        conditions.append({"skills": {"$in": [skill.strip()]}})
    if location and location.strip():
        conditions.append({"location": {"$regex": re.escape(location.strip()), "$options": "i"}})

    query = conditions[0] if len(conditions) == 1 else {"$and": conditions}
    return await paged_jobs(db, query, page, limit)


# ✅ 5. SORT MY JOBS
@router.get("/jobs/sort")
async def sort_employer_jobs(
    by: str = Query("createdAt"),
    direction: str = Query("desc", alias="dir"),
    page: int = Query(1),
    limit: int = Query(20),
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    if by not in SORTABLE_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort by {by}")

    page, limit, _ = page_bounds(page, limit, 5, 50)
    query = employer_job_query(Requester.from_user(current_user))
    sort_dir = 1 if direction == "asc" else -1

    return await paged_jobs(db, query, page, limit, by, sort_dir)


# ✅ 6. EDIT A JOB
@router.put("/jobs/{job_id}")
async def edit_job(
    job_id: str,
    job_update: JobUpdate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "edit")

    update_data = job_update.model_dump(exclude_unset=True)
    if "skills" in update_data:
        update_data["skills"] = normalize_skills(update_data["skills"])
    if "company_id" in update_data:
        update_data["companyId"] = update_data.pop("company_id")
    update_data["updatedAt"] = datetime.utcnow()

    updated = await db.jobs.find_one_and_update(
        {"_id": job["_id"]},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER,
    )

    return {"message": "Job updated", "job": serialize_doc(updated)}


# ✅ 7. DELETE A JOB (cascades to applications)
@router.delete("/jobs/{job_id}")
async def delete_job(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "delete")

    deleted = await delete_job_cascade(db, job)

    return {"message": "Job and related applications deleted", "applicationsDeleted": deleted}

# ===========================
# APPLICANT MANAGEMENT
# ===========================

# ✅ 8. APPLICATIONS FOR ONE OF MY JOBS
@router.get("/jobs/{job_id}/applications")
async def get_applications_for_job(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "view applications for")

    applications = await applications_for_job(db, job["_id"])
    populated = await populate_applicants(db, applications)

    return {"applications": serialize_doc(populated)}


# ✅ 9. UPDATE APPLICATION STATUS
@router.put("/applications/{app_id}/status")
async def update_application_status(
    app_id: str,
    status_update: ApplicationStatusUpdate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    new_status = (status_update.status or "").strip()
    if new_status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status value")

    requester = Requester.from_user(current_user)
    application, _ = await find_owned_application(db, app_id, requester, "update applications for")

    await update_application(db, application, {"status": new_status}, requester)

    return {"message": "Application status updated", "status": new_status}


# ✅ 10. UPDATE APPLICANT REVIEW STATUS
@router.put("/applications/{app_id}/review")
async def update_applicant_review_status(
    app_id: str,
    review_update: ApplicationReviewUpdate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    if review_update.review_status not in REVIEW_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid reviewStatus")

    requester = Requester.from_user(current_user)
    application, _ = await find_owned_application(db, app_id, requester, "review applications for")

    await update_application(db, application, {"reviewStatus": review_update.review_status}, requester)

    return {"message": "Applicant review status updated", "reviewStatus": review_update.review_status}


# ✅ 11. DOWNLOAD ALL RESUMES AS ZIP
@router.get("/jobs/{job_id}/download-resumes")
async def download_all_resumes_zip(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "download resumes for")

    applications = await applications_for_job(db, job["_id"])
    if not applications:
        raise HTTPException(status_code=404, detail="No applications found for this job")

    files = collect_resume_files(await populate_applicants(db, applications))
    if not files:
        raise HTTPException(status_code=404, detail="No local resume files found to zip")

    try:
        content = export_resumes_to_zip(files)
    except OSError as e:
        logger.exception("Could not build resume archive for job %s", job["_id"])
        raise HTTPException(status_code=500, detail=f"Error creating zip: {e}")

    company_name = (job.get("company") or {}).get("name") or "company"
    return StreamingResponse(
        io.BytesIO(content),
        media_type="application/zip",
        headers=create_zip_response_headers(f"{company_name}_resumes_{job['_id']}"),
    )

# ===========================
# COMPANY PROFILE
# ===========================

# ✅ 12. UPDATE MY COMPANY PROFILE
@router.put("/profile/update")
async def update_employer_profile(
    company_update: CompanyUpdate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    company_id = current_user.get("companyId")
    if not company_id:
        raise HTTPException(status_code=400, detail="Employer has no company linked")

    updates = company_update.model_dump(exclude_unset=True, by_alias=True)
    updates["updatedAt"] = datetime.utcnow()

    updated = await db.companies.find_one_and_update(
        {"companyId": company_id},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Company not found")

    return {"message": "Company profile updated", "company": serialize_doc(updated)}
