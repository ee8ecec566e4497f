# ========================================
# jobplatform/routes/application.py - APPLY, LIST, STATUS
# ========================================

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from jobplatform.database import get_db
from jobplatform.schemas.application import APPLICATION_STATUSES, ApplicationCreate, ApplicationStatusUpdate
from jobplatform.utils.auth import get_current_user, require_employer, require_jobseeker
from jobplatform.utils.identifiers import parse_object_id, reference_query, reference_variants, serialize_doc
from jobplatform.utils.permissions import Requester, find_job_by_reference
from jobplatform.utils.records import (
    applications_for_job,
    employer_job_query,
    find_owned_application,
    find_owned_job,
    populate_applicants,
    update_application,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["Applications"])

# ===========================
# JOBSEEKER ENDPOINTS
# ===========================

# ✅ 1. GET MY APPLICATIONS
@router.get("/my")
async def get_user_applications(
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Applications submitted by the current user, each with its job."""

    applications = await db.applications.find(
        {"applicant": reference_query(current_user["_id"])}
    ).sort("appliedAt", -1).to_list(1000)

    result = []
    for app in applications:
        job = await find_job_by_reference(db, app.get("job"))
        result.append({**app, "jobDetails": job})

    return serialize_doc(result)


# ✅ 2. APPLY FOR A JOB
@router.post("/{job_id}", status_code=201)
async def apply_to_job(
    job_id: str,
    application: ApplicationCreate,
    current_user: dict = Depends(require_jobseeker),
    db=Depends(get_db),
):
    oid = parse_object_id(job_id, "job")

    resume_url = (application.resume_url or "").strip()
    if not resume_url:
        raise HTTPException(status_code=400, detail="Resume URL is required")

    job = await find_job_by_reference(db, oid)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    existing = await db.applications.find_one({
        "job": reference_query(oid),
        "applicant": reference_query(current_user["_id"]),
    })
    if existing:
        raise HTTPException(status_code=400, detail="You have already applied to this job")

    # Canonical storage form: both references as ObjectId
    new_application = {
        "job": oid,
        "applicant": current_user["_id"],
        "resumeUrl": resume_url,
        "appliedAt": datetime.utcnow(),
        "status": "pending",
    }

    result = await db.applications.insert_one(new_application)
    logger.info("User %s applied to job %s", current_user["_id"], oid)

    return {"message": "Application submitted successfully", "applicationId": str(result.inserted_id)}

# ===========================
# EMPLOYER ENDPOINTS
# ===========================

# ✅ 3. APPLICANTS FOR A JOB
@router.get("/job/{job_id}")
async def get_job_applications(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "view applications for")

    applications = await applications_for_job(db, job["_id"])
    populated = await populate_applicants(db, applications)

    # Older clients read the applicant inline
    return serialize_doc([{**app, "applicant": app["applicantDetails"]} for app in populated])


# ✅ 4. APPLICATION COUNT FOR A JOB
@router.get("/job/{job_id}/count")
async def get_job_application_count(
    job_id: str,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    requester = Requester.from_user(current_user)
    job = await find_owned_job(db, job_id, requester, "view applications for")

    count = await db.applications.count_documents({"job": reference_query(job["_id"])})
    return {"count": count}


# ✅ 5. UPDATE APPLICATION STATUS
@router.put("/status/{app_id}")
async def update_application_status(
    app_id: str,
    status_update: ApplicationStatusUpdate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    parse_object_id(app_id, "application")

    new_status = (status_update.status or "").strip()
    if new_status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    requester = Requester.from_user(current_user)
    application, _ = await find_owned_application(db, app_id, requester, "update applications for")

    await update_application(db, application, {"status": new_status}, requester)

    return {"message": "Application status updated", "status": new_status}


# ✅ 6. JOBS I POSTED
@router.get("/employer/jobs")
async def get_employer_posted_jobs(
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    query = employer_job_query(Requester.from_user(current_user))
    jobs = await db.jobs.find(query).sort("createdAt", -1).to_list(1000)
    return serialize_doc(jobs)


# ✅ 7. ALL APPLICATIONS ACROSS MY JOBS
@router.get("/employer/all")
async def get_employer_applications(
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    query = employer_job_query(Requester.from_user(current_user))
    jobs = await db.jobs.find(query, {"_id": 1}).to_list(1000)

    job_refs = [variant for job in jobs for variant in reference_variants(job["_id"])]
    if not job_refs:
        return []

    applications = await db.applications.find(
        {"job": {"$in": job_refs}}
    ).sort("appliedAt", -1).to_list(1000)

    return serialize_doc(applications)
