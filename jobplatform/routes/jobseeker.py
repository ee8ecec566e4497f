# ========================================
# jobplatform/routes/jobseeker.py - JOBSEEKER-ONLY PROFILE FEATURES
# ========================================

import re

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pymongo import ReturnDocument

from jobplatform.database import get_db
from jobplatform.schemas.user import MarksUpdate
from jobplatform.utils.auth import require_jobseeker
from jobplatform.utils.identifiers import reference_query, serialize_doc
from jobplatform.utils.permissions import find_job_by_reference
from jobplatform.utils.storage import DOCUMENT_TYPES, IMAGE_TYPES, save_upload

router = APIRouter(prefix="/api/jobseeker", tags=["Jobseeker"])

# Certificate types become a key under `certificates`, so no dots or `$`
CERTIFICATE_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


async def _set_user_fields(db, user_id, fields: dict) -> dict:
    return await db.users.find_one_and_update(
        {"_id": user_id},
        {"$set": fields},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )


# ✅ 1. GET MY APPLICATIONS
@router.get("/applications")
async def get_my_applications(
    current_user: dict = Depends(require_jobseeker),
    db=Depends(get_db),
):
    applications = await db.applications.find(
        {"applicant": reference_query(current_user["_id"])}
    ).sort("appliedAt", -1).to_list(1000)

    populated = []
    for app in applications:
        job = await find_job_by_reference(db, app.get("job"))
        populated.append({**app, "job": job})

    return {"applications": serialize_doc(populated)}


# ✅ 2. UPLOAD CERTIFICATE
@router.post("/upload-certificate")
async def upload_certificate(
    file: UploadFile = File(None),
    cert_type: str = Form("other", alias="type"),
    current_user: dict = Depends(require_jobseeker),
    db=Depends(get_db),
):
    cert_type = (cert_type or "other").strip() or "other"
    if not CERTIFICATE_TYPE_PATTERN.match(cert_type):
        raise HTTPException(status_code=400, detail="Invalid certificate type")

    url = await save_upload(file, DOCUMENT_TYPES)
    updated = await _set_user_fields(db, current_user["_id"], {f"certificates.{cert_type}": url})

    return {"message": "Certificate uploaded", "url": url, "user": serialize_doc(updated)}


# ✅ 3. UPDATE MARKS (10th, 12th, Degree)
@router.put("/marks")
async def update_marks(
    marks: MarksUpdate,
    current_user: dict = Depends(require_jobseeker),
    db=Depends(get_db),
):
    if marks.tenth is None and marks.twelfth is None and marks.degree is None:
        raise HTTPException(status_code=400, detail="Missing mark fields")

    updated = await _set_user_fields(db, current_user["_id"], {"marks": marks.model_dump()})

    return {"message": "Marks updated successfully", "user": serialize_doc(updated)}


# ✅ 4. UPLOAD PROFILE IMAGE
@router.post("/profile-image", status_code=201)
async def save_profile_image(
    profileImage: UploadFile = File(None),
    current_user: dict = Depends(require_jobseeker),
    db=Depends(get_db),
):
    url = await save_upload(profileImage, IMAGE_TYPES)
    updated = await _set_user_fields(db, current_user["_id"], {"profileImage": url})

    return {"success": True, "message": "Profile image updated", "url": url, "user": serialize_doc(updated)}
