# ========================================
# jobplatform/routes/upload.py - PLAIN FILE UPLOADS
# ========================================

from fastapi import APIRouter, Depends, File, UploadFile

from jobplatform.utils.auth import get_current_user
from jobplatform.utils.storage import DOCUMENT_TYPES, IMAGE_TYPES, RESUME_TYPES, save_upload

router = APIRouter(prefix="/api/upload", tags=["Uploads"])

# These only store the file; the returned url is attached to a record by a later call


@router.post("/profile", status_code=201)
async def upload_profile(
    profileImage: UploadFile = File(None),
    current_user: dict = Depends(get_current_user),
):
    url = await save_upload(profileImage, IMAGE_TYPES)
    return {"success": True, "message": "Profile image uploaded", "url": url}


@router.post("/certificate", status_code=201)
async def upload_certificate(
    file: UploadFile = File(None),
    current_user: dict = Depends(get_current_user),
):
    url = await save_upload(file, DOCUMENT_TYPES)
    return {"success": True, "message": "Certificate uploaded", "url": url}


@router.post("/resume", status_code=201)
async def upload_resume(
    resume: UploadFile = File(None),
    current_user: dict = Depends(get_current_user),
):
    url = await save_upload(resume, RESUME_TYPES)
    return {"success": True, "message": "Resume uploaded", "url": url}
