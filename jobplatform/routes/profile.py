# ========================================
# jobplatform/routes/profile.py - PROFILE FORM (MULTIPART)
# ========================================

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pymongo import ReturnDocument

from jobplatform.database import get_db
from jobplatform.utils.auth import get_current_user
from jobplatform.utils.identifiers import serialize_doc
from jobplatform.utils.storage import IMAGE_TYPES, save_upload

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("")
async def get_profile(current_user: dict = Depends(get_current_user)):
    return {"user": serialize_doc(current_user)}


@router.put("")
async def update_profile(
    name: str = Form(None),
    bio: str = Form(None),
    profileImage: UploadFile = File(None),
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Update name, bio and (optionally) the profile picture in one request."""

    update = {}
    if name and name.strip():
        update["name"] = name.strip()
    if bio is not None:
        update["bio"] = bio.strip()
    if profileImage is not None and profileImage.filename:
        update["profileImage"] = await save_upload(profileImage, IMAGE_TYPES)

    if not update:
        return {"message": "No changes provided", "user": serialize_doc(current_user)}

    updated = await db.users.find_one_and_update(
        {"_id": current_user["_id"]},
        {"$set": update},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )

    return {"message": "Profile updated successfully", "user": serialize_doc(updated)}
