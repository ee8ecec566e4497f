# ========================================
# jobplatform/routes/user.py - REGISTRATION, LOGIN, OWN PROFILE
# ========================================

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from jobplatform.database import get_db
from jobplatform.schemas.user import AuthResponse, UserCreate, UserLogin, UserProfileUpdate
from jobplatform.utils.auth import create_access_token, get_current_user
from jobplatform.utils.security import get_password_hash, verify_password
from jobplatform.utils.storage import IMAGE_TYPES, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def format_user(user: dict) -> dict:
    """Public view of a user document."""
    return {
        "id": str(user["_id"]) if user.get("_id") else None,
        "name": user.get("name") or "",
        "email": user.get("email") or "",
        "role": user.get("role") or "jobseeker",
        "profileImage": user.get("profileImage") or "",
        "bio": user.get("bio") or "",
        "companyId": user.get("companyId") or None,
        "companyName": user.get("companyName") or "",
        "createdAt": user.get("createdAt"),
        "marks": user.get("marks") or {},
        "certificates": user.get("certificates") or {},
    }


async def insert_account(db, new_user: dict, company: Optional[dict] = None):
    """Write the user and, for employers, their company; a failed user insert removes the company again."""
    if company is not None:
        try:
            await db.companies.insert_one(company)
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail="Company ID already exists")

    try:
        result = await db.users.insert_one(new_user)
    except DuplicateKeyError:
        if company is not None:
            await db.companies.delete_one({"_id": company["_id"]})
        logger.warning("Registration lost a race on email %s", new_user.get("email"))
        raise HTTPException(status_code=400, detail="Email already registered")

    return result.inserted_id

# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. REGISTER
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register_user(user: UserCreate, db=Depends(get_db)):
    """Register a jobseeker, or an employer together with their company."""

    email = user.email.lower()
    if await db.users.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Email already registered")

    company = None

    if user.role == "employer":
        if not user.company_id or not user.company_name:
            raise HTTPException(status_code=400, detail="companyId + companyName required for employers")

        if await db.companies.find_one({"companyId": user.company_id}):
            raise HTTPException(status_code=400, detail="Company ID already exists")

        company = {
            "companyId": user.company_id,
            "companyName": user.company_name,
            "address": user.address or "",
            "industry": user.industry or "",
            "website": user.website or "",
            "logo": "",
            "createdAt": datetime.utcnow(),
        }

    new_user = {
        "name": user.name,
        "email": email,
        "password": get_password_hash(user.password),
        "role": user.role,
        "companyId": company["companyId"] if company else None,
        "companyName": company["companyName"] if company else "",
        "profileImage": "",
        "certificates": {},
        "marks": {},
        "bio": "",
        "createdAt": datetime.utcnow(),
    }

    new_user["_id"] = await insert_account(db, new_user, company)
    logger.info("Registered %s %s", user.role, new_user["_id"])

    return {
        "message": "Registered Successfully",
        "token": create_access_token(new_user["_id"]),
        "user": format_user(new_user),
    }


# ✅ 2. LOGIN
@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db=Depends(get_db)):
    """Login and get a JWT. Employers must also confirm their company ID."""

    user = await db.users.find_one({"email": credentials.email.lower()})
    if not user or not verify_password(credentials.password, user.get("password")):
        raise HTTPException(status_code=400, detail="Invalid email or password")

    if user.get("role") == "employer":
        if not credentials.company_id:
            raise HTTPException(status_code=400, detail="Company ID is required for employer login")

        if credentials.company_id != user.get("companyId"):
            raise HTTPException(status_code=400, detail="Incorrect Company ID")

        if not await db.companies.find_one({"companyId": credentials.company_id}):
            raise HTTPException(status_code=400, detail="Company profile does not exist")

    return {
        "message": "Login Successful",
        "token": create_access_token(user["_id"]),
        "user": format_user(user),
    }

# ===========================
# AUTHENTICATED USER ENDPOINTS
# ===========================

# ✅ 3. GET MY PROFILE
@router.get("/profile")
async def get_profile(current_user: dict = Depends(get_current_user)):
    return {"user": format_user(current_user)}


# ✅ 4. UPDATE MY PROFILE
@router.put("/profile")
async def update_profile(
    profile_data: UserProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    updates = profile_data.model_dump(exclude_unset=True)
    if not updates:
        return {"message": "No changes provided", "user": format_user(current_user)}

    updated = await db.users.find_one_and_update(
        {"_id": current_user["_id"]},
        {"$set": updates},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    return {"message": "Profile updated successfully", "user": format_user(updated)}


# ✅ 5. UPLOAD PROFILE IMAGE
@router.post("/profile/image")
async def upload_profile_image(
    profileImage: UploadFile = File(None),
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    image_path = await save_upload(profileImage, IMAGE_TYPES, max_mb=2)

    updated = await db.users.find_one_and_update(
        {"_id": current_user["_id"]},
        {"$set": {"profileImage": image_path}},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    return {"message": "Profile image updated", "user": format_user(updated)}
