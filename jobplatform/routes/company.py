# ========================================
# jobplatform/routes/company.py - COMPANY RECORDS & LOGOS
# ========================================

from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pymongo import ReturnDocument

from jobplatform.database import get_db
from jobplatform.schemas.company import CompanyCreate
from jobplatform.utils.auth import require_employer
from jobplatform.utils.identifiers import serialize_doc
from jobplatform.utils.storage import IMAGE_TYPES, save_upload

router = APIRouter(prefix="/api/company", tags=["Companies"])


# ✅ 1. CREATE COMPANY
@router.post("", status_code=201)
async def create_company(
    company: CompanyCreate,
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    """Create a company and link it to an employer that has none yet."""

    if current_user.get("companyId"):
        raise HTTPException(status_code=400, detail="Employer is already linked to a company")

    if await db.companies.find_one({"companyId": company.company_id}):
        raise HTTPException(status_code=400, detail="Company ID already exists")

    doc = {
        "companyId": company.company_id,
        "companyName": company.company_name.strip(),
        "address": company.address or "",
        "industry": company.industry or "",
        "website": company.website or "",
        "logo": "",
        "createdAt": datetime.utcnow(),
    }
    result = await db.companies.insert_one(doc)
    doc["_id"] = result.inserted_id

    await db.users.update_one(
        {"_id": current_user["_id"]},
        {"$set": {"companyId": doc["companyId"], "companyName": doc["companyName"]}},
    )

    return {"message": "Company created successfully", "company": serialize_doc(doc)}


# ✅ 2. VERIFY COMPANY ID (public, used by the registration form)
@router.get("/verify/{company_id}")
async def verify_company(company_id: str, db=Depends(get_db)):
    company = await db.companies.find_one({"companyId": company_id})
    return {"valid": company is not None, "company": serialize_doc(company)}


# ✅ 3. UPLOAD LOGO
@router.post("/upload-logo/{company_id}")
async def upload_logo(
    company_id: str,
    logo: UploadFile = File(None),
    current_user: dict = Depends(require_employer),
    db=Depends(get_db),
):
    company = await db.companies.find_one({"companyId": company_id})
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    if str(current_user.get("companyId")) != company_id:
        raise HTTPException(status_code=403, detail="You can only change your own company's logo")

    logo_path = await save_upload(logo, IMAGE_TYPES)

    updated = await db.companies.find_one_and_update(
        {"companyId": company_id},
        {"$set": {"logo": logo_path, "updatedAt": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )

    return {
        "success": True,
        "message": "Logo uploaded successfully",
        "logoUrl": logo_path,
        "company": serialize_doc(updated),
    }
