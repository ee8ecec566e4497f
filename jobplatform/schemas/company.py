from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# 1. Input: Create a company explicitly
class CompanyCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_id: str = Field(..., alias="companyId", min_length=1, pattern=r"^[A-Za-z0-9_\-]+$")
    company_name: str = Field(..., alias="companyName", min_length=1)
    address: Optional[str] = ""
    industry: Optional[str] = ""
    website: Optional[str] = ""

# 2. Input: Employer updates their company profile
class CompanyUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: Optional[str] = Field(None, alias="companyName")
    address: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    description: Optional[str] = None
    size: Optional[str] = None
