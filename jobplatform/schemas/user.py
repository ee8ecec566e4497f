from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, Literal, Dict, Any
from datetime import datetime

# 1. For Registration (Input)
class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Literal["jobseeker", "employer"]

    # Employer only: the company is created together with the account
    company_id: Optional[str] = Field(None, alias="companyId")
    company_name: Optional[str] = Field(None, alias="companyName")
    address: Optional[str] = ""
    industry: Optional[str] = ""
    website: Optional[str] = ""

# 2. For Login (Input)
class UserLogin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str
    company_id: Optional[str] = Field(None, alias="companyId")

# 3. For Responses (Output)
class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = ""
    email: str = ""
    role: str = "jobseeker"
    profile_image: str = Field("", alias="profileImage")
    bio: str = ""
    company_id: Optional[str] = Field(None, alias="companyId")
    company_name: str = Field("", alias="companyName")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    marks: Dict[str, Any] = {}
    certificates: Dict[str, Any] = {}

class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse

# 4. For Updating Profile (Input)
class UserProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None

# 5. Jobseeker marks
class MarksUpdate(BaseModel):
    tenth: Optional[Any] = None
    twelfth: Optional[Any] = None
    degree: Optional[Any] = None
