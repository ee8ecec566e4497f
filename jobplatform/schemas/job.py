from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

# Skills arrive either as a list or as "a, b, c"
SkillsInput = Union[List[str], str, None]


class CompanySnapshot(BaseModel):
    name: str = ""
    logo: str = ""

# 1. Input: What the Employer sends
class JobCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = ""
    location: Optional[str] = ""
    skills: SkillsInput = None
    type: Optional[str] = None
    company_id: Optional[str] = Field(None, alias="companyId")

# 2. Input: Update existing job (whitelisted fields only)
class JobUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    skills: SkillsInput = None
    type: Optional[str] = None
    company: Optional[CompanySnapshot] = None
    company_id: Optional[str] = Field(None, alias="companyId")


def normalize_skills(skills: SkillsInput) -> List[str]:
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip() for s in skills if isinstance(s, str) and s.strip()]
