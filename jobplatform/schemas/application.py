from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

APPLICATION_STATUSES = ("pending", "accepted", "rejected")
REVIEW_STATUSES = ("shortlisted", "under_review", "rejected_review", "none")

# 1. Input: Apply to a job
class ApplicationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_url: Optional[str] = Field(None, alias="resumeUrl")

# 2. Input: Update status (validated against APPLICATION_STATUSES in the route)
class ApplicationStatusUpdate(BaseModel):
    status: Optional[str] = ""

# 3. Input: Update secondary review label
class ApplicationReviewUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    review_status: Optional[str] = Field(None, alias="reviewStatus")
