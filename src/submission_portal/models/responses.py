"""
Response envelopes returned by the portal API and the upload backend.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from submission_portal.models.submission import IssueStatus, Submission


class SubmissionRecord(BaseModel):
    """Stored record wrapping a submission document."""
    submission: Submission

    model_config = ConfigDict(extra="ignore")


class SubmissionListResponse(BaseModel):
    """Response of ``GET submissions/get-by-user``; records are oldest first."""
    success: bool = False
    data: List[SubmissionRecord] = Field(default_factory=list)


class Issue(BaseModel):
    """A publication cycle."""
    status: str
    title: str

    model_config = ConfigDict(extra="ignore")

    @property
    def is_current(self) -> bool:
        return self.status == IssueStatus.CURRENT


class IssueListResponse(BaseModel):
    """Response of ``GET issues/get``."""
    data: List[Issue] = Field(default_factory=list)


class UploadResult(BaseModel):
    """Storage id and preview URL of one uploaded file."""
    id: str  # noqa: A003
    image_url: str = Field(alias="imageUrl")
    token: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UploadResultsResponse(BaseModel):
    """Response of the upload-results read, in upload order."""
    body: List[UploadResult] = Field(default_factory=list)
