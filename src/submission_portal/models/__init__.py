"""Data models for submissions and portal API payloads."""

from submission_portal.models.submission import (
    IssueStatus,
    MediaReference,
    Submission,
    SubmissionStatus,
)
from submission_portal.models.responses import (
    Issue,
    IssueListResponse,
    SubmissionListResponse,
    SubmissionRecord,
    UploadResult,
    UploadResultsResponse,
)

__all__ = [
    "Issue",
    "IssueListResponse",
    "IssueStatus",
    "MediaReference",
    "Submission",
    "SubmissionListResponse",
    "SubmissionRecord",
    "SubmissionStatus",
    "UploadResult",
    "UploadResultsResponse",
]
