"""
Pydantic models for a user's submission and its media references.

Field names are snake_case in Python and camelCase on the wire, matching
the documents stored by the portal API.
"""

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SubmissionStatus(str, Enum):
    """Known review states. The API may return others; status stays a plain string."""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class IssueStatus(str, Enum):
    """Known issue states. Only CURRENT has meaning to the portal."""
    CURRENT = "Current"
    PAST = "Past"


class MediaReference(BaseModel):
    """
    One uploaded asset.

    ``image_url`` and ``content_storage_url`` are unset until the upload
    backend has stored the file, and are always bound together.
    """
    type: str = ""  # noqa: A003
    description: str = ""
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    content_storage_url: Optional[str] = Field(
        default=None,
        alias="contentStorageUrl",
        # Older documents used the Drive-specific name.
        validation_alias=AliasChoices("contentStorageUrl", "contentDriveUrl"),
    )
    # Client-generated key echoed back by the upload backend. Never stored.
    upload_token: Optional[str] = Field(default=None, alias="uploadToken", exclude=True)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_uploaded(self) -> bool:
        return self.image_url is not None and self.content_storage_url is not None


class Submission(BaseModel):
    """A piece of work submitted by a user for a publication issue."""
    id: Optional[str] = Field(  # noqa: A003
        default=None,
        validation_alias=AliasChoices("id", "_id"),
    )
    title: str = ""
    author: str = ""
    issue: str = ""
    status: str = SubmissionStatus.PENDING.value
    main_submission: MediaReference = Field(alias="mainSubmission")
    additional_references: List[MediaReference] = Field(
        default_factory=list,
        alias="additionalReferences",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("additional_references", mode="before")
    @classmethod
    def _null_references_as_empty(cls, value):
        # Older documents store null when no references were attached.
        return [] if value is None else value

    def media_references(self) -> List[MediaReference]:
        """Main submission first, then additional references in order."""
        return [self.main_submission, *self.additional_references]

    def to_payload(self) -> dict:
        """Serialize to the camelCase document shape the portal API stores."""
        return self.model_dump(by_alias=True, exclude_none=True)
