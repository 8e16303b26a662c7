"""
Immutable view state of the "My Work" page.

A ViewState is never modified in place; the reducer produces a new one for
every action.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from submission_portal.models import Submission


class FilterType(str, Enum):
    """How the submission list is filtered."""
    NONE = "None"
    APPROVED = "Approved"
    CURRENT = "Current"


class View(str, Enum):
    """Top-level mode of the page."""
    HOMEPAGE = "Homepage"
    SUBMISSION = "Submission"


class ViewState(BaseModel):
    """Session-scoped UI state, rebuilt from the API on every load."""
    filter: FilterType = FilterType.NONE  # noqa: A003
    current_issue: str = ""
    # Newest first.
    all_submissions: List[Submission] = Field(default_factory=list)
    edit_modal_submission: Optional[Submission] = None
    is_loading: bool = False
    view: View = View.HOMEPAGE
    issues: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
