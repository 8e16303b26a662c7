"""
Actions accepted by the reducer.

Each action is a small frozen model carrying its payload. The reducer
dispatches on the action class, so anything that is not one of these
classes is ignored.
"""

from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict

from submission_portal.models import Submission
from submission_portal.state.view_state import FilterType, View


class Action(BaseModel):
    """Base class for all actions."""
    kind: ClassVar[str] = "Action"

    model_config = ConfigDict(frozen=True)


class ChangeFilter(Action):
    kind: ClassVar[str] = "ChangeFilter"
    new_filter: FilterType


class SetCurrentIssue(Action):
    kind: ClassVar[str] = "SetCurrentIssue"
    current_issue: str


class SetIssues(Action):
    """Replace the list of issue titles offered by the submit and edit forms."""
    kind: ClassVar[str] = "SetIssues"
    issues: List[str]


class UpdateAllSubmissions(Action):
    """Replace (not merge) the whole submission list."""
    kind: ClassVar[str] = "UpdateAllSubmissions"
    submissions: List[Submission]


class ChangeEditModal(Action):
    """Open the edit modal on a submission, or close it with ``None``."""
    kind: ClassVar[str] = "ChangeEditModal"
    submission: Optional[Submission] = None


class ToggleLoadingOn(Action):
    kind: ClassVar[str] = "ToggleLoadingOn"


class ToggleLoadingOff(Action):
    kind: ClassVar[str] = "ToggleLoadingOff"


class SwitchView(Action):
    kind: ClassVar[str] = "SwitchView"
    new_view: View
