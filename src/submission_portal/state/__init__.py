"""View state, actions and the reducer that ties them together."""

from submission_portal.state.actions import (
    Action,
    ChangeEditModal,
    ChangeFilter,
    SetCurrentIssue,
    SetIssues,
    SwitchView,
    ToggleLoadingOff,
    ToggleLoadingOn,
    UpdateAllSubmissions,
)
from submission_portal.state.reducer import reduce
from submission_portal.state.store import SubmissionStore
from submission_portal.state.view_state import FilterType, View, ViewState

__all__ = [
    "Action",
    "ChangeEditModal",
    "ChangeFilter",
    "FilterType",
    "SetCurrentIssue",
    "SetIssues",
    "SubmissionStore",
    "SwitchView",
    "ToggleLoadingOff",
    "ToggleLoadingOn",
    "UpdateAllSubmissions",
    "View",
    "ViewState",
    "reduce",
]
