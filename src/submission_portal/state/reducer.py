"""
Reducer for the "My Work" page state.

``reduce`` is total: every action returns a new ViewState, and an
unrecognised action returns the state it was given.
"""

from typing import Any, Callable, Dict, Type

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
from submission_portal.state.view_state import ViewState

Handler = Callable[[ViewState, Any], ViewState]


def _change_filter(state: ViewState, action: ChangeFilter) -> ViewState:
    return state.model_copy(update={"filter": action.new_filter})


def _set_current_issue(state: ViewState, action: SetCurrentIssue) -> ViewState:
    return state.model_copy(update={"current_issue": action.current_issue})


def _set_issues(state: ViewState, action: SetIssues) -> ViewState:
    return state.model_copy(update={"issues": list(action.issues)})


def _update_all_submissions(state: ViewState, action: UpdateAllSubmissions) -> ViewState:
    return state.model_copy(update={"all_submissions": list(action.submissions)})


def _change_edit_modal(state: ViewState, action: ChangeEditModal) -> ViewState:
    return state.model_copy(update={"edit_modal_submission": action.submission})


def _loading_on(state: ViewState, action: ToggleLoadingOn) -> ViewState:
    return state.model_copy(update={"is_loading": True})


def _loading_off(state: ViewState, action: ToggleLoadingOff) -> ViewState:
    return state.model_copy(update={"is_loading": False})


def _switch_view(state: ViewState, action: SwitchView) -> ViewState:
    return state.model_copy(update={"view": action.new_view})


_HANDLERS: Dict[Type[Action], Handler] = {
    ChangeFilter: _change_filter,
    SetCurrentIssue: _set_current_issue,
    SetIssues: _set_issues,
    UpdateAllSubmissions: _update_all_submissions,
    ChangeEditModal: _change_edit_modal,
    ToggleLoadingOn: _loading_on,
    ToggleLoadingOff: _loading_off,
    SwitchView: _switch_view,
}


def reduce(state: ViewState, action: Any) -> ViewState:
    """
    Apply an action to the state.

    Args:
        state: Current state, left untouched
        action: Action to apply

    Returns:
        ViewState: The new state, or ``state`` itself for unknown actions
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)
