"""Filtering of the submission list shown on the "My Work" page."""

from typing import List, Optional, Sequence

from submission_portal.models import Submission, SubmissionStatus
from submission_portal.state.view_state import FilterType, ViewState


def filter_submissions(
    submissions: Sequence[Submission],
    mode: FilterType,
    current_issue: Optional[str] = None,
) -> Sequence[Submission]:
    """
    Filter submissions by the given mode.

    ``FilterType.NONE`` and unknown modes return ``submissions`` itself.
    ``FilterType.CURRENT`` compares ``issue`` with ``current_issue`` as is, so
    while no current issue is known only submissions with a blank issue match.

    Args:
        submissions: Submissions to filter
        mode: How to filter
        current_issue: Title of the current issue, used by ``CURRENT``

    Returns:
        Filtered submissions, order preserved
    """
    if mode == FilterType.APPROVED:
        return [s for s in submissions if s.status == SubmissionStatus.APPROVED]
    if mode == FilterType.CURRENT:
        return [s for s in submissions if s.issue == (current_issue or "")]
    return submissions


def visible_submissions(state: ViewState) -> List[Submission]:
    """Submissions of ``state`` after applying its active filter."""
    return list(filter_submissions(state.all_submissions, state.filter, state.current_issue))
