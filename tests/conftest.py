"""Shared fixtures for the submission portal tests."""

import pytest

from submission_portal.config import get_settings
from submission_portal.models import Submission, SubmissionStatus
from tests.factories import make_submission


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; rebuild them for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def approved_submission() -> Submission:
    return make_submission("Sunrise", SubmissionStatus.APPROVED.value, submission_id="s1")


@pytest.fixture
def pending_submission() -> Submission:
    return make_submission("Nightfall", SubmissionStatus.PENDING.value, issue="Fall 2023", submission_id="s2")
