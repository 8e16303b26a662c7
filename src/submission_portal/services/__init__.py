"""
Services for the submission portal.

The lifecycle controller lives in ``submission_portal.services.lifecycle``
and is imported from there directly.
"""

from .filter_engine import filter_submissions, visible_submissions
from .forms import (
    MediaInput,
    UploadFile,
    UploadForm,
    build_draft_submission,
    build_upload_form,
    check_form_matches_draft,
    prepare_submission,
)
from .reconciliation import reconcile_upload_results, storage_url

__all__ = [
    "MediaInput",
    "UploadFile",
    "UploadForm",
    "build_draft_submission",
    "build_upload_form",
    "check_form_matches_draft",
    "filter_submissions",
    "prepare_submission",
    "reconcile_upload_results",
    "storage_url",
    "visible_submissions",
]
