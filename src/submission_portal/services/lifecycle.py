"""
Submission lifecycle controller.

Coordinates the network side of the "My Work" page: loading a user's
submissions and the current issue, and the two-phase submit in which files
are uploaded first and the resulting storage URLs are then saved with the
submission record. All state changes go through the store.

Operations never raise collaborator errors. A failed request is logged,
the state keeps its last good value and the loading flag is cleared.

Overlapping loads are not de-duplicated or cancelled: whichever response
arrives last replaces the submission list, regardless of which request
started first.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from loguru import logger

from submission_portal.api.client import APIError, PortalAPIClient, UploadAPIClient
from submission_portal.config import Settings, get_settings
from submission_portal.models import Submission
from submission_portal.services.filter_engine import visible_submissions
from submission_portal.services.forms import UploadForm, check_form_matches_draft
from submission_portal.services.reconciliation import reconcile_upload_results
from submission_portal.state import (
    ChangeEditModal,
    ChangeFilter,
    FilterType,
    SetCurrentIssue,
    SetIssues,
    SubmissionStore,
    SwitchView,
    ToggleLoadingOff,
    ToggleLoadingOn,
    UpdateAllSubmissions,
    View,
)


class SubmissionLifecycleController:
    """
    Runs the portal's asynchronous operations against a SubmissionStore.

    Args:
        store: Store owning the view state
        portal_client: Client for submissions and issues
        upload_client: Client for the upload backend
        settings: Settings, defaults to ``get_settings()``
    """

    def __init__(
        self,
        store: SubmissionStore,
        portal_client: PortalAPIClient,
        upload_client: UploadAPIClient,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.portal_client = portal_client
        self.upload_client = upload_client
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def _loading(self) -> AsyncIterator[None]:
        """Show the loading indicator for the duration of the block."""
        self.store.dispatch(ToggleLoadingOn())
        try:
            yield
        finally:
            self.store.dispatch(ToggleLoadingOff())

    async def load_submissions(self, user_id: Optional[str]) -> None:
        """
        Replace the submission list with the user's stored submissions, newest first.

        On failure the current list is kept.

        Args:
            user_id: Signed-in user; nothing is fetched without one
        """
        async with self._loading():
            if not user_id:
                logger.warning("No signed-in user, skipping submission load")
                return

            try:
                response = await self.portal_client.get_submissions_by_user(user_id)
            except APIError as e:
                logger.error(f"Error loading submissions for user {user_id}: {e}")
                return

            submissions = [record.submission for record in reversed(response.data)]
            self.store.dispatch(UpdateAllSubmissions(submissions=submissions))
            logger.info(f"Loaded {len(submissions)} submission(s) for user {user_id}")

    async def load_current_issue(self) -> None:
        """
        Load the issue titles and select the issue whose status is "Current".

        Without a current issue the previously known one is kept.
        """
        try:
            issues = await self.portal_client.get_issues()
        except APIError as e:
            logger.error(f"Error fetching issues: {e}")
            return

        self.store.dispatch(SetIssues(issues=[issue.title for issue in issues]))

        current = next((issue for issue in issues if issue.is_current), None)
        if current is None:
            logger.warning(f"No current issue among {len(issues)} issue(s)")
            return
        self.store.dispatch(SetCurrentIssue(current_issue=current.title))

    async def submit_work(
        self,
        form: UploadForm,
        draft: Submission,
        user_id: Optional[str],
    ) -> Optional[Submission]:
        """
        Upload the files of ``form``, then save ``draft`` with their storage URLs.

        The page returns to the homepage straight away. The save only starts
        once the upload and its results read have completed. A form whose
        files do not line up with the draft's media references is not
        uploaded. Whatever happens, the submission list is reloaded afterwards.

        Args:
            form: Files (main submission first) and form fields
            draft: Submission whose media references follow the file order
            user_id: Signed-in user, for the reload

        Returns:
            The saved submission, or None if either phase failed
        """
        self.store.dispatch(SwitchView(new_view=View.HOMEPAGE))

        saved = None
        async with self._loading():
            reconciled = await self._upload(form, draft)
            if reconciled is not None and await self._persist(reconciled):
                saved = reconciled
            await self.load_submissions(user_id)
        return saved

    async def _upload(self, form: UploadForm, draft: Submission) -> Optional[Submission]:
        try:
            check_form_matches_draft(form, draft)
        except ValueError as e:
            logger.error(f"Not uploading '{draft.title}': {e}")
            return None

        try:
            await self.upload_client.upload(form)
            results = await self.upload_client.get_upload_results()
        except APIError as e:
            logger.error(f"Error uploading files for '{draft.title}': {e}")
            return None
        return reconcile_upload_results(draft, results, self.settings.storage_file_url_prefix)

    async def _persist(self, submission: Submission) -> bool:
        try:
            await self.portal_client.add_submission(submission)
        except APIError as e:
            logger.error(f"Error saving submission '{submission.title}': {e}")
            return False
        logger.info(f"Saved submission '{submission.title}'")
        return True

    async def on_user_changed(self, user_id: Optional[str]) -> None:
        """Load the user's submissions and the current issue concurrently."""
        await asyncio.gather(self.load_submissions(user_id), self.load_current_issue())

    async def save_edit(self, submission: Submission) -> bool:
        """
        Save edits made in the edit modal.

        Returns:
            True if the portal API accepted the update
        """
        async with self._loading():
            try:
                await self.portal_client.update_submission(submission)
            except APIError as e:
                logger.error(f"Error updating submission {submission.id}: {e}")
                return False
        return True

    async def close_edit_modal(self, user_id: Optional[str]) -> None:
        """Refresh the list so edits show up, then close the modal."""
        await self.load_submissions(user_id)
        self.store.dispatch(ChangeEditModal(submission=None))

    def open_edit_modal(self, submission: Submission) -> None:
        self.store.dispatch(ChangeEditModal(submission=submission))

    def open_submit_form(self) -> None:
        self.store.dispatch(SwitchView(new_view=View.SUBMISSION))

    def go_back(self) -> None:
        self.store.dispatch(SwitchView(new_view=View.HOMEPAGE))

    def change_filter(self, mode: FilterType) -> None:
        self.store.dispatch(ChangeFilter(new_filter=mode))

    def visible_submissions(self) -> List[Submission]:
        """Submissions to render under the active filter."""
        return visible_submissions(self.store.state)
