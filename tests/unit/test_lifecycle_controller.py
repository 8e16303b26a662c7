"""
Unit tests for the SubmissionLifecycleController.

Collaborators are AsyncMocks; every dispatched action is recorded from the
store so the tests can check ordering and the loading flag.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from submission_portal.api.client import LogicalFailureError, TransientNetworkError
from submission_portal.models import Issue, SubmissionListResponse, SubmissionRecord, UploadResult
from submission_portal.services.forms import MediaInput, UploadFile, UploadForm, prepare_submission
from submission_portal.services.lifecycle import SubmissionLifecycleController
from submission_portal.state import FilterType, SubmissionStore, UpdateAllSubmissions, View, ViewState
from tests.factories import make_submission


def envelope(*submissions):
    return SubmissionListResponse(
        success=True, data=[SubmissionRecord(submission=s) for s in submissions]
    )


@pytest.fixture
def portal_client():
    client = AsyncMock()
    client.get_submissions_by_user.return_value = envelope()
    client.get_issues.return_value = []
    return client


@pytest.fixture
def upload_client():
    client = AsyncMock()
    client.get_upload_results.return_value = []
    return client


@pytest.fixture
def settings():
    mock_settings = MagicMock()
    mock_settings.storage_file_url_prefix = "https://drive.google.com/file/d/"
    return mock_settings


@pytest.fixture
def store():
    return SubmissionStore()


@pytest.fixture
def dispatched(store):
    actions = []
    store.subscribe(lambda action, state: actions.append(action.kind))
    return actions


@pytest.fixture
def controller(store, portal_client, upload_client, settings):
    return SubmissionLifecycleController(store, portal_client, upload_client, settings=settings)


def loading_balanced(actions):
    return actions.count("ToggleLoadingOn") == actions.count("ToggleLoadingOff")


class TestLoadSubmissions:
    """Test cases for load_submissions."""

    @pytest.mark.asyncio
    async def test_newest_first(self, controller, portal_client, store, dispatched):
        """Test that the oldest-first response is shown newest first."""
        old, new = make_submission("old"), make_submission("new")
        portal_client.get_submissions_by_user.return_value = envelope(old, new)

        await controller.load_submissions("user_1")

        portal_client.get_submissions_by_user.assert_awaited_once_with("user_1")
        assert store.state.all_submissions == [new, old]
        assert dispatched == ["ToggleLoadingOn", "UpdateAllSubmissions", "ToggleLoadingOff"]
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        TransientNetworkError("connection refused"),
        LogicalFailureError("Failed to connect to database"),
    ])
    async def test_failure_keeps_existing_list(self, portal_client, upload_client, settings, error):
        """Test that a failed load leaves the displayed submissions alone."""
        existing = [make_submission("kept")]
        store = SubmissionStore(ViewState(all_submissions=existing))
        actions = []
        store.subscribe(lambda action, state: actions.append(action.kind))
        portal_client.get_submissions_by_user.side_effect = error
        controller = SubmissionLifecycleController(store, portal_client, upload_client, settings=settings)

        await controller.load_submissions("user_1")

        assert store.state.all_submissions == existing
        assert store.state.is_loading is False
        assert actions == ["ToggleLoadingOn", "ToggleLoadingOff"]

    @pytest.mark.asyncio
    async def test_no_user(self, controller, portal_client, store, dispatched):
        """Test that a missing user neither fetches nor leaves loading on."""
        await controller.load_submissions(None)

        portal_client.get_submissions_by_user.assert_not_awaited()
        assert loading_balanced(dispatched)
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_unexpected_error_still_clears_loading(self, controller, portal_client, store):
        """Test that loading is cleared even when an unexpected error escapes."""
        portal_client.get_submissions_by_user.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await controller.load_submissions("user_1")

        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_overlapping_loads_last_response_wins(self, controller, portal_client, store):
        """Test that the load answered last replaces the list, whichever started first."""
        first, second = make_submission("first"), make_submission("second")
        release_first = asyncio.Event()

        async def respond(user_id):
            if user_id == "slow":
                await release_first.wait()
                return envelope(first)
            return envelope(second)

        portal_client.get_submissions_by_user.side_effect = respond

        slow = asyncio.create_task(controller.load_submissions("slow"))
        await asyncio.sleep(0)
        await controller.load_submissions("fast")
        release_first.set()
        await slow

        assert store.state.all_submissions == [first]


class TestLoadCurrentIssue:
    """Test cases for load_current_issue."""

    @pytest.mark.asyncio
    async def test_selects_current(self, controller, portal_client, store):
        portal_client.get_issues.return_value = [
            Issue(status="Past", title="Fall 2023"),
            Issue(status="Current", title="Spring 2024"),
            Issue(status="Upcoming", title="Fall 2024"),
        ]

        await controller.load_current_issue()

        assert store.state.current_issue == "Spring 2024"
        assert store.state.issues == ["Fall 2023", "Spring 2024", "Fall 2024"]

    @pytest.mark.asyncio
    async def test_no_current_keeps_previous(self, portal_client, upload_client, settings):
        store = SubmissionStore(ViewState(current_issue="Fall 2023"))
        portal_client.get_issues.return_value = [Issue(status="Past", title="Fall 2023")]
        controller = SubmissionLifecycleController(store, portal_client, upload_client, settings=settings)

        await controller.load_current_issue()

        assert store.state.current_issue == "Fall 2023"

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, controller, portal_client, store, dispatched):
        portal_client.get_issues.side_effect = TransientNetworkError("down")

        await controller.load_current_issue()

        assert dispatched == []
        assert store.state.current_issue == ""


class TestSubmitWork:
    """Test cases for the two-phase submit."""

    def setup_method(self):
        """Set up a form/draft pair without correlation tokens."""
        self.draft = make_submission("Sunrise", additional=1)
        self.form = UploadForm(files=[UploadFile("main.png", b"m"), UploadFile("ref.png", b"r")])

    @pytest.mark.asyncio
    async def test_upload_then_persist_then_reload(self, controller, store, portal_client, upload_client, dispatched):
        """Test the full sequence and the reconciled document that gets saved."""
        calls = []
        upload_client.upload.side_effect = lambda form: calls.append("upload")

        async def results():
            calls.append("results")
            return [UploadResult(id="A", image_url="a"), UploadResult(id="B", image_url="b")]

        async def add(submission):
            calls.append("add")

        upload_client.get_upload_results.side_effect = results
        portal_client.add_submission.side_effect = add
        controller.open_submit_form()
        dispatched.clear()

        saved = await controller.submit_work(self.form, self.draft, "user_1")

        assert calls == ["upload", "results", "add"]
        upload_client.upload.assert_awaited_once_with(self.form)
        persisted = portal_client.add_submission.await_args.args[0]
        assert persisted == saved
        assert persisted.main_submission.content_storage_url == "https://drive.google.com/file/d/A"
        assert persisted.additional_references[0].image_url == "b"
        portal_client.get_submissions_by_user.assert_awaited_once_with("user_1")
        assert dispatched[:2] == ["SwitchView", "ToggleLoadingOn"]
        assert dispatched[-1] == "ToggleLoadingOff"
        assert loading_balanced(dispatched)
        assert store.state.view == View.HOMEPAGE
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_upload_failure_skips_persist_but_reloads(self, controller, store, portal_client, upload_client, dispatched):
        upload_client.upload.side_effect = TransientNetworkError("upload backend down")

        saved = await controller.submit_work(self.form, self.draft, "user_1")

        assert saved is None
        upload_client.get_upload_results.assert_not_awaited()
        portal_client.add_submission.assert_not_awaited()
        portal_client.get_submissions_by_user.assert_awaited_once()
        assert loading_balanced(dispatched)
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_results_failure_skips_persist(self, controller, portal_client, upload_client, dispatched):
        upload_client.get_upload_results.side_effect = LogicalFailureError("bad body")

        assert await controller.submit_work(self.form, self.draft, "user_1") is None

        portal_client.add_submission.assert_not_awaited()
        portal_client.get_submissions_by_user.assert_awaited_once()
        assert loading_balanced(dispatched)

    @pytest.mark.asyncio
    async def test_persist_failure_still_reloads(self, controller, store, portal_client, upload_client, dispatched):
        upload_client.get_upload_results.return_value = [UploadResult(id="A", image_url="a")]
        portal_client.add_submission.side_effect = TransientNetworkError("db down")

        assert await controller.submit_work(self.form, self.draft, "user_1") is None

        portal_client.get_submissions_by_user.assert_awaited_once()
        assert loading_balanced(dispatched)
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_mismatched_form_is_not_uploaded(self, controller, store, portal_client, upload_client, dispatched):
        """Test that a form missing a file for one of the draft's references is refused."""
        form = UploadForm(files=[UploadFile("main.png", b"m")])

        saved = await controller.submit_work(form, self.draft, "user_1")

        assert saved is None
        upload_client.upload.assert_not_awaited()
        portal_client.add_submission.assert_not_awaited()
        portal_client.get_submissions_by_user.assert_awaited_once_with("user_1")
        assert loading_balanced(dispatched)
        assert store.state.view == View.HOMEPAGE
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_keyed_submission_from_prepared_form(self, controller, portal_client, upload_client):
        """Test that tokens echoed back by the backend bind regardless of order."""
        form, draft = prepare_submission(
            "Sunrise", "A. Artist", "Spring 2024",
            MediaInput("main.png", b"m", type="Painting"),
            [MediaInput("ref.png", b"r", type="Sketch")],
        )
        main_token, ref_token = (f.token for f in form.files)
        upload_client.get_upload_results.return_value = [
            UploadResult(id="R", image_url="r", token=ref_token),
            UploadResult(id="M", image_url="m", token=main_token),
        ]

        saved = await controller.submit_work(form, draft, "user_1")

        assert saved.main_submission.image_url == "m"
        assert saved.additional_references[0].image_url == "r"


class TestUserIntents:
    """Test cases for the view and modal transitions."""

    def test_view_switching(self, controller, store):
        controller.open_submit_form()
        assert store.state.view == View.SUBMISSION
        controller.go_back()
        assert store.state.view == View.HOMEPAGE

    def test_change_filter_and_visible(self, controller, store, approved_submission, pending_submission):
        store.dispatch(UpdateAllSubmissions(submissions=[approved_submission, pending_submission]))
        controller.change_filter(FilterType.APPROVED)
        assert controller.visible_submissions() == [approved_submission]

    @pytest.mark.asyncio
    async def test_close_edit_modal_refreshes_first(self, controller, store, portal_client, dispatched, approved_submission):
        controller.open_edit_modal(approved_submission)
        assert store.state.edit_modal_submission == approved_submission

        await controller.close_edit_modal("user_1")

        portal_client.get_submissions_by_user.assert_awaited_once_with("user_1")
        assert dispatched[-1] == "ChangeEditModal"
        assert store.state.edit_modal_submission is None

    @pytest.mark.asyncio
    async def test_save_edit(self, controller, portal_client, store, dispatched, approved_submission):
        assert await controller.save_edit(approved_submission) is True
        portal_client.update_submission.assert_awaited_once_with(approved_submission)
        assert dispatched == ["ToggleLoadingOn", "ToggleLoadingOff"]

    @pytest.mark.asyncio
    async def test_save_edit_failure(self, controller, portal_client, store, approved_submission):
        portal_client.update_submission.side_effect = TransientNetworkError("down")
        assert await controller.save_edit(approved_submission) is False
        assert store.state.is_loading is False

    @pytest.mark.asyncio
    async def test_on_user_changed_loads_both(self, controller, portal_client, store):
        portal_client.get_issues.return_value = [Issue(status="Current", title="Spring 2024")]
        portal_client.get_submissions_by_user.return_value = envelope(make_submission("x"))

        await controller.on_user_changed("user_1")

        assert store.state.current_issue == "Spring 2024"
        assert [s.title for s in store.state.all_submissions] == ["x"]
        assert store.state.is_loading is False
