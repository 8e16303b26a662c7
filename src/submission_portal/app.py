"""
Streamlit page for the submission portal.

Renders the store's state and forwards user intents to the lifecycle
controller. Run with ``streamlit run src/submission_portal/app.py``.
"""

import asyncio
from typing import List, Optional

import streamlit as st
from loguru import logger

from submission_portal.api import PortalAPIClient, UploadAPIClient
from submission_portal.config import get_settings
from submission_portal.models import Submission
from submission_portal.services import MediaInput, prepare_submission
from submission_portal.services.lifecycle import SubmissionLifecycleController
from submission_portal.state import FilterType, SubmissionStore, View
from submission_portal.utils.logging import setup_logging

FILTER_LABELS = {
    FilterType.CURRENT: "Current Submissions",
    FilterType.NONE: "All Submissions",
    FilterType.APPROVED: "Approved Works",
}


def setup_page_config() -> None:
    """Configure Streamlit page settings."""
    st.set_page_config(
        page_title="My Work",
        page_icon="🖼️",
        layout="wide",
    )


@st.cache_resource
def get_clients() -> tuple:
    """Get or create the API clients (cached)."""
    return PortalAPIClient(), UploadAPIClient()


def initialize_session_state() -> None:
    """Create the store and controller once per browser session."""
    if 'controller' not in st.session_state:
        portal_client, upload_client = get_clients()
        st.session_state.controller = SubmissionLifecycleController(
            SubmissionStore(), portal_client, upload_client
        )
    if 'user_id' not in st.session_state:
        st.session_state.user_id = get_settings().portal_user_id
    if 'loaded_for' not in st.session_state:
        st.session_state.loaded_for = None


def render_sidebar(controller: SubmissionLifecycleController) -> Optional[str]:
    """User selection, standing in for the authentication widget."""
    user_id = st.sidebar.text_input("User ID", value=st.session_state.user_id or "")
    st.session_state.user_id = user_id or None
    if user_id and st.session_state.loaded_for != user_id:
        asyncio.run(controller.on_user_changed(user_id))
        st.session_state.loaded_for = user_id
    if st.sidebar.button("Refresh"):
        asyncio.run(controller.load_submissions(user_id))
    return st.session_state.user_id


def render_submission(submission: Submission) -> None:
    main = submission.main_submission
    if main.image_url:
        st.image(main.image_url)
    st.markdown(f"**{submission.title}**")
    st.caption(f"{submission.author} · {submission.issue} · {submission.status}")


def render_edit_panel(controller: SubmissionLifecycleController, user_id: Optional[str]) -> None:
    submission = controller.store.state.edit_modal_submission
    if submission is None:
        return
    issues = controller.store.state.issues or [submission.issue]
    with st.expander(f"Editing: {submission.title}", expanded=True):
        title = st.text_input("Title", value=submission.title)
        author = st.text_input("Author", value=submission.author)
        issue = st.selectbox(
            "Issue", issues, index=issues.index(submission.issue) if submission.issue in issues else 0
        )
        description = st.text_area("Description", value=submission.main_submission.description)
        col_save, col_close = st.columns(2)
        if col_save.button("Save"):
            edited = submission.model_copy(deep=True)
            edited.title, edited.author, edited.issue = title, author, issue
            edited.main_submission.description = description
            asyncio.run(controller.save_edit(edited))
        if col_close.button("Close"):
            asyncio.run(controller.close_edit_modal(user_id))
            st.rerun()


def render_homepage(controller: SubmissionLifecycleController, user_id: Optional[str]) -> None:
    state = controller.store.state
    st.title("My Work")
    if st.button("Submit Work"):
        controller.open_submit_form()
        st.rerun()

    columns = st.columns(len(FILTER_LABELS))
    for column, (mode, label) in zip(columns, FILTER_LABELS.items()):
        if column.button(label, type="primary" if state.filter == mode else "secondary"):
            controller.change_filter(mode)
            st.rerun()

    if state.is_loading:
        st.info("Loading...")
        return

    render_edit_panel(controller, user_id)

    submissions = controller.visible_submissions()
    if not submissions:
        st.info("You have no submissions")
        return
    grid = st.columns(3)
    for i, submission in enumerate(submissions):
        with grid[i % 3]:
            render_submission(submission)
            if st.button("Edit", key=f"edit-{submission.id or i}"):
                controller.open_edit_modal(submission)
                st.rerun()


def _media_inputs(files: List, prefix: str) -> List[MediaInput]:
    inputs = []
    for i, upload in enumerate(files):
        inputs.append(MediaInput(
            filename=upload.name,
            content=upload.getvalue(),
            content_type=upload.type or "application/octet-stream",
            type=st.text_input("Type", key=f"{prefix}-type-{i}"),
            description=st.text_input(f"Description of {upload.name}", key=f"{prefix}-desc-{i}"),
        ))
    return inputs


def render_submission_form(controller: SubmissionLifecycleController, user_id: Optional[str]) -> None:
    state = controller.store.state
    st.title("Submit Work")
    if st.button("Back"):
        controller.go_back()
        st.rerun()

    title = st.text_input("Title")
    author = st.text_input("Author / pen name")
    issues = state.issues or [state.current_issue]
    issue = st.selectbox("Issue", issues)
    main_file = st.file_uploader("Main submission")
    main_inputs = _media_inputs([main_file] if main_file else [], "main")
    extra_files = st.file_uploader("Additional references", accept_multiple_files=True) or []
    extra_inputs = _media_inputs(extra_files, "extra")

    if st.button("Submit", disabled=not (title and main_inputs and user_id)):
        form, draft = prepare_submission(title, author, issue, main_inputs[0], extra_inputs)
        asyncio.run(controller.submit_work(form, draft, user_id))
        st.rerun()


def main() -> None:
    """Main page function."""
    setup_page_config()
    setup_logging()
    initialize_session_state()

    controller = st.session_state.controller
    user_id = render_sidebar(controller)
    if not user_id:
        st.info("Enter a user id to see your work")
        return

    if controller.store.state.view == View.SUBMISSION:
        render_submission_form(controller, user_id)
    else:
        render_homepage(controller, user_id)
    logger.debug(f"Rendered view {controller.store.state.view.value}")


if __name__ == "__main__":
    main()
