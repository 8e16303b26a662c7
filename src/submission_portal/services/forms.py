"""
Upload form and draft submission built from the user's input.

The multipart form and the draft are built together so that file order and
media reference order always line up, and each file carries the same
correlation token as its media reference.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from submission_portal.models import MediaReference, Submission


@dataclass
class MediaInput:
    """A file picked by the user plus the metadata typed next to it."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    type: str = ""
    description: str = ""


@dataclass
class UploadFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    token: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class UploadForm:
    """Files (main submission first) and text fields of one upload."""
    files: List[UploadFile] = field(default_factory=list)
    fields: Dict[str, str] = field(default_factory=dict)

    def to_multipart(self) -> Tuple[Dict[str, Any], List[Tuple[str, Tuple[str, bytes, str]]]]:
        """Return ``(data, files)`` as accepted by httpx."""
        data: Dict[str, Any] = dict(self.fields)
        data["tokens"] = [f.token for f in self.files]
        files = [("files", (f.filename, f.content, f.content_type)) for f in self.files]
        return data, files


def check_form_matches_draft(form: UploadForm, draft: Submission) -> None:
    """
    Raise ``ValueError`` unless every file of ``form`` has a media reference in ``draft``.

    Files and references must correspond one to one, in the same order.
    """
    references = draft.media_references()
    if len(form.files) != len(references):
        raise ValueError(
            f"Upload has {len(form.files)} file(s) but the submission has "
            f"{len(references)} media reference(s)"
        )
    for upload, reference in zip(form.files, references):
        if reference.upload_token is not None and reference.upload_token != upload.token:
            raise ValueError(f"File {upload.filename} is out of order with its media reference")


def build_upload_form(
    main_file: MediaInput,
    additional_files: Sequence[MediaInput] = (),
    fields: Optional[Dict[str, str]] = None,
) -> UploadForm:
    """Multipart form with the main file first, each file given a fresh token."""
    form = UploadForm(fields=dict(fields or {}))
    for media in [main_file, *additional_files]:
        form.files.append(UploadFile(media.filename, media.content, media.content_type))
    return form


def build_draft_submission(
    form: UploadForm,
    title: str,
    author: str,
    issue: str,
    main: MediaInput,
    additional: Sequence[MediaInput] = (),
) -> Submission:
    """
    Build the draft whose media references mirror the files of ``form``.

    Each reference takes the token of the file at the same position.

    Raises:
        ValueError: If ``form`` does not hold one file per media input
    """
    references = [
        MediaReference(type=media.type, description=media.description, upload_token=upload.token)
        for upload, media in zip(form.files, [main, *additional])
    ]
    if len(references) != len(form.files) or len(references) != 1 + len(additional):
        raise ValueError(
            f"Upload has {len(form.files)} file(s) but {1 + len(additional)} "
            f"media input(s) were described"
        )

    return Submission(
        title=title,
        author=author,
        issue=issue,
        main_submission=references[0],
        additional_references=references[1:],
    )


def prepare_submission(
    title: str,
    author: str,
    issue: str,
    main: MediaInput,
    additional: Sequence[MediaInput] = (),
) -> Tuple[UploadForm, Submission]:
    """
    Build the upload form and the matching draft submission.

    Returns:
        (UploadForm, Submission): Form to upload, draft to persist afterwards
    """
    form = build_upload_form(main, additional, {"title": title, "author": author, "issue": issue})
    return form, build_draft_submission(form, title, author, issue, main, additional)
