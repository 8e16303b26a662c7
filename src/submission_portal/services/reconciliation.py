"""
Binding upload results back onto a draft submission.

The upload backend answers with one ``{id, imageUrl}`` result per stored
file. Results are matched to the draft's media references by correlation
token when both sides carry one, and by position otherwise: result 0 is
the main submission, result i is ``additional_references[i - 1]``.
"""

from typing import Iterable, List, Sequence, Tuple

from loguru import logger

from submission_portal.models import MediaReference, Submission, UploadResult

Pair = Tuple[MediaReference, UploadResult]


def storage_url(prefix: str, storage_id: str) -> str:
    """Compose the stored file's URL from the storage provider's id."""
    return f"{prefix}{storage_id}"


def _can_match_by_token(references: Sequence[MediaReference], results: Sequence[UploadResult]) -> bool:
    return all(r.upload_token for r in references) and all(r.token for r in results)


def _pair_by_token(references: Sequence[MediaReference], results: Sequence[UploadResult]) -> List[Pair]:
    by_token = {reference.upload_token: reference for reference in references}
    pairs = []
    for result in results:
        reference = by_token.pop(result.token, None)
        if reference is None:
            logger.warning(f"Dropping upload result {result.id}: unknown token {result.token}")
            continue
        pairs.append((reference, result))
    if by_token:
        logger.warning(f"No upload result for token(s) {sorted(by_token)}")
    return pairs


def _pair_by_position(references: Sequence[MediaReference], results: Sequence[UploadResult]) -> List[Pair]:
    if len(results) > len(references):
        surplus = [result.id for result in results[len(references):]]
        logger.warning(f"Dropping {len(surplus)} upload result(s) with no reference slot: {surplus}")
    elif len(results) < len(references):
        logger.warning(
            f"Only {len(results)} upload result(s) for {len(references)} media reference(s)"
        )
    return list(zip(references, results))


def _bind(pairs: Iterable[Pair], url_prefix: str) -> None:
    for reference, result in pairs:
        reference.image_url = result.image_url
        reference.content_storage_url = storage_url(url_prefix, result.id)


def reconcile_upload_results(
    draft: Submission,
    results: Sequence[UploadResult],
    url_prefix: str,
) -> Submission:
    """
    Return a copy of ``draft`` with its media references bound to ``results``.

    A reference is only ever bound as a whole (both URLs set) or left as it was.
    The draft itself is not modified.

    Args:
        draft: Submission built from the form, references not yet uploaded
        results: Upload results, in upload order
        url_prefix: Prefix for ``content_storage_url``

    Returns:
        Submission: The reconciled copy
    """
    reconciled = draft.model_copy(deep=True)
    if not results:
        logger.warning(f"No upload results to reconcile for '{draft.title}'")
        return reconciled

    references = reconciled.media_references()
    if _can_match_by_token(references, results):
        pairs = _pair_by_token(references, results)
    else:
        pairs = _pair_by_position(references, results)

    _bind(pairs, url_prefix)
    return reconciled
