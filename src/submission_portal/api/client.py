"""
HTTP clients for the portal's collaborators.

``PortalAPIClient`` talks to the portal API (submissions and issues),
``UploadAPIClient`` to the backend that stores uploaded files. Both share
the retry and error handling of ``_BaseAPIClient``.
"""

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import httpx
from loguru import logger
from pydantic import ValidationError

from ..config import get_settings
from ..models import (
    Issue,
    IssueListResponse,
    Submission,
    SubmissionListResponse,
    UploadResult,
    UploadResultsResponse,
)
from ..services.forms import UploadForm


class APIError(Exception):
    """Base exception for collaborator errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TransientNetworkError(APIError):
    """The request raised, timed out or kept answering 429 or 5xx."""


class LogicalFailureError(APIError):
    """A response came back but was refused, reported failure or could not be parsed."""


class _BaseAPIClient:
    """Shared request handling for the portal clients."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
        backoff_seconds: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Base URL of the collaborator
            timeout: Request timeout in seconds
            retries: Retry attempts for GET requests
            backoff_seconds: Initial backoff, doubled on each retry
            transport: Optional httpx transport (used by tests)
        """
        settings = get_settings()
        self.base_url = base_url
        self.timeout = timeout or settings.api_timeout
        self.retries = settings.api_retries if retries is None else retries
        self.backoff_seconds = backoff_seconds
        self._transport = transport

        # Ensure base URL ends with /
        if not self.base_url.endswith('/'):
            self.base_url += '/'

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[Any]] = None,
        retries: Optional[int] = None,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path, relative to the base URL
            params: Query parameters
            json_data: JSON request body
            data: Form fields for multipart requests
            files: Files for multipart requests
            retries: Number of retry attempts, defaults to the client setting

        Returns:
            httpx.Response: HTTP response

        Raises:
            TransientNetworkError: If the request raised, or answered 429 or 5xx,
                on every attempt
            LogicalFailureError: If the response has any other non-2xx status
        """
        url = urljoin(self.base_url, endpoint)
        retries = self.retries if retries is None else retries

        for attempt in range(retries + 1):
            try:
                logger.debug(f"Making {method} request to {url} (attempt {attempt + 1})")

                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.request(
                        method,
                        url,
                        params=params,
                        json=json_data,
                        data=data,
                        files=files,
                    )
            except httpx.HTTPError as e:
                if attempt < retries:
                    wait_time = self.backoff_seconds * 2 ** attempt
                    logger.warning(f"Request failed, retrying in {wait_time}s: {e}")
                    await asyncio.sleep(wait_time)
                    continue
                raise TransientNetworkError(f"Request to {url} failed after {retries} retries: {e}")

            if response.is_success:
                logger.debug(f"Request successful: {method} {url}")
                return response

            transient = response.status_code == 429 or response.status_code >= 500
            if transient and attempt < retries:
                wait_time = self.backoff_seconds * 2 ** attempt
                logger.warning(f"HTTP {response.status_code} from {url}, retrying in {wait_time}s")
                await asyncio.sleep(wait_time)
                continue

            message = f"HTTP {response.status_code}: {response.text}"
            if transient:
                raise TransientNetworkError(message, response.status_code)
            raise LogicalFailureError(message, response.status_code)

        raise TransientNetworkError(f"Request to {url} failed after {retries} retries")

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise LogicalFailureError(f"Failed to parse {what} response: {e}", response.status_code)

    def _ack(self, response: httpx.Response, what: str) -> None:
        """Raise if a write endpoint answered with ``success: false``."""
        if not response.content:
            return
        body = self._json(response, what)
        if isinstance(body, dict) and body.get("success") is False:
            raise LogicalFailureError(f"{what} rejected: {body}", response.status_code)


class PortalAPIClient(_BaseAPIClient):
    """
    Client for the portal API.

    Reads and writes submission records and reads the issue list.
    """

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or get_settings().portal_api_base_url, **kwargs)
        logger.info(f"Initialized PortalAPIClient with base_url: {self.base_url}")

    async def get_submissions_by_user(self, user_id: str) -> SubmissionListResponse:
        """
        Fetch the stored submissions of a user, oldest first.

        Args:
            user_id: Identifier supplied by the authentication provider

        Returns:
            SubmissionListResponse: Parsed envelope

        Raises:
            APIError: If the request fails
            LogicalFailureError: If the API reports ``success: false``
        """
        response = await self._make_request(
            "GET", "submissions/get-by-user", params={"id": user_id}
        )
        try:
            envelope = SubmissionListResponse.model_validate(self._json(response, "submissions"))
        except ValidationError as e:
            raise LogicalFailureError(f"Failed to parse submissions response: {e}")

        if not envelope.success:
            raise LogicalFailureError("Failed to connect to database")
        return envelope

    async def add_submission(self, submission: Submission) -> None:
        """
        Store a new submission. Never retried.

        Raises:
            APIError: If the request fails or is rejected
        """
        response = await self._make_request(
            "POST",
            "submissions/add",
            json_data={"submission": submission.to_payload()},
            retries=0,
        )
        self._ack(response, "add submission")

    async def update_submission(self, submission: Submission) -> None:
        """
        Store edits to an existing submission. Never retried.

        Raises:
            APIError: If the request fails or is rejected
        """
        response = await self._make_request(
            "POST",
            "submissions/update",
            json_data={"submission": submission.to_payload()},
            retries=0,
        )
        self._ack(response, "update submission")

    async def get_issues(self) -> List[Issue]:
        """
        Fetch all publication issues.

        Raises:
            APIError: If the request fails or the body is malformed
        """
        response = await self._make_request("GET", "issues/get")
        try:
            return IssueListResponse.model_validate(self._json(response, "issues")).data
        except ValidationError as e:
            raise LogicalFailureError(f"Failed to parse issues response: {e}")


class UploadAPIClient(_BaseAPIClient):
    """Client for the upload backend that stores files with the storage provider."""

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        settings = get_settings()
        super().__init__(base_url or settings.backend_url, **kwargs)
        self.upload_endpoint = settings.upload_endpoint
        self.results_endpoint = settings.upload_results_endpoint
        logger.info(f"Initialized UploadAPIClient with base_url: {self.base_url}")

    async def upload(self, form: UploadForm) -> None:
        """
        Send the files and form fields as one multipart request. Never retried.

        Raises:
            APIError: If the request fails
        """
        data, files = form.to_multipart()
        await self._make_request(
            "POST", self.upload_endpoint, data=data, files=files, retries=0
        )
        logger.info(f"Uploaded {len(form.files)} file(s)")

    async def get_upload_results(self) -> List[UploadResult]:
        """
        Read back the storage ids of the last upload, in upload order.

        Raises:
            APIError: If the request fails or the body is malformed
        """
        response = await self._make_request("GET", self.results_endpoint)
        try:
            return UploadResultsResponse.model_validate(self._json(response, "upload results")).body
        except ValidationError as e:
            raise LogicalFailureError(f"Failed to parse upload results response: {e}")
