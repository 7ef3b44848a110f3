"""Async GitLab API client used by the merge request monitor."""

import logging
from types import TracebackType
from typing import Any, Self, TYPE_CHECKING
from collections.abc import Mapping

import httpx

if TYPE_CHECKING:
    from mrstat.config import AppSettings

LOGGER = logging.getLogger(__name__)

_SUCCESS_LOWER = 200
_SUCCESS_UPPER = 300


class GitLabAPIError(RuntimeError):
    """Base error for every failure raised while talking to the GitLab API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Attach HTTP status metadata to the exception instance."""
        super().__init__(message)
        self.status_code = status_code


class TransportError(GitLabAPIError):
    """Raised when a request cannot be completed or returns a non-success status."""


class DeserializationError(GitLabAPIError):
    """Raised when a response body is not valid JSON or does not match the expected schema."""


class MissingDataError(GitLabAPIError):
    """Raised when a well-formed response lacks a required field."""


class GitLabClient:
    """Thin asynchronous wrapper around the GitLab REST API."""

    def __init__(self, settings: "AppSettings") -> None:
        """Configure the HTTP client with bearer authentication and timeouts."""
        self._settings = settings
        self._base_url = str(settings.gitlab_api_base).rstrip("/")
        headers = {
            "User-Agent": "mrstat/0.1",
            "Accept": "application/json",
            "Authorization": f"Bearer {settings.gitlab_token.get_secret_value()}",
        }
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=httpx.Timeout(settings.timeout),
        )

    @property
    def base_url(self) -> str:
        """Return the API base URL without a trailing slash."""
        return self._base_url

    async def __aenter__(self) -> Self:
        """Enter the async context manager and return the client."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Ensure the underlying HTTP client is closed when exiting the context."""
        del exc_type, exc, tb
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Issue a GET request against a path relative to the base URL or a full URL.

        Failures are raised once; nothing is retried here.
        """
        LOGGER.debug("%s - requesting...", url)
        try:
            response = await self._client.get(url, params=params)
        except httpx.RequestError as exc:
            message = f"GitLab API request to {url} failed: {exc}"
            raise TransportError(message) from exc
        status_code = response.status_code
        if not _SUCCESS_LOWER <= status_code < _SUCCESS_UPPER:
            message = f"GitLab API returned {status_code} for {url}: {response.text}"
            raise TransportError(message, status_code=status_code)
        LOGGER.debug("%s - received %s bytes.", url, len(response.content))
        return response

    def parse_json(self, response: httpx.Response) -> Any:
        """Decode a JSON response or raise a DeserializationError on failure."""
        try:
            return response.json()
        except ValueError as exc:
            content_type = response.headers.get("Content-Type", "unknown")
            message = (
                "GitLab API returned an invalid JSON payload "
                f"(status {response.status_code}, content-type {content_type})"
            )
            raise DeserializationError(message, status_code=response.status_code) from exc
