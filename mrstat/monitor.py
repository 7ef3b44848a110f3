"""Run the merge request monitor from settings to a classified result."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import typer

from mrstat.classify import classify_and_partition
from mrstat.gitlab_client import GitLabAPIError, GitLabClient
from mrstat.repository import MergeRequestRepository, author_predicate

if TYPE_CHECKING:
    from mrstat.config import AppSettings
    from mrstat.models import MergeRequest

LOGGER = logging.getLogger(__name__)


def _empty_merge_requests() -> list["MergeRequest"]:
    return []


@dataclass
class MonitorResult:
    """Open merge requests for a branch, split by whether they can be merged."""

    target_branch: str
    ready: list["MergeRequest"] = field(default_factory=_empty_merge_requests)
    blocked: list["MergeRequest"] = field(default_factory=_empty_merge_requests)

    def __len__(self) -> int:
        """Return the number of merge requests in both groups."""
        return len(self.ready) + len(self.blocked)


class MergeRequestMonitor:
    """Fetch, enrich, and classify the open merge requests described by the settings."""

    def __init__(
        self,
        settings: "AppSettings",
        *,
        client_factory: Callable[["AppSettings"], GitLabClient] | None = None,
    ) -> None:
        """Initialize the monitor with runtime settings."""
        self._settings = settings
        self._client_factory: Callable[[AppSettings], GitLabClient]
        self._client_factory = client_factory or GitLabClient

    async def run(self, target_branch: str | None = None) -> MonitorResult:
        """Return the classified merge requests, exiting with code 1 on any API failure."""
        branch = target_branch or self._settings.target_branch
        author_ids = self._settings.author_ids
        if not author_ids:
            LOGGER.warning("No authors configured; all open merge requests will be reported")
        predicate = author_predicate(author_ids)
        async with self._client_factory(self._settings) as client:
            repository = MergeRequestRepository(
                client,
                self._settings.project_id,
                max_concurrency=self._settings.max_concurrency,
            )
            try:
                merge_request_list = await repository.fetch_and_enrich(branch, predicate)
            except GitLabAPIError as exc:
                LOGGER.error(
                    "Failed to fetch merge requests for project %s: %s",
                    self._settings.project_id,
                    exc,
                )
                typer.secho(f"Failed to fetch merge requests: {exc}", err=True)
                raise typer.Exit(code=1) from exc
        LOGGER.info("Found %s open merge requests against %s", len(merge_request_list), branch)
        ready, blocked = classify_and_partition(merge_request_list)
        return MonitorResult(target_branch=branch, ready=ready, blocked=blocked)
