"""Fetch open merge requests and enrich them with their approval requirements."""

import asyncio
import logging
from collections.abc import Callable, Collection, Iterable, Sequence
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import TYPE_CHECKING

from mrstat.fetchers import approvals, merge_requests
from mrstat.models import MergeRequest

if TYPE_CHECKING:
    from mrstat.gitlab_client import GitLabClient

LOGGER = logging.getLogger(__name__)

MergeRequestPredicate = Callable[[MergeRequest], bool]
ApprovalResult = tuple[int, int] | BaseException


def author_predicate(author_ids: Collection[int]) -> MergeRequestPredicate:
    """Return a predicate matching merge requests written by one of ``author_ids``.

    An empty collection matches every merge request.
    """
    wanted = frozenset(author_ids)
    if not wanted:
        return lambda _merge_request: True
    return lambda merge_request: merge_request.author.id in wanted


class MergeRequestRepository:
    """Load merge requests for a project and attach the approvals each one still needs."""

    def __init__(
        self,
        client: "GitLabClient",
        project_id: int,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        """Bind the repository to a client and project.

        Without ``max_concurrency`` every approval request is issued at once.
        """
        self._client = client
        self._project_id = project_id
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def fetch_and_enrich(
        self,
        target_branch: str,
        predicate: MergeRequestPredicate,
    ) -> list[MergeRequest]:
        """Return matching open merge requests for ``target_branch`` with approvals filled in.

        Raises GitLabAPIError when the list request or any approval request fails;
        nothing is returned in that case.
        """
        candidates = await merge_requests.fetch_open_merge_requests(
            self._client,
            self._project_id,
            target_branch,
        )
        matching = [merge_request for merge_request in candidates if predicate(merge_request)]
        iids = [merge_request.iid for merge_request in matching]
        LOGGER.debug("iids for matching merge requests: %s", iids)

        results: list[ApprovalResult] = await asyncio.gather(
            *(self._fetch_approvals(iid) for iid in iids),
            return_exceptions=True,
        )
        approval_counts = _collect_approvals(results)
        LOGGER.debug("iids with approvals_needed: %s", approval_counts)

        merge_approvals(matching, approval_counts)
        return matching

    async def _fetch_approvals(self, iid: int) -> tuple[int, int]:
        guard: AbstractAsyncContextManager[object]
        guard = nullcontext() if self._semaphore is None else self._semaphore
        async with guard:
            return await approvals.fetch_approvals_needed(self._client, self._project_id, iid)


def _collect_approvals(results: Sequence[ApprovalResult]) -> list[tuple[int, int]]:
    """Fold gathered results into approval tuples, raising the first failure encountered."""
    collected: list[tuple[int, int]] = []
    for result in results:
        if isinstance(result, BaseException):
            LOGGER.error("Failed to fetch approvals: %s", result)
            raise result
        collected.append(result)
    return collected


def merge_approvals(
    merge_request_list: Iterable[MergeRequest],
    approval_counts: Iterable[tuple[int, int]],
) -> None:
    """Overwrite ``approvals_needed`` on each merge request whose iid has a fetched count.

    Counts for iids that match no merge request are ignored.
    """
    by_iid = dict(approval_counts)
    matched: set[int] = set()
    for merge_request in merge_request_list:
        if merge_request.iid not in by_iid:
            continue
        approvals_needed = by_iid[merge_request.iid]
        LOGGER.debug(
            "Updating approvals_needed for merge request !%s from %s -> %s",
            merge_request.iid,
            merge_request.approvals_needed,
            approvals_needed,
        )
        merge_request.approvals_needed = approvals_needed
        matched.add(merge_request.iid)
    unmatched = sorted(by_iid.keys() - matched)
    if unmatched:
        LOGGER.debug("Dropping approval counts for unknown iids: %s", unmatched)
