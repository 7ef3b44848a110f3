"""Derive blocking reasons for merge requests and group them by readiness."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mrstat.models import MergeRequest

UNRESOLVED_THREADS = "unresolved threads"
HAS_CONFLICTS = "has conflicts"
CANNOT_BE_MERGED = "cannot be merged"


def find_blockers(merge_request: "MergeRequest") -> list[str]:
    """Return the reasons preventing a merge, in a fixed order. Empty means ready."""
    blockers: list[str] = []
    if not merge_request.blocking_discussions_resolved:
        blockers.append(UNRESOLVED_THREADS)
    if merge_request.has_conflicts:
        blockers.append(HAS_CONFLICTS)
    if merge_request.merge_status.is_unmergeable:
        blockers.append(CANNOT_BE_MERGED)
    if merge_request.approvals_needed > 0:
        blockers.append(f"requires approval ({merge_request.approvals_needed})")
    return blockers


def is_ready(merge_request: "MergeRequest") -> bool:
    """Return True when nothing blocks the merge request."""
    return not find_blockers(merge_request)


def classify_and_partition(
    merge_request_list: Iterable["MergeRequest"],
) -> tuple[list["MergeRequest"], list["MergeRequest"]]:
    """Split merge requests into ``(ready, blocked)``, keeping input order within each group."""
    ready: list[MergeRequest] = []
    blocked: list[MergeRequest] = []
    for merge_request in merge_request_list:
        (ready if is_ready(merge_request) else blocked).append(merge_request)
    return ready, blocked
