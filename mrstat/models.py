"""Pydantic models describing the GitLab entities used by the monitor."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    """Immutable author details; two authors are the same person when their IDs match."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    username: str

    def __eq__(self, other: object) -> bool:
        """Compare authors by GitLab user ID only."""
        if not isinstance(other, Author):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash authors by GitLab user ID only."""
        return hash(self.id)


class MergeStatus(StrEnum):
    """Mergeability reported by GitLab for a merge request."""

    UNCHECKED = "unchecked"
    CHECKING = "checking"
    CAN_BE_MERGED = "can_be_merged"
    CANNOT_BE_MERGED = "cannot_be_merged"
    CANNOT_BE_MERGED_RECHECK = "cannot_be_merged_recheck"

    @property
    def is_unmergeable(self) -> bool:
        """Return True for the statuses GitLab uses to refuse a merge."""
        return self in (MergeStatus.CANNOT_BE_MERGED, MergeStatus.CANNOT_BE_MERGED_RECHECK)


class MergeRequestState(StrEnum):
    """Lifecycle state of a merge request."""

    OPENED = "opened"
    CLOSED = "closed"
    MERGED = "merged"


def _empty_labels() -> list[str]:
    return []


class MergeRequest(BaseModel):
    """Merge request fields needed to decide whether it is ready to merge.

    ``approvals_needed`` is not part of the list payload. It stays at zero until
    the repository overwrites it with the count from the approvals endpoint.
    """

    model_config = ConfigDict(extra="ignore")

    iid: int
    title: str
    author: Author
    source_branch: str
    web_url: str
    labels: list[str] = Field(default_factory=_empty_labels)
    blocking_discussions_resolved: bool
    has_conflicts: bool
    merge_status: MergeStatus
    state: MergeRequestState
    approvals_needed: int = 0
    draft: bool = False
    work_in_progress: bool = False
