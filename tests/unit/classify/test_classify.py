"""Tests for blocker classification and partitioning."""

import pytest

from mrstat.classify import classify_and_partition, find_blockers, is_ready
from mrstat.models import MergeStatus
from tests.factories import build_merge_request


def test_find_blockers_reports_every_condition_in_order() -> None:
    """All four blocking conditions should be reported in their fixed order."""
    merge_request = build_merge_request(
        1,
        blocking_discussions_resolved=False,
        has_conflicts=True,
        merge_status=MergeStatus.CANNOT_BE_MERGED,
        approvals_needed=2,
    )

    assert find_blockers(merge_request) == [
        "unresolved threads",
        "has conflicts",
        "cannot be merged",
        "requires approval (2)",
    ]


def test_find_blockers_is_deterministic() -> None:
    """Repeated classification of the same merge request yields identical lists."""
    merge_request = build_merge_request(1, has_conflicts=True, approvals_needed=1)

    assert find_blockers(merge_request) == find_blockers(merge_request) == ["has conflicts", "requires approval (1)"]


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, []),
        ({"blocking_discussions_resolved": False}, ["unresolved threads"]),
        ({"has_conflicts": True}, ["has conflicts"]),
        ({"merge_status": MergeStatus.CANNOT_BE_MERGED_RECHECK}, ["cannot be merged"]),
        ({"merge_status": MergeStatus.UNCHECKED}, []),
        ({"merge_status": MergeStatus.CHECKING}, []),
        ({"approvals_needed": 3}, ["requires approval (3)"]),
    ],
    ids=["ready", "threads", "conflicts", "recheck", "unchecked", "checking", "approvals"],
)
def test_find_blockers_single_conditions(overrides: dict[str, object], expected: list[str]) -> None:
    """Each condition contributes at most one reason independently of the others."""
    merge_request = build_merge_request(1, **overrides)

    assert find_blockers(merge_request) == expected
    assert is_ready(merge_request) is (not expected)


def test_classify_and_partition_is_stable() -> None:
    """Ready and blocked groups keep the input order."""
    first = build_merge_request(1)
    blocked = build_merge_request(2, has_conflicts=True)
    last = build_merge_request(3)
    also_blocked = build_merge_request(4, approvals_needed=1)

    ready, blocked_group = classify_and_partition([first, blocked, last, also_blocked])

    assert [item.iid for item in ready] == [1, 3]
    assert [item.iid for item in blocked_group] == [2, 4]


def test_classify_and_partition_handles_empty_input() -> None:
    """An empty input yields two empty groups."""
    assert classify_and_partition([]) == ([], [])
