"""Factories for constructing common domain objects in tests."""

from __future__ import annotations

from typing import Any

from mrstat.models import Author, MergeRequest, MergeRequestState, MergeStatus


def build_authors() -> tuple[Author, Author, Author]:
    """Return two configured authors and one outsider."""
    alice = Author(id=10, name="Alice", username="alice")
    bob = Author(id=11, name="Bob", username="bob")
    mallory = Author(id=99, name="Mallory", username="mallory")
    return alice, bob, mallory


def build_merge_request(iid: int, **overrides: Any) -> MergeRequest:
    """Create a merge request with no blockers unless overridden."""
    alice, _, _ = build_authors()
    fields: dict[str, Any] = {
        "iid": iid,
        "title": f"Change {iid}",
        "author": alice,
        "source_branch": f"feature/{iid}",
        "web_url": f"https://gitlab.example.com/group/repo/-/merge_requests/{iid}",
        "labels": [],
        "blocking_discussions_resolved": True,
        "has_conflicts": False,
        "merge_status": MergeStatus.CAN_BE_MERGED,
        "state": MergeRequestState.OPENED,
    }
    fields.update(overrides)
    return MergeRequest(**fields)


def merge_request_payload(iid: int, *, author_id: int = 10, **overrides: Any) -> dict[str, Any]:
    """Return a list-endpoint JSON object for a merge request."""
    usernames = {10: "alice", 11: "bob", 99: "mallory"}
    username = usernames.get(author_id, f"user{author_id}")
    payload: dict[str, Any] = {
        "id": 1000 + iid,
        "iid": iid,
        "project_id": 7,
        "title": f"Change {iid}",
        "author": {"id": author_id, "name": username.title(), "username": username},
        "source_branch": f"feature/{iid}",
        "target_branch": "main",
        "web_url": f"https://gitlab.example.com/group/repo/-/merge_requests/{iid}",
        "labels": [],
        "blocking_discussions_resolved": True,
        "has_conflicts": False,
        "merge_status": "can_be_merged",
        "state": "opened",
        "draft": False,
        "work_in_progress": False,
    }
    payload.update(overrides)
    return payload
