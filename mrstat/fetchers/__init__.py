"""Fetchers for GitLab endpoints consulted by the monitor."""

from . import approvals, merge_requests

__all__ = [
    "approvals",
    "merge_requests",
]
