"""Approval fetchers for individual merge requests."""

from typing import TYPE_CHECKING, Any

from mrstat.gitlab_client import MissingDataError

if TYPE_CHECKING:
    from mrstat.gitlab_client import GitLabClient

APPROVALS_FIELD = "approvals_left"


def approvals_url(base_url: str, project_id: int, merge_request_iid: int) -> str:
    """Return the absolute approvals endpoint URL for a merge request."""
    return f"{base_url}/projects/{project_id}/merge_requests/{merge_request_iid}/approvals"


async def fetch_approvals_needed(
    client: "GitLabClient",
    project_id: int,
    merge_request_iid: int,
) -> tuple[int, int]:
    """Return ``(iid, approvals_left)`` for a merge request."""
    response = await client.get(approvals_url(client.base_url, project_id, merge_request_iid))
    payload: Any = client.parse_json(response)
    value = payload.get(APPROVALS_FIELD) if isinstance(payload, dict) else None
    # bool is an int subclass but never a valid count
    if not isinstance(value, int) or isinstance(value, bool):
        message = f"no approval data for merge request !{merge_request_iid}"
        raise MissingDataError(message, status_code=response.status_code)
    return merge_request_iid, value
