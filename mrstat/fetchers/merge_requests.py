"""Merge request fetchers for GitLab projects."""

from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from mrstat.gitlab_client import DeserializationError
from mrstat.models import MergeRequest

if TYPE_CHECKING:
    from mrstat.gitlab_client import GitLabClient

_MERGE_REQUEST_LIST = TypeAdapter(list[MergeRequest])


def merge_requests_path(project_id: int) -> str:
    """Return the list endpoint for a project's merge requests."""
    return f"/projects/{project_id}/merge_requests"


async def fetch_open_merge_requests(
    client: "GitLabClient",
    project_id: int,
    target_branch: str,
) -> list[MergeRequest]:
    """Return every open merge request of the project that targets ``target_branch``."""
    params = {
        "state": "opened",
        "scope": "all",
        "target_branch": target_branch,
    }
    response = await client.get(merge_requests_path(project_id), params=params)
    payload: Any = client.parse_json(response)
    try:
        return _MERGE_REQUEST_LIST.validate_python(payload)
    except ValidationError as exc:
        message = f"Unexpected merge request payload for project {project_id}: {exc}"
        raise DeserializationError(message, status_code=response.status_code) from exc
