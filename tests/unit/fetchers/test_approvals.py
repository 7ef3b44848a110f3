"""Tests for the per merge request approvals fetcher."""

from typing import TYPE_CHECKING, Any

import pytest
from httpx import Response

from mrstat.fetchers.approvals import fetch_approvals_needed
from mrstat.gitlab_client import GitLabClient, MissingDataError

if TYPE_CHECKING:
    from mrstat.config import AppSettings
    from respx import MockRouter

APPROVALS_URL = "https://gitlab.example.com/api/v4/projects/7/merge_requests/42/approvals"


@pytest.mark.asyncio
async def test_fetch_approvals_needed_reads_approvals_left(
    settings: "AppSettings",
    respx_mock: "MockRouter",
) -> None:
    """The fetcher should pair the iid with the remaining approvals count."""
    route = respx_mock.get(APPROVALS_URL).mock(
        return_value=Response(
            200,
            json={"id": 1042, "iid": 42, "approvals_required": 2, "approvals_left": 1},
        ),
    )

    async with GitLabClient(settings) as client:
        result = await fetch_approvals_needed(client, 7, 42)

    assert route.called
    assert result == (42, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"iid": 42},
        {"iid": 42, "approvals_left": None},
        {"iid": 42, "approvals_left": "2"},
        {"iid": 42, "approvals_left": True},
        [{"approvals_left": 1}],
    ],
    ids=["absent", "null", "string", "boolean", "not-an-object"],
)
async def test_fetch_approvals_needed_requires_integer_field(
    settings: "AppSettings",
    respx_mock: "MockRouter",
    payload: Any,
) -> None:
    """Missing or non-integer approval counts should raise MissingDataError."""
    respx_mock.get(APPROVALS_URL).mock(return_value=Response(200, json=payload))

    async with GitLabClient(settings) as client:
        with pytest.raises(MissingDataError) as excinfo:
            await fetch_approvals_needed(client, 7, 42)

    assert "no approval data" in str(excinfo.value)
