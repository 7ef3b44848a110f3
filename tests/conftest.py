"""Shared pytest fixtures for the mrstat test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mrstat.config import AppSettings

if TYPE_CHECKING:
    from pathlib import Path

pytest_plugins = ("respx",)


@pytest.fixture(autouse=True)
def isolated_config_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the rc file lookup at an empty temporary location."""
    config_file = tmp_path / "mrstat.json"
    monkeypatch.setenv("MRSTAT_CONFIG_FILE", str(config_file))
    return config_file


@pytest.fixture
def settings() -> AppSettings:
    """Provide application settings with deterministic defaults for tests."""
    return AppSettings.model_validate(
        {
            "gitlab_api_base": "https://gitlab.example.com/api/v4",
            "gitlab_token": "token",  # pragma: allowlist secret
            "project_id": 7,
            "target_branch": "main",
            "authors": {"alice": 10, "bob": 11},
        },
    )
