"""Configuration management for the mrstat application."""

import os
from pathlib import Path
from typing import cast

from pydantic import AnyHttpUrl, Field, SecretStr, model_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE_ENV = "MRSTAT_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path("~/.mrstat.json")


def config_file_path() -> Path:
    """Return the JSON rc file consulted for settings, honouring MRSTAT_CONFIG_FILE."""
    raw = os.environ.get(CONFIG_FILE_ENV)
    path = Path(raw) if raw else DEFAULT_CONFIG_FILE
    return path.expanduser()


class AppSettings(BaseSettings):
    """Application settings loaded from the environment, a .env file, or the JSON rc file."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_prefix="MRSTAT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    gitlab_api_base: AnyHttpUrl = Field(
        default=cast("AnyHttpUrl", "https://gitlab.com/api/v4"),
        description="Base URL for the GitLab REST API.",
    )
    gitlab_token: SecretStr = Field(
        default=SecretStr(""),
        description="Personal access token sent as a bearer token.",
    )
    project_id: int = Field(
        default=0,
        description="Numeric ID of the project whose merge requests are monitored.",
    )
    target_branch: str = Field(
        default="main",
        description="Branch that reported merge requests must target.",
    )
    authors: dict[str, int] = Field(
        default_factory=dict,
        description="Mapping of author labels to GitLab user IDs. Empty reports every author.",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on concurrent approval requests. Unset means one request per merge request.",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds applied to every GitLab request.",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Place the JSON rc file below environment variables and .env values."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=config_file_path()),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _enforce_required_fields(self) -> "AppSettings":
        if not self.gitlab_token.get_secret_value():
            msg = "MRSTAT_GITLAB_TOKEN must be configured"
            raise ValueError(msg)
        if self.project_id <= 0:
            msg = "MRSTAT_PROJECT_ID must be configured"
            raise ValueError(msg)
        return self

    @property
    def author_ids(self) -> list[int]:
        """Return the configured author IDs in configuration order."""
        return list(self.authors.values())


def load_settings() -> AppSettings:
    """Load application settings from supported sources."""
    return AppSettings()
