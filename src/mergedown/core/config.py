"""Application state and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import platformdirs
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from mergedown.core.action_settings import ActionInputsSettingsSource
from mergedown.core.base import BaseConfig, BaseState
from mergedown.core.log import Logger
from mergedown.github.client import DEFAULT_API_URL

# ============================================================
# CONFIG MODELS (loaded from action inputs/YAML/env/CLI)
# ============================================================

class GitConfig(BaseConfig):
    """Repository and branches to merge."""

    base: str = Field(
        description="Branch that receives the merge (e.g. 'develop')"
    )
    head: str = Field(
        description="Branch merged into base (e.g. 'main')"
    )
    owner: str = Field(
        description="Repository owner (user or organization)"
    )
    repo: str = Field(description="Repository name")
    commit_message: str = Field(
        default="Auto merge down from {head}",
        description="Merge commit message; {head} and {base} expand",
    )
    recovery_suffix: str = Field(
        default="sync",
        description=(
            "Middle part of recovery branch names: "
            "<head>_<suffix>_<DD_MM_YYYY>"
        ),
    )

    @field_validator("base", "head", "owner", "repo")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("owner", "repo")
    @classmethod
    def _no_slash(cls, value: str) -> str:
        if "/" in value:
            raise ValueError(
                "must be a single path segment; set GITHUB_REPOSITORY "
                "as owner/repo"
            )
        return value

    def render_commit_message(self) -> str:
        return self.commit_message.format(head=self.head, base=self.base)


class GitHubConfig(BaseConfig):
    """GitHub API access."""

    token: SecretStr = Field(
        description="Token with contents:write on the repository"
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="REST API root (GitHub Enterprise: https://HOST/api/v3)",
    )
    timeout: float = Field(
        default=30.0, description="HTTP timeout in seconds"
    )


class Config(BaseConfig):
    """Everything a run needs, grouped by concern."""

    logger: Logger | None = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    git: GitConfig = Field(description="Repository and branches")
    github: GitHubConfig = Field(description="GitHub API access")
    log_level: str = Field(
        default="info",
        alias="log-level",
        description="Console log level: debug, info, warn, error",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "mergedown"
        ),
        description="Root directory for log files",
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def run_name(self) -> str:
        """Filesystem-safe name for this run's log directory."""
        return f"{self.git.repo}-{self.git.head}".replace("/", "-")

    @model_validator(mode="after")
    def _setup_logger(self) -> Config:
        """Install the global logger from this configuration."""
        from mergedown.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger(level=self.log_level)

        self.logger = setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
        )
        return self


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class MergeState(BaseState):
    """Merge workflow runtime state."""

    status: str = Field(
        default="pending",
        description=(
            "pending, merging, merged, conflicted, recovering, "
            "failed, complete"
        ),
    )
    outcome: Any = Field(
        default=None, description="MergeOutcome of the merge call"
    )
    recovery_branch: str | None = Field(
        default=None, description="Recovery branch name, once computed"
    )
    recovery: Any = Field(
        default=None,
        description="RecoveryOutcome of preparing the recovery branch",
    )
    result: Any = Field(default=None, description="Final RunResult")


class Runtime(BaseModel):
    """Runtime state grouped by workflow."""

    merge: MergeState = Field(default_factory=MergeState)


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Complete application state - configuration and runtime.

    This is the object that flows through the workflow graph.

    Configuration sources, highest priority first:
    1. init arguments / CLI (--config.git.base develop)
    2. GitHub Actions inputs (INPUT_BASE, INPUT_HEAD,
       INPUT_GITHUB_TOKEN, GITHUB_REPOSITORY, GITHUB_API_URL)
    3. mergedown.yaml in the working directory
    4. .env file
    5. environment (MERGEDOWN_CONFIG__GIT__BASE=develop)
    """

    config: Config = Field(description="Run configuration")
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during the run)",
    )

    model_config = SettingsConfigDict(
        yaml_file="mergedown.yaml",
        env_file=".env",
        env_prefix="MERGEDOWN_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        extra="ignore",
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
        return (
            init_settings,
            ActionInputsSettingsSource(settings_cls),
            YamlConfigSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


__all__ = [
    "GitConfig",
    "GitHubConfig",
    "Config",
    "MergeState",
    "Runtime",
    "State",
]
