"""Settings source for the GitHub Actions runner environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

# Action input name -> (config section, field)
ACTION_INPUTS = {
    "base": ("git", "base"),
    "head": ("git", "head"),
    "github_token": ("github", "token"),
}


def _input_env_name(name: str) -> str:
    """Runner convention: INPUT_ + upper-cased name, spaces as _."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


class ActionInputsSettingsSource(PydanticBaseSettingsSource):
    """Map action inputs and runner variables onto State.config.

    Reads:
    - INPUT_BASE, INPUT_HEAD, INPUT_GITHUB_TOKEN (action inputs)
    - GITHUB_REPOSITORY as owner/repo
    - GITHUB_API_URL for GitHub Enterprise servers

    Empty variables are treated as unset, matching how the
    runner passes inputs that were not given in the workflow.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        environ: Mapping[str, str] | None = None,
    ):
        super().__init__(settings_cls)
        self.environ = os.environ if environ is None else environ

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        # Values are produced in bulk by __call__
        return None, field_name, False

    def _get(self, name: str) -> str | None:
        value = self.environ.get(name, "").strip()
        return value or None

    def __call__(self) -> dict[str, Any]:
        config: dict[str, dict[str, Any]] = {}

        for name, (section, key) in ACTION_INPUTS.items():
            value = self._get(_input_env_name(name))
            if value is not None:
                config.setdefault(section, {})[key] = value

        repository = self._get("GITHUB_REPOSITORY")
        if repository is not None:
            owner, _, repo = repository.partition("/")
            git = config.setdefault("git", {})
            git["owner"] = owner
            git["repo"] = repo

        api_url = self._get("GITHUB_API_URL")
        if api_url is not None:
            config.setdefault("github", {})["api_url"] = api_url

        return {"config": config} if config else {}


__all__ = ["ActionInputsSettingsSource", "ACTION_INPUTS"]
