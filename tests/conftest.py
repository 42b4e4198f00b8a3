"""Pytest configuration and fixtures for mergedown tests."""

import tempfile
from pathlib import Path

import pytest

from mergedown.core.log import ConsoleSink, setup_logger
from mergedown.github.errors import (
    GitHubError,
    MergeConflictError,
    ReferenceExistsError,
)
from mergedown.github.models import (
    Branch,
    CommitPointer,
    GitObject,
    GitRef,
    MergeCommit,
)

RUNNER_VARIABLES = (
    "INPUT_BASE",
    "INPUT_HEAD",
    "INPUT_GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
)


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only debug logging, nothing sent to logfire.dev."""
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "mergedown-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Hide the real runner environment and any local config files.

    The suite itself may run on GitHub Actions, where
    GITHUB_REPOSITORY and GITHUB_OUTPUT are always set.
    """
    for name in RUNNER_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class FakeHostingApi:
    """In-memory repository implementing the HostingApi protocol.

    Branches map name -> commit sha. Set ``conflict`` to make the
    merge fail with a conflict, or one of the ``*_error``
    attributes to make that call raise.
    """

    def __init__(self, branches=None):
        self.branches = dict(branches or {})
        self.calls = []
        self.conflict = False
        self.merge_error = None
        self.get_branch_error = None
        self.create_ref_error = None
        self.update_ref_error = None

    def calls_to(self, operation):
        return [call for call in self.calls if call[0] == operation]

    async def merge_branches(self, base, head, commit_message):
        self.calls.append(("merge", base, head, commit_message))
        if self.merge_error is not None:
            raise self.merge_error
        if self.conflict:
            raise MergeConflictError(
                "Merge conflict", status=409, operation="merge"
            )
        if self.branches[base] == self.branches[head]:
            return None
        sha = f"merge{len(self.calls):04d}"
        self.branches[base] = sha
        return MergeCommit(sha=sha)

    async def get_branch(self, branch):
        self.calls.append(("get_branch", branch))
        if self.get_branch_error is not None:
            raise self.get_branch_error
        if branch not in self.branches:
            raise GitHubError(
                "Branch not found", status=404, operation="get_branch"
            )
        return Branch(
            name=branch, commit=CommitPointer(sha=self.branches[branch])
        )

    async def create_ref(self, ref, sha):
        self.calls.append(("create_ref", ref, sha))
        if self.create_ref_error is not None:
            raise self.create_ref_error
        name = ref.removeprefix("refs/heads/")
        if name in self.branches:
            raise ReferenceExistsError(
                "Reference already exists",
                status=422,
                operation="create_ref",
            )
        self.branches[name] = sha
        return GitRef(ref=ref, object=GitObject(sha=sha))

    async def update_ref(self, ref, sha, force=True):
        self.calls.append(("update_ref", ref, sha, force))
        if self.update_ref_error is not None:
            raise self.update_ref_error
        name = ref.removeprefix("heads/")
        if name not in self.branches:
            raise GitHubError(
                "Reference does not exist",
                status=422,
                operation="update_ref",
            )
        self.branches[name] = sha
        return GitRef(ref=f"refs/heads/{name}", object=GitObject(sha=sha))


@pytest.fixture
def fake_api():
    """Repository with diverged main and develop branches."""
    return FakeHostingApi(
        branches={"main": "a" * 40, "develop": "b" * 40}
    )


@pytest.fixture
def make_state():
    """Build a State from explicit config, no CLI/env parsing."""
    from mergedown.core.config import State

    def _make_state(**git):
        git_config = {
            "base": "develop",
            "head": "main",
            "owner": "octo",
            "repo": "widgets",
        }
        git_config.update(git)
        return State(
            config={
                "git": git_config,
                "github": {"token": "test-token"},
                "logger": {"console": {"level": "debug"}},
            }
        )

    return _make_state
