"""Subset of GitHub REST payloads used by mergedown.

Only the fields we read are declared; everything else the API
returns is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CommitPointer(BaseModel):
    sha: str
    url: str | None = None


class Branch(BaseModel):
    """GET /repos/{owner}/{repo}/branches/{branch}"""

    name: str
    commit: CommitPointer
    protected: bool = False

    @property
    def sha(self) -> str:
        return self.commit.sha


class MergeCommit(BaseModel):
    """POST /repos/{owner}/{repo}/merges (201)"""

    sha: str
    html_url: str | None = None


class GitObject(BaseModel):
    sha: str
    type: str = "commit"
    url: str | None = None


class GitRef(BaseModel):
    """A git reference such as refs/heads/main."""

    model_config = ConfigDict(populate_by_name=True)

    ref: str
    target: GitObject = Field(alias="object")
    url: str | None = None

    @property
    def sha(self) -> str:
        return self.target.sha


__all__ = ["CommitPointer", "Branch", "MergeCommit", "GitObject", "GitRef"]
