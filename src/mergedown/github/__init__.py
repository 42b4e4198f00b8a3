"""GitHub REST API access."""

from mergedown.github.client import GitHubClient, HostingApi
from mergedown.github.errors import (
    GitHubError,
    GitHubTransportError,
    MergeConflictError,
    ReferenceExistsError,
)
from mergedown.github.models import Branch, GitRef, MergeCommit

__all__ = [
    "GitHubClient",
    "HostingApi",
    "GitHubError",
    "GitHubTransportError",
    "MergeConflictError",
    "ReferenceExistsError",
    "Branch",
    "GitRef",
    "MergeCommit",
]
