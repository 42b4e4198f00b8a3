"""Async GitHub REST client for the calls a merge-down run makes."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from mergedown.core.log import logger
from mergedown.github.errors import (
    GitHubError,
    GitHubTransportError,
    error_from_response,
)
from mergedown.github.models import Branch, GitRef, MergeCommit

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


def _parse(model: type[BaseModel], response: httpx.Response, operation: str):
    """Validate a successful response body against model."""
    try:
        return model.model_validate(response.json())
    except ValueError as e:  # bad JSON or pydantic ValidationError
        raise GitHubError(
            f"Unexpected response body: {e}",
            status=response.status_code,
            operation=operation,
        ) from e


@runtime_checkable
class HostingApi(Protocol):
    """Repository operations a merge-down run depends on.

    GitHubClient is the real implementation; tests provide an
    in-memory one. All failures are raised as GitHubError
    subclasses.
    """

    async def merge_branches(
        self, base: str, head: str, commit_message: str
    ) -> MergeCommit | None:
        ...

    async def get_branch(self, branch: str) -> Branch:
        ...

    async def create_ref(self, ref: str, sha: str) -> GitRef:
        ...

    async def update_ref(
        self, ref: str, sha: str, force: bool = True
    ) -> GitRef:
        ...


class GitHubClient:
    """HostingApi backed by the GitHub REST API.

    One client is bound to one repository. Use it as an async
    context manager, or call aclose() when done.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self._http = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "mergedown",
            },
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: Any,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GitHubClient:
        """Build a client from a mergedown Config."""
        return cls(
            owner=config.git.owner,
            repo=config.git.repo,
            token=config.github.token.get_secret_value(),
            api_url=config.github.api_url,
            timeout=config.github.timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        await self.aclose()
        return False

    @property
    def _repo_path(self) -> str:
        owner = quote(self.owner, safe="")
        repo = quote(self.repo, safe="")
        return f"/repos/{owner}/{repo}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = self._repo_path + path
        logger.debug(f"GitHub {method} {url}")
        try:
            response = await self._http.request(method, url, json=json)
        except httpx.RequestError as e:
            raise GitHubTransportError(
                str(e) or type(e).__name__, operation=operation
            ) from e

        if response.is_error:
            raise error_from_response(response, operation)
        return response

    async def merge_branches(
        self, base: str, head: str, commit_message: str
    ) -> MergeCommit | None:
        """Merge head into base on the server.

        Returns:
            The merge commit, or None when base already contains head

        Raises:
            MergeConflictError: On a merge conflict (409)
            GitHubError: Any other failure
        """
        response = await self._request(
            "merge",
            "POST",
            "/merges",
            json={
                "base": base,
                "head": head,
                "commit_message": commit_message,
            },
        )
        if response.status_code == 204:
            return None
        return _parse(MergeCommit, response, "merge")

    async def get_branch(self, branch: str) -> Branch:
        response = await self._request(
            "get_branch", "GET", f"/branches/{quote(branch, safe='')}"
        )
        return _parse(Branch, response, "get_branch")

    async def create_ref(self, ref: str, sha: str) -> GitRef:
        """Create ``ref`` (fully qualified, e.g. refs/heads/x) at sha.

        Raises:
            ReferenceExistsError: If the reference already exists
            GitHubError: Any other failure
        """
        response = await self._request(
            "create_ref", "POST", "/git/refs", json={"ref": ref, "sha": sha}
        )
        return _parse(GitRef, response, "create_ref")

    async def update_ref(
        self, ref: str, sha: str, force: bool = True
    ) -> GitRef:
        """Point ``ref`` (e.g. heads/x, no refs/ prefix) at sha."""
        response = await self._request(
            "update_ref",
            "PATCH",
            f"/git/refs/{quote(ref, safe='/')}",
            json={"sha": sha, "force": force},
        )
        return _parse(GitRef, response, "update_ref")


__all__ = ["HostingApi", "GitHubClient", "DEFAULT_API_URL", "API_VERSION"]
