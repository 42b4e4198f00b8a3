"""Error types for GitHub API failures.

Callers catch these types instead of looking at status codes or
message text. error_from_response() is the single place where a
failed HTTP response is classified.
"""

from __future__ import annotations

import httpx

REFERENCE_EXISTS_MESSAGE = "Reference already exists"


class GitHubError(Exception):
    """A GitHub API call failed.

    Attributes:
        operation: Client operation that failed (merge, get_branch...)
        status: HTTP status, or None when no response was received
        message: Message from the API payload, or transport error text
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        operation: str = "",
        documentation_url: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.operation = operation
        self.documentation_url = documentation_url

    def __str__(self) -> str:
        if self.status is None:
            return f"{self.operation}: {self.message}"
        return f"{self.operation}: {self.status} {self.message}"


class MergeConflictError(GitHubError):
    """Merge could not complete because of conflicting changes."""


class ReferenceExistsError(GitHubError):
    """Creating a reference failed because it already exists."""


class GitHubTransportError(GitHubError):
    """No usable response: connection, timeout or protocol error."""


def _payload_message(response: httpx.Response) -> tuple[str, str | None]:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if not isinstance(payload, dict):
        return str(payload), None
    return (
        str(payload.get("message") or response.reason_phrase),
        payload.get("documentation_url"),
    )


def error_from_response(
    response: httpx.Response, operation: str
) -> GitHubError:
    """Classify a failed response into a GitHubError subclass.

    409 is a conflict only for merges; other endpoints use 409
    for unrelated states such as an empty repository.
    """
    message, docs = _payload_message(response)
    status = response.status_code

    if status == 409 and operation == "merge":
        cls = MergeConflictError
    elif (
        status == 422
        and operation == "create_ref"
        and REFERENCE_EXISTS_MESSAGE.lower() in message.lower()
    ):
        cls = ReferenceExistsError
    else:
        cls = GitHubError

    return cls(
        message, status=status, operation=operation, documentation_url=docs
    )


__all__ = [
    "REFERENCE_EXISTS_MESSAGE",
    "GitHubError",
    "MergeConflictError",
    "ReferenceExistsError",
    "GitHubTransportError",
    "error_from_response",
]
