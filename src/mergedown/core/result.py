"""Result types for a merge-down run.

Three small families of value objects:

- MergeOutcome: what the merge call produced
- RecoveryOutcome: what the recovery branch manager produced
- RunResult: what the run reports to the CI system

Each family is a closed set of pydantic models with a ``kind``
literal so they serialize and compare cleanly.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from mergedown.github.models import GitRef

OK = "OK"
FAILED = "FAILED"

CONFLICT_MESSAGE = "Conflict needs to be resolved, abort merging down"
UNKNOWN_ERROR_MESSAGE = "Unknown error"


# ============================================================
# MERGE OUTCOME
# ============================================================

class MergeSucceeded(BaseModel):
    """Merge created a commit, or head was already merged."""

    kind: Literal["succeeded"] = "succeeded"
    sha: str | None = None

    @property
    def up_to_date(self) -> bool:
        return self.sha is None


class MergeConflicted(BaseModel):
    """Merge stopped on a conflict."""

    kind: Literal["conflicted"] = "conflicted"
    message: str = ""


class MergeErrored(BaseModel):
    """Merge failed for any reason other than a conflict."""

    kind: Literal["errored"] = "errored"
    message: str
    status: int | None = None


MergeOutcome = MergeSucceeded | MergeConflicted | MergeErrored


# ============================================================
# RECOVERY OUTCOME
# ============================================================

class RecoveryBranchReady(BaseModel):
    """Recovery branch points at the source branch's tip."""

    kind: Literal["ready"] = "ready"
    ref: GitRef
    created: bool

    @property
    def ref_name(self) -> str:
        return self.ref.ref


class RecoveryBranchFailed(BaseModel):
    """Recovery branch could not be prepared."""

    kind: Literal["failed"] = "failed"
    stage: Literal["lookup", "create", "update"]
    reason: str


RecoveryOutcome = RecoveryBranchReady | RecoveryBranchFailed


# ============================================================
# RUN RESULT
# ============================================================

class RunResult(BaseModel):
    """Base for the final result of a run.

    ``output`` is the value reported as the ``result`` output;
    ``failure`` is the failure message, None when the run passed.
    """

    output: str
    failure: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class RunOk(RunResult):
    kind: Literal["ok"] = "ok"
    output: str = OK


class ConflictNeedsResolution(RunResult):
    """Conflict, with a recovery branch ready for a human."""

    kind: Literal["conflict"] = "conflict"
    ref: GitRef
    failure: str | None = CONFLICT_MESSAGE


class ConflictUnresolved(RunResult):
    """Conflict, and the recovery branch could not be prepared."""

    kind: Literal["conflict_unresolved"] = "conflict_unresolved"
    branch: str
    reason: str
    output: str = FAILED


class RunFailed(RunResult):
    kind: Literal["failed"] = "failed"
    output: str = FAILED
    failure: str | None = UNKNOWN_ERROR_MESSAGE
    message: str = ""


def conflict_needs_resolution(ref: GitRef) -> ConflictNeedsResolution:
    return ConflictNeedsResolution(output=ref.ref, ref=ref)


def conflict_unresolved(branch: str, reason: str) -> ConflictUnresolved:
    return ConflictUnresolved(
        branch=branch,
        reason=reason,
        failure=(
            f"Conflict needs to be resolved, but recovery branch "
            f"{branch} could not be prepared: {reason}"
        ),
    )


__all__ = [
    "OK",
    "FAILED",
    "CONFLICT_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "MergeSucceeded",
    "MergeConflicted",
    "MergeErrored",
    "MergeOutcome",
    "RecoveryBranchReady",
    "RecoveryBranchFailed",
    "RecoveryOutcome",
    "RunResult",
    "RunOk",
    "ConflictNeedsResolution",
    "ConflictUnresolved",
    "RunFailed",
    "conflict_needs_resolution",
    "conflict_unresolved",
]
