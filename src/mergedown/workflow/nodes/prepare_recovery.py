"""PrepareRecoveryBranch node - park head's tip on a side branch."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from mergedown.core.config import State
from mergedown.core.log import logger
from mergedown.core.result import (
    RecoveryBranchReady,
    RunResult,
    conflict_needs_resolution,
    conflict_unresolved,
)
from mergedown.recovery import RecoveryBranchManager, recovery_branch_name
from mergedown.workflow.deps import MergeDeps
from mergedown.workflow.nodes.finish import Finish


@dataclass
class PrepareRecoveryBranch(BaseNode[State, MergeDeps, RunResult]):
    """Create or update today's recovery branch at head's tip."""

    async def run(self, ctx: GraphRunContext[State, MergeDeps]) -> Finish:
        """Ensure the recovery branch and build the conflict result.

        Returns:
            Finish: With ConflictNeedsResolution when the branch is
                ready, ConflictUnresolved otherwise
        """
        git = ctx.state.config.git
        name = recovery_branch_name(
            git.head, ctx.deps.today, suffix=git.recovery_suffix
        )
        merge_state = ctx.state.runtime.merge
        merge_state.recovery_branch = name
        merge_state.status = "recovering"

        manager = RecoveryBranchManager(ctx.deps.api)
        outcome = await manager.ensure_branch(name, git.head)
        merge_state.recovery = outcome

        if isinstance(outcome, RecoveryBranchReady):
            logger.info(
                f"Recovery branch {outcome.ref_name} is at "
                f"{outcome.ref.sha}; resolve the conflict there"
            )
            return Finish(conflict_needs_resolution(outcome.ref))

        logger.error(
            f"Recovery branch {name} could not be prepared "
            f"({outcome.stage}): {outcome.reason}"
        )
        return Finish(conflict_unresolved(name, outcome.reason))
