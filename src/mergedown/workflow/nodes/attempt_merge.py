"""AttemptMerge node - merge head into base on the server."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from mergedown.core.config import State
from mergedown.core.log import logger
from mergedown.core.result import (
    MergeConflicted,
    MergeErrored,
    MergeSucceeded,
    RunFailed,
    RunOk,
    RunResult,
)
from mergedown.github.errors import GitHubError, MergeConflictError
from mergedown.workflow.deps import MergeDeps
from mergedown.workflow.nodes.finish import Finish
from mergedown.workflow.nodes.prepare_recovery import PrepareRecoveryBranch


@dataclass
class AttemptMerge(BaseNode[State, MergeDeps, RunResult]):
    """Issue the single merge request of a run and classify it."""

    async def run(
        self, ctx: GraphRunContext[State, MergeDeps]
    ) -> PrepareRecoveryBranch | Finish:
        """Merge head into base.

        Returns:
            Finish: On success, or on a non-conflict error
            PrepareRecoveryBranch: On a merge conflict
        """
        git = ctx.state.config.git
        merge_state = ctx.state.runtime.merge
        merge_state.status = "merging"

        try:
            commit = await ctx.deps.api.merge_branches(
                base=git.base,
                head=git.head,
                commit_message=git.render_commit_message(),
            )
        except MergeConflictError as e:
            merge_state.outcome = MergeConflicted(message=e.message)
            merge_state.status = "conflicted"
            logger.error(
                f"Merge conflict: Could not merge {git.head} into "
                f"{git.base}."
            )
            return PrepareRecoveryBranch()
        except GitHubError as e:
            merge_state.outcome = MergeErrored(
                message=e.message, status=e.status
            )
            logger.error(f"Error merging branches: {e}")
            return Finish(RunFailed(message=str(e)))

        outcome = MergeSucceeded(sha=commit.sha if commit else None)
        merge_state.outcome = outcome
        merge_state.status = "merged"
        if outcome.up_to_date:
            logger.info(f"{git.base} already contains {git.head}")
        else:
            logger.info(
                f"Merged {git.head} into {git.base} as {outcome.sha}"
            )
        return Finish(RunOk())
