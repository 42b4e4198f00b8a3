"""Finish node - report the run result."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from mergedown.core.config import State
from mergedown.core.log import logger
from mergedown.core.result import RunResult
from mergedown.workflow.deps import MergeDeps


@dataclass
class Finish(BaseNode[State, MergeDeps, RunResult]):
    """Emit the ``result`` output and, if needed, the failure."""

    result: RunResult

    async def run(
        self, ctx: GraphRunContext[State, MergeDeps]
    ) -> End[RunResult]:
        """Report the result exactly once.

        Returns:
            End[RunResult]: The reported result
        """
        reporter = ctx.deps.reporter
        reporter.set_output("result", self.result.output)
        if self.result.failure is not None:
            reporter.set_failed(self.result.failure)

        ctx.state.runtime.merge.result = self.result
        ctx.state.runtime.merge.status = (
            "failed" if self.result.failed else "complete"
        )
        logger.info(
            f"Run finished: result={self.result.output} "
            f"exit_code={self.result.exit_code}"
        )
        return End(self.result)
