"""Merge command - merge head into base, park conflicts on a branch."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from pydantic_graph import End

from mergedown.core.actions import ActionsReporter
from mergedown.core.log import logger
from mergedown.core.result import RunResult
from mergedown.github.client import GitHubClient, HostingApi
from mergedown.workflow.deps import MergeDeps

if TYPE_CHECKING:
    from mergedown.core.config import State


class MergeCommand(BaseModel):
    """Merge head into base through the GitHub API.

    On success the ``result`` output is OK. On a conflict, a
    recovery branch named <head>_sync_<DD_MM_YYYY> is created (or
    moved) to head's latest commit, its ref becomes the ``result``
    output and the run fails so a human can resolve it there.
    Any other error reports FAILED.
    """

    run_date: date | None = Field(
        default=None,
        alias="date",
        description=(
            "Date used in the recovery branch name (YYYY-MM-DD); "
            "defaults to today"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)

    async def execute(
        self,
        state: State,
        api: HostingApi,
        reporter: ActionsReporter,
    ) -> RunResult:
        """Run the workflow graph with the given collaborators.

        Returns:
            RunResult reported by the Finish node
        """
        from mergedown.workflow.graph import create_workflow
        from mergedown.workflow.nodes import AttemptMerge

        git = state.config.git
        deps = MergeDeps(api=api, reporter=reporter)
        if self.run_date is not None:
            deps.today = self.run_date

        workflow = create_workflow()
        with logger.span(
            f"merge down {git.head} into {git.base}",
            owner=git.owner,
            repo=git.repo,
        ):
            async with workflow.iter(
                AttemptMerge(), state=state, deps=deps
            ) as run:
                async for node in run:
                    if isinstance(node, End):
                        return node.data

        # Finish always ends the graph
        raise RuntimeError("Merge workflow ended without a result")

    async def run_workflow(
        self,
        state: State,
        api: HostingApi | None = None,
        reporter: ActionsReporter | None = None,
    ) -> int:
        """Run a merge-down and report it.

        Args:
            state: State with config loaded
            api: Repository API; a GitHubClient built from config
                when omitted
            reporter: Output/failure reporter; built from the
                runner environment when omitted

        Returns:
            Exit code (0=merged or up to date, 1=conflict or error)
        """
        git = state.config.git
        logger.info(
            f"Merging {git.head} into {git.base} "
            f"in {git.owner}/{git.repo}"
        )
        reporter = reporter or ActionsReporter.from_environment()

        if api is not None:
            result = await self.execute(state, api, reporter)
        else:
            async with GitHubClient.from_config(state.config) as client:
                result = await self.execute(state, client, reporter)

        return result.exit_code
