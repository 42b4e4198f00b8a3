"""Graph workflow definition."""

from pydantic_graph import Graph

from mergedown.core.config import State
from mergedown.core.log import logger
from mergedown.workflow.nodes import (
    AttemptMerge,
    Finish,
    PrepareRecoveryBranch,
)


def create_workflow() -> Graph:
    """Create the merge-down workflow graph.

    AttemptMerge -> Finish                        (merged / error)
    AttemptMerge -> PrepareRecoveryBranch -> Finish   (conflict)

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")
    return Graph(
        nodes=(AttemptMerge, PrepareRecoveryBranch, Finish),
        state_type=State,
    )
