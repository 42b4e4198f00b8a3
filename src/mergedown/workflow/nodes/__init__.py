"""Workflow nodes for the merge-down graph."""

from mergedown.workflow.nodes.attempt_merge import AttemptMerge
from mergedown.workflow.nodes.finish import Finish
from mergedown.workflow.nodes.prepare_recovery import PrepareRecoveryBranch

__all__ = [
    "AttemptMerge",
    "PrepareRecoveryBranch",
    "Finish",
]
