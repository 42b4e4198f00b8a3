"""Recovery branches for merges that need a human."""

from mergedown.recovery.branch import RecoveryBranchManager
from mergedown.recovery.naming import recovery_branch_name

__all__ = ["RecoveryBranchManager", "recovery_branch_name"]
