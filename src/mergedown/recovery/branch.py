"""Create or force-update recovery branches."""

from __future__ import annotations

from mergedown.core.log import logger
from mergedown.core.result import (
    RecoveryBranchFailed,
    RecoveryBranchReady,
    RecoveryOutcome,
)
from mergedown.github.client import HostingApi
from mergedown.github.errors import GitHubError, ReferenceExistsError


class RecoveryBranchManager:
    """Point a named branch at the tip of a source branch.

    The branch is created when missing and force-moved when it
    already exists, so repeated calls converge on the source
    branch's current commit. Failures are returned as
    RecoveryBranchFailed instead of raised.
    """

    def __init__(self, api: HostingApi):
        self.api = api

    async def ensure_branch(
        self, name: str, source_branch: str
    ) -> RecoveryOutcome:
        """Make branch ``name`` point at ``source_branch``'s tip.

        Args:
            name: Branch to create or update (without refs/heads/)
            source_branch: Branch whose latest commit is used

        Returns:
            RecoveryBranchReady with the resulting reference, or
            RecoveryBranchFailed naming the step that failed
        """
        try:
            source = await self.api.get_branch(source_branch)
        except GitHubError as e:
            logger.error(
                f"Could not look up branch '{source_branch}': {e}"
            )
            return RecoveryBranchFailed(stage="lookup", reason=str(e))

        latest_commit_sha = source.sha
        logger.debug(f"'{source_branch}' is at {latest_commit_sha}")

        try:
            ref = await self.api.create_ref(
                f"refs/heads/{name}", latest_commit_sha
            )
        except ReferenceExistsError:
            logger.info(
                f"Branch '{name}' already exists. Attempting to "
                f"fast-forward."
            )
        except GitHubError as e:
            logger.error(f"Error creating branch '{name}': {e}")
            return RecoveryBranchFailed(stage="create", reason=str(e))
        else:
            logger.info(f"Branch '{name}' created successfully.")
            return RecoveryBranchReady(ref=ref, created=True)

        try:
            ref = await self.api.update_ref(
                f"heads/{name}", latest_commit_sha, force=True
            )
        except GitHubError as e:
            logger.error(f"Error updating branch '{name}': {e}")
            return RecoveryBranchFailed(stage="update", reason=str(e))

        logger.info(
            f"Branch '{name}' fast-forwarded to the latest commit."
        )
        return RecoveryBranchReady(ref=ref, created=False)
