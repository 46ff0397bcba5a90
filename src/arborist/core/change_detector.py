"""Post-run change detection.

Decides whether an isolation holds work worth keeping. Both checks are
read-only. Any failure to answer is treated as DIRTY so an isolation is
never destroyed on a guess.
"""

import logging
from enum import Enum

from arborist.core.errors import DetectionError
from arborist.core.git.abc import Git
from arborist.core.provisioner import Isolation

logger = logging.getLogger(__name__)


class ChangeState(Enum):
    """Whether the isolation holds anything beyond its fork point."""

    CLEAN = "clean"
    DIRTY = "dirty"


def detect_changes(git: Git, isolation: Isolation) -> ChangeState:
    """Classify the isolation as CLEAN or DIRTY.

    DIRTY when the working tree has uncommitted modifications or untracked
    files, or when the isolation branch has commits beyond the fork point
    captured at provisioning. The live tip of the original branch plays no
    part, so an original branch that moved during the session does not make
    the isolation dirty.

    Args:
        git: Git operations interface
        isolation: The isolation provisioned for this invocation

    Returns:
        ChangeState.CLEAN or ChangeState.DIRTY
    """
    try:
        return _inspect(git, isolation)
    except DetectionError as e:
        logger.warning("Keeping %s: %s", isolation.branch, e)
        return ChangeState.DIRTY


def _inspect(git: Git, isolation: Isolation) -> ChangeState:
    if not git.path_exists(isolation.work_dir):
        raise DetectionError(f"{isolation.work_dir} no longer exists")

    try:
        if git.has_uncommitted_changes(isolation.work_dir):
            logger.debug("Uncommitted changes in %s", isolation.work_dir)
            return ChangeState.DIRTY

        ahead = git.count_commits_ahead(isolation.repo_dir, isolation.branch, isolation.fork_point)
    except (RuntimeError, ValueError) as e:
        raise DetectionError(str(e)) from e

    if ahead > 0:
        logger.debug(
            "%s is %d commit(s) ahead of %s", isolation.branch, ahead, isolation.fork_point
        )
        return ChangeState.DIRTY

    return ChangeState.CLEAN
