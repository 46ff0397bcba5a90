"""Retention policy applied once the wrapped command has exited.

A CLEAN isolation is removed and the repository put back the way it was
found. A DIRTY one is left exactly as the command left it. Cleanup failures
are collected and reported, never raised, so they cannot replace the wrapped
command's exit status.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from arborist.core.change_detector import ChangeState
from arborist.core.errors import CleanupError
from arborist.core.git.abc import Git
from arborist.core.provisioner import Isolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Removed:
    """The isolation was deleted and the original state restored."""

    isolation: Isolation


@dataclass(frozen=True)
class Retained:
    """The isolation holds work and was left in place."""

    isolation: Isolation


@dataclass(frozen=True)
class Orphaned:
    """The isolation was clean but could not be fully removed.

    branch_checked_out is set when switching back failed, so the isolation
    branch is still checked out in the repository.
    """

    isolation: Isolation
    errors: tuple[CleanupError, ...] = field(default_factory=tuple)
    branch_checked_out: bool = False


Disposition = Removed | Retained | Orphaned


@dataclass(frozen=True)
class Outcome:
    """Terminal result of one invocation.

    disposition is None when there was nothing to isolate (non-repository).
    """

    exit_code: int
    disposition: Disposition | None = None


def finalize(git: Git, isolation: Isolation, change_state: ChangeState) -> Disposition:
    """Remove a CLEAN isolation or retain a DIRTY one.

    Args:
        git: Git operations interface
        isolation: The isolation provisioned for this invocation
        change_state: Result of detect_changes()

    Returns:
        Removed, Retained, or Orphaned when removal partly failed
    """
    if change_state is ChangeState.DIRTY:
        logger.debug("Retaining %s", isolation.branch)
        return Retained(isolation=isolation)

    if isolation.worktree_path is not None:
        errors = _remove_worktree_and_branch(git, isolation, isolation.worktree_path)
    else:
        restore_error = _restore_original_ref(git, isolation)
        if restore_error is not None:
            return Orphaned(isolation=isolation, errors=(restore_error,), branch_checked_out=True)
        errors = _delete_branch(git, isolation)

    if errors:
        return Orphaned(isolation=isolation, errors=tuple(errors))
    logger.debug("Removed %s", isolation.branch)
    return Removed(isolation=isolation)


def _restore_original_ref(git: Git, isolation: Isolation) -> CleanupError | None:
    restore_ref = isolation.restore_ref
    if restore_ref is None:
        return CleanupError(f"No original state recorded for {isolation.branch}")

    try:
        if isolation.restore_detached:
            git.checkout_detached(isolation.repo_dir, restore_ref)
        else:
            git.checkout_branch(isolation.repo_dir, restore_ref)
    except RuntimeError as e:
        return CleanupError(f"Could not check out '{restore_ref}': {e}")
    return None


def _delete_branch(git: Git, isolation: Isolation) -> list[CleanupError]:
    try:
        git.delete_branch(isolation.repo_dir, isolation.branch, force=True)
    except RuntimeError as e:
        return [CleanupError(f"Could not delete branch '{isolation.branch}': {e}")]
    return []


def _remove_worktree_and_branch(
    git: Git, isolation: Isolation, worktree_path: Path
) -> list[CleanupError]:
    errors: list[CleanupError] = []

    try:
        git.remove_worktree(isolation.repo_dir, worktree_path, force=True)
    except RuntimeError as e:
        errors.append(CleanupError(f"Could not remove worktree {worktree_path}: {e}"))

    # Attempted regardless of the worktree result
    try:
        git.delete_branch(isolation.repo_dir, isolation.branch, force=True)
    except RuntimeError as e:
        errors.append(CleanupError(f"Could not delete branch '{isolation.branch}': {e}"))

    return errors
