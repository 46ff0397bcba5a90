"""Provisioning of the isolated branch or worktree.

Normal repositories get a new branch checked out in place. Bare repositories
get a new worktree directory next to the repository's objects, with the new
branch checked out there; nothing that existed before is touched. A name
that is already taken is reported, never reused.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from arborist.core.errors import BranchExistsError, ProvisionError, WorktreeExistsError
from arborist.core.git.abc import Git, find_worktree_for_path
from arborist.core.identity import branch_name_for, worktree_name_for
from arborist.core.repo_discovery import BareRepo, NonGit, NormalRepo, RepoClassification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Isolation:
    """A provisioned isolation, owned by a single invocation.

    Attributes:
        identity: Palette name the isolation was provisioned under
        branch: The isolation branch (arborist/<identity>)
        fork_point: Commit the branch was created at
        repo_dir: Directory git commands about this isolation run from
        work_dir: Directory the wrapped command runs in
        worktree_path: The isolation worktree (bare repositories only)
        restore_ref: Branch to check out again on removal, or the fork
            commit when HEAD was detached; None when nothing was switched away from
        restore_detached: restore_ref is a commit to check out detached
    """

    identity: str
    branch: str
    fork_point: str
    repo_dir: Path
    work_dir: Path
    worktree_path: Path | None = None
    restore_ref: str | None = None
    restore_detached: bool = False


def provision(git: Git, classification: RepoClassification, identity: str) -> Isolation | None:
    """Create the isolation for this invocation.

    Args:
        git: Git operations interface
        classification: Result of classify()
        identity: Palette name to provision under

    Returns:
        The new Isolation, or None for a non-repository (nothing to isolate)

    Raises:
        BranchExistsError: If arborist/<identity> already exists
        WorktreeExistsError: If the worktree directory is already taken
        ProvisionError: If git fails or there is no commit to fork from
    """
    if isinstance(classification, NonGit):
        return None
    return provision_isolation(git, classification, identity)


def provision_isolation(git: Git, repo: NormalRepo | BareRepo, identity: str) -> Isolation:
    """Create the branch or worktree isolation for a repository.

    Raises the same errors as provision().
    """
    match repo:
        case NormalRepo():
            return _provision_branch(git, repo, identity)
        case BareRepo():
            return _provision_worktree(git, repo, identity)


def _require_fork_point(head_commit: str | None) -> str:
    if head_commit is None:
        raise ProvisionError("Repository has no commits to branch from")
    return head_commit


def _provision_branch(git: Git, repo: NormalRepo, identity: str) -> Isolation:
    fork_point = _require_fork_point(repo.head_commit)
    branch = branch_name_for(identity)

    if git.branch_exists(repo.cwd, branch):
        raise BranchExistsError(branch)

    try:
        git.create_branch(repo.cwd, branch, fork_point)
    except RuntimeError as e:
        # Lost a race with a concurrent invocation that took the same name
        if git.branch_exists(repo.cwd, branch):
            raise BranchExistsError(branch) from e
        raise ProvisionError(str(e), name=branch) from e

    try:
        git.checkout_branch(repo.cwd, branch)
    except RuntimeError as e:
        _rollback_branch(git, repo.cwd, branch)
        raise ProvisionError(str(e), name=branch) from e

    restore_detached = repo.original_branch is None
    restore_ref = fork_point if restore_detached else repo.original_branch
    logger.debug("Checked out %s at %s", branch, fork_point)
    return Isolation(
        identity=identity,
        branch=branch,
        fork_point=fork_point,
        repo_dir=repo.cwd,
        work_dir=repo.cwd,
        restore_ref=restore_ref,
        restore_detached=restore_detached,
    )


def _rollback_branch(git: Git, cwd: Path, branch: str) -> None:
    try:
        git.delete_branch(cwd, branch, force=True)
    except RuntimeError as e:
        logger.warning("Could not delete '%s' after failed checkout: %s", branch, e)


def _provision_worktree(git: Git, repo: BareRepo, identity: str) -> Isolation:
    fork_point = _require_fork_point(repo.head_commit)
    branch = branch_name_for(identity)
    worktree_path = repo.root / worktree_name_for(identity)

    if _worktree_taken(git, repo.root, worktree_path):
        raise WorktreeExistsError(str(worktree_path))
    if git.branch_exists(repo.root, branch):
        raise BranchExistsError(branch)

    try:
        git.add_worktree(repo.root, worktree_path, branch=branch, ref=fork_point)
    except RuntimeError as e:
        if git.branch_exists(repo.root, branch):
            raise BranchExistsError(branch) from e
        if _worktree_taken(git, repo.root, worktree_path):
            raise WorktreeExistsError(str(worktree_path)) from e
        raise ProvisionError(str(e), name=str(worktree_path)) from e

    logger.debug("Added worktree %s on %s at %s", worktree_path, branch, fork_point)
    return Isolation(
        identity=identity,
        branch=branch,
        fork_point=fork_point,
        repo_dir=repo.root,
        work_dir=worktree_path,
        worktree_path=worktree_path,
    )


def _worktree_taken(git: Git, repo_root: Path, worktree_path: Path) -> bool:
    if git.path_exists(worktree_path):
        return True
    return find_worktree_for_path(git.list_worktrees(repo_root), worktree_path) is not None
