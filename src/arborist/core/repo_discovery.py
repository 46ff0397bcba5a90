"""Repository classification.

Classifies the invoking directory once per invocation as a non-repository,
a normal repository or a bare repository, capturing what later stages need
to fork from and restore to. A non-repository is an ordinary result, not an
error.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from arborist.core.git.abc import Git

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NonGit:
    """The directory is not inside any git repository."""

    cwd: Path


@dataclass(frozen=True)
class NormalRepo:
    """A repository with a single working tree that the isolation borrows.

    original_branch is None when HEAD was detached; head_commit is None when
    the repository has no commits yet.
    """

    cwd: Path
    root: Path
    original_branch: str | None
    head_commit: str | None


@dataclass(frozen=True)
class BareRepo:
    """A bare repository; isolations get their own worktree under root.

    root is the bare repository directory (the common git dir), also when
    the invocation started inside one of its linked worktrees.
    """

    cwd: Path
    root: Path
    head_commit: str | None


RepoClassification = NonGit | NormalRepo | BareRepo


def classify(git: Git, cwd: Path) -> RepoClassification:
    """Classify cwd by asking git about repository presence and bareness.

    Args:
        git: Git operations interface
        cwd: Directory the wrapper was invoked from

    Returns:
        NonGit, NormalRepo or BareRepo

    Raises:
        RuntimeError: If git answers that cwd is a repository but then fails
            a follow-up query
    """
    if not git.is_inside_repository(cwd):
        logger.debug("%s is not inside a git repository", cwd)
        return NonGit(cwd=cwd)

    common_dir = git.get_git_common_dir(cwd)
    if common_dir is not None and git.is_bare_repository(common_dir):
        head_commit = git.get_head_commit(cwd)
        logger.debug("Bare repository at %s (HEAD %s)", common_dir, head_commit)
        return BareRepo(cwd=cwd, root=common_dir, head_commit=head_commit)

    root = git.get_repository_root(cwd)
    original_branch = git.get_current_branch(cwd)
    head_commit = git.get_head_commit(cwd)
    logger.debug(
        "Normal repository at %s (branch %s, HEAD %s)", root, original_branch, head_commit
    )
    return NormalRepo(
        cwd=cwd, root=root, original_branch=original_branch, head_commit=head_commit
    )
