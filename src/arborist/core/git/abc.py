"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
isolation lifecycle testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- PrintingGit: Verbose wrapper echoing mutations before delegating
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree."""

    path: Path
    branch: str | None


def find_worktree_for_path(worktrees: list[WorktreeInfo], path: Path) -> WorktreeInfo | None:
    """Find the registered worktree located at the given path.

    Args:
        worktrees: List of worktrees to search
        path: Filesystem location to look up

    Returns:
        The matching WorktreeInfo, or None if no worktree is registered there
    """
    resolved = path.resolve()
    for wt in worktrees:
        if wt.path.resolve() == resolved:
            return wt
    return None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    # Repository queries

    @abstractmethod
    def is_inside_repository(self, cwd: Path) -> bool:
        """Check whether cwd belongs to a git repository (bare or not).

        Returns False rather than raising when git reports "not a git repository".
        """
        ...

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory shared by all worktrees of the repository."""
        ...

    @abstractmethod
    def is_bare_repository(self, git_dir: Path) -> bool:
        """Check whether the repository owning git_dir is bare.

        Args:
            git_dir: The common git directory (see get_git_common_dir)
        """
        ...

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path:
        """Get the top-level directory of the working tree containing cwd."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None on a detached HEAD."""
        ...

    @abstractmethod
    def get_head_commit(self, cwd: Path) -> str | None:
        """Get the full SHA of HEAD, or None if the repository has no commits."""
        ...

    @abstractmethod
    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a local branch with this name exists."""
        ...

    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees registered with the repository."""
        ...

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production (RealGit) this delegates to Path.exists(). In tests
        (FakeGit) this checks an in-memory set of paths.
        """
        ...

    # Change detection queries. These raise RuntimeError when git fails;
    # callers must not read a failure as "no changes".

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a working tree has uncommitted changes.

        Covers staged and unstaged modifications as well as untracked files.

        Raises:
            RuntimeError: If git status cannot be read
        """
        ...

    @abstractmethod
    def count_commits_ahead(self, cwd: Path, branch: str, base: str) -> int:
        """Count commits reachable from branch but not from base.

        Args:
            cwd: Working directory to run command in
            branch: Branch whose history is examined
            base: Commit the branch was forked from

        Raises:
            RuntimeError: If either ref cannot be resolved
        """
        ...

    # Mutations

    @abstractmethod
    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create a new branch without checking it out.

        Args:
            cwd: Working directory to run command in
            branch_name: Name of the branch to create
            start_point: Commit/branch to base the new branch on
        """
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            cwd: Working directory to run command in
            branch_name: Name of the branch to delete
            force: Use -D (force delete) instead of -d
        """
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout a branch in the given directory."""
        ...

    @abstractmethod
    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a detached HEAD at the given ref (commit SHA, branch, etc)."""
        ...

    @abstractmethod
    def add_worktree(self, repo_root: Path, path: Path, *, branch: str, ref: str) -> None:
        """Add a new git worktree with a newly created branch checked out.

        Args:
            repo_root: Path to the git repository root
            path: Path where the worktree should be created
            branch: Name of the branch to create inside the worktree
            ref: Git ref to base the new branch on
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree and prune its administrative metadata.

        Args:
            repo_root: Path to the git repository root
            path: Path to the worktree to remove
            force: True to force removal even if worktree has modifications
        """
        ...
