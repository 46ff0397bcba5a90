"""Printing Git wrapper for verbose output.

This module provides a Git wrapper that prints styled output for mutating
operations before delegating to the wrapped implementation.
"""

from pathlib import Path

import click

from arborist.shared.output import user_output
from arborist.core.git.abc import Git, WorktreeInfo

# ============================================================================
# Printing Wrapper Implementation
# ============================================================================


class PrintingGit(Git):
    """Wrapper that prints operations before delegating to inner implementation.

    Usage:
        # For --verbose
        git = PrintingGit(RealGit())
    """

    def __init__(self, wrapped: Git) -> None:
        """Create a printing wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
        """
        self._wrapped = wrapped

    def _emit(self, message: str) -> None:
        user_output(message)

    def _format_command(self, command: str) -> str:
        return click.style(f"  $ {command}", dim=True)

    # Read-only operations: delegate without printing

    def is_inside_repository(self, cwd: Path) -> bool:
        """Check repository presence (read-only, no printing)."""
        return self._wrapped.is_inside_repository(cwd)

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get git common directory (read-only, no printing)."""
        return self._wrapped.get_git_common_dir(cwd)

    def is_bare_repository(self, git_dir: Path) -> bool:
        """Check bareness (read-only, no printing)."""
        return self._wrapped.is_bare_repository(git_dir)

    def get_repository_root(self, cwd: Path) -> Path:
        """Get repository root (read-only, no printing)."""
        return self._wrapped.get_repository_root(cwd)

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get current branch (read-only, no printing)."""
        return self._wrapped.get_current_branch(cwd)

    def get_head_commit(self, cwd: Path) -> str | None:
        """Get HEAD commit (read-only, no printing)."""
        return self._wrapped.get_head_commit(cwd)

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check branch existence (read-only, no printing)."""
        return self._wrapped.branch_exists(cwd, branch)

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees (read-only, no printing)."""
        return self._wrapped.list_worktrees(repo_root)

    def path_exists(self, path: Path) -> bool:
        """Check path existence (read-only, no printing)."""
        return self._wrapped.path_exists(path)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for uncommitted changes (read-only, no printing)."""
        return self._wrapped.has_uncommitted_changes(cwd)

    def count_commits_ahead(self, cwd: Path, branch: str, base: str) -> int:
        """Count commits ahead (read-only, no printing)."""
        return self._wrapped.count_commits_ahead(cwd, branch, base)

    # Operations that need printing

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create branch with printed output."""
        self._emit(self._format_command(f"git branch {branch_name} {start_point}"))
        self._wrapped.create_branch(cwd, branch_name, start_point)

    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        """Delete branch with printed output."""
        flag = "-D" if force else "-d"
        self._emit(self._format_command(f"git branch {flag} {branch_name}"))
        self._wrapped.delete_branch(cwd, branch_name, force=force)

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout branch with printed output."""
        self._emit(self._format_command(f"git checkout {branch}"))
        self._wrapped.checkout_branch(cwd, branch)

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout detached HEAD with printed output."""
        self._emit(self._format_command(f"git checkout --detach {ref}"))
        self._wrapped.checkout_detached(cwd, ref)

    def add_worktree(self, repo_root: Path, path: Path, *, branch: str, ref: str) -> None:
        """Add worktree with printed output."""
        self._emit(self._format_command(f"git worktree add -b {branch} {path} {ref}"))
        self._wrapped.add_worktree(repo_root, path, branch=branch, ref=ref)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove worktree with printed output."""
        force_flag = "--force " if force else ""
        self._emit(self._format_command(f"git worktree remove {force_flag}{path}"))
        self._wrapped.remove_worktree(repo_root, path, force=force)
