"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from arborist.core.git.abc import Git, WorktreeInfo
from arborist.core.subprocess import run_subprocess_with_context

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def is_inside_repository(self, cwd: Path) -> bool:
        """Check whether cwd belongs to a git repository."""
        # Prints "false" with exit 0 inside a bare repository, fails outside any repo
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory."""
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir

        return git_dir.resolve()

    def is_bare_repository(self, git_dir: Path) -> bool:
        """Check whether the repository owning git_dir is bare."""
        result = run_subprocess_with_context(
            ["git", "-C", str(git_dir), "rev-parse", "--is-bare-repository"],
            operation_context=f"check whether {git_dir} is a bare repository",
        )
        return result.stdout.strip() == "true"

    def get_repository_root(self, cwd: Path) -> Path:
        """Get the top-level directory of the working tree containing cwd."""
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel"],
            operation_context="find repository root",
            cwd=cwd,
        )
        return Path(result.stdout.strip())

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if not branch:
            return None

        return branch

    def get_head_commit(self, cwd: Path) -> str | None:
        """Get the full SHA of HEAD."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a local branch with this name exists."""
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=cwd,
            capture_output=True,
            check=False,
        )
        return result.returncode == 0

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository."""
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=repo_root,
        )

        worktrees: list[WorktreeInfo] = []
        current_path: Path | None = None
        current_branch: str | None = None

        for line in result.stdout.splitlines():
            line = line.strip()
            if line.startswith("worktree "):
                current_path = Path(line.split(maxsplit=1)[1])
                current_branch = None
            elif line.startswith("branch "):
                if current_path is None:
                    continue
                branch_ref = line.split(maxsplit=1)[1]
                current_branch = branch_ref.replace("refs/heads/", "")
            elif line == "" and current_path is not None:
                worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))
                current_path = None
                current_branch = None

        if current_path is not None:
            worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))

        return worktrees

    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem."""
        return path.exists()

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a working tree has uncommitted changes."""
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain", "--untracked-files=normal"],
            operation_context=f"read working tree status of {cwd}",
            cwd=cwd,
        )
        return bool(result.stdout.strip())

    def count_commits_ahead(self, cwd: Path, branch: str, base: str) -> int:
        """Count commits reachable from branch but not from base."""
        result = run_subprocess_with_context(
            ["git", "rev-list", "--count", f"{base}..refs/heads/{branch}"],
            operation_context=f"count commits on '{branch}' since {base}",
            cwd=cwd,
        )
        return int(result.stdout.strip())

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create a new branch without checking it out."""
        run_subprocess_with_context(
            ["git", "branch", branch_name, start_point],
            operation_context=f"create branch '{branch_name}' from '{start_point}'",
            cwd=cwd,
        )

    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        """Delete a local branch."""
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch_name],
            operation_context=f"delete branch '{branch_name}'",
            cwd=cwd,
        )

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout a branch in the given directory."""
        run_subprocess_with_context(
            ["git", "checkout", branch],
            operation_context=f"checkout branch '{branch}'",
            cwd=cwd,
        )

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a detached HEAD at the given ref."""
        run_subprocess_with_context(
            ["git", "checkout", "--detach", ref],
            operation_context=f"checkout detached HEAD at '{ref}'",
            cwd=cwd,
        )

    def add_worktree(self, repo_root: Path, path: Path, *, branch: str, ref: str) -> None:
        """Add a new git worktree with a newly created branch."""
        run_subprocess_with_context(
            ["git", "worktree", "add", "-b", branch, str(path), ref],
            operation_context=f"add worktree with new branch '{branch}' at {path}",
            cwd=repo_root,
        )

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree."""
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_subprocess_with_context(
            cmd,
            operation_context=f"remove worktree at {path}",
            cwd=repo_root,
        )

        # Prune administrative files left behind after worktree removal
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context="prune worktree metadata",
            cwd=repo_root,
        )
