"""In-memory Git implementation for tests.

Models a single repository: one branch namespace, a set of worktrees, and
per-directory checkout/dirty state. All state is supplied through the
constructor; mutations are recorded for assertions.
"""

from pathlib import Path

from arborist.core.git.abc import Git, WorktreeInfo


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    Branch history is modelled as a list of commits per branch, starting at
    the commit the branch was created from. count_commits_ahead() counts the
    entries after the base commit.

    Examples:
        # Normal repository on main at c1
        >>> git = FakeGit(
        ...     git_common_dirs={Path("/repo"): Path("/repo/.git")},
        ...     repo_roots={Path("/repo"): Path("/repo")},
        ...     current_branches={Path("/repo"): "main"},
        ...     branches={"main": "c1"},
        ... )

        # Bare repository
        >>> git = FakeGit(
        ...     git_common_dirs={Path("/bare.git"): Path("/bare.git")},
        ...     bare_repos={Path("/bare.git")},
        ...     head_commits={Path("/bare.git"): "c1"},
        ...     branches={"main": "c1"},
        ... )
    """

    def __init__(
        self,
        *,
        git_common_dirs: dict[Path, Path] | None = None,
        bare_repos: set[Path] | None = None,
        repo_roots: dict[Path, Path] | None = None,
        current_branches: dict[Path, str | None] | None = None,
        head_commits: dict[Path, str] | None = None,
        branches: dict[str, str] | None = None,
        worktrees: list[WorktreeInfo] | None = None,
        existing_paths: set[Path] | None = None,
        dirty_paths: set[Path] | None = None,
        failing_operations: set[str] | None = None,
    ) -> None:
        """Initialize fake with predetermined repository state.

        Args:
            git_common_dirs: Directories inside the repository, mapped to the common
                git dir. Directories not listed are outside any repository.
            bare_repos: Common git dirs that belong to bare repositories
            repo_roots: Directories mapped to their working tree root
            current_branches: Checked-out branch per directory (None = detached)
            head_commits: HEAD commit per directory when not derivable from a branch
            branches: Existing branches mapped to their tip commit
            worktrees: Registered worktrees
            existing_paths: Paths that exist on the fake filesystem
            dirty_paths: Working trees with uncommitted changes
            failing_operations: Method names that raise RuntimeError when called
        """
        self._git_common_dirs = git_common_dirs or {}
        self._bare_repos = bare_repos or set()
        self._repo_roots = repo_roots or {}
        self._current_branches = dict(current_branches or {})
        self._head_commits = dict(head_commits or {})
        self._history: dict[str, list[str]] = {
            name: [tip] for name, tip in (branches or {}).items()
        }
        self._worktrees = list(worktrees or [])
        self._existing_paths = set(existing_paths or set())
        self._existing_paths.update(self._git_common_dirs)
        self._dirty_paths = set(dirty_paths or set())
        self._failing_operations = failing_operations or set()

        self._created_branches: list[tuple[str, str]] = []
        self._deleted_branches: list[str] = []
        self._checked_out: list[tuple[Path, str]] = []
        self._added_worktrees: list[tuple[Path, str, str]] = []
        self._removed_worktrees: list[Path] = []

    def _maybe_fail(self, operation: str) -> None:
        if operation in self._failing_operations:
            raise RuntimeError(f"Failed to {operation} (simulated)")

    # Repository queries

    def is_inside_repository(self, cwd: Path) -> bool:
        return cwd in self._git_common_dirs

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        return self._git_common_dirs.get(cwd)

    def is_bare_repository(self, git_dir: Path) -> bool:
        self._maybe_fail("is_bare_repository")
        return git_dir in self._bare_repos

    def get_repository_root(self, cwd: Path) -> Path:
        self._maybe_fail("get_repository_root")
        return self._repo_roots.get(cwd, cwd)

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def get_head_commit(self, cwd: Path) -> str | None:
        branch = self._current_branches.get(cwd)
        if branch is not None and branch in self._history:
            return self._history[branch][-1]
        return self._head_commits.get(cwd)

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        return branch in self._history

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        return list(self._worktrees)

    def path_exists(self, path: Path) -> bool:
        return path in self._existing_paths

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        self._maybe_fail("has_uncommitted_changes")
        return cwd in self._dirty_paths

    def count_commits_ahead(self, cwd: Path, branch: str, base: str) -> int:
        self._maybe_fail("count_commits_ahead")
        if branch not in self._history:
            raise RuntimeError(f"Failed to count commits: unknown branch '{branch}'")
        history = self._history[branch]
        if base not in history:
            return len(history)
        return len(history) - 1 - history.index(base)

    # Mutations

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        self._maybe_fail("create_branch")
        if branch_name in self._history:
            raise RuntimeError(f"fatal: a branch named '{branch_name}' already exists")
        self._history[branch_name] = [start_point]
        self._created_branches.append((branch_name, start_point))

    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        self._maybe_fail("delete_branch")
        if branch_name not in self._history:
            raise RuntimeError(f"error: branch '{branch_name}' not found")
        if branch_name in self._current_branches.values():
            raise RuntimeError(f"error: cannot delete branch '{branch_name}' checked out")
        del self._history[branch_name]
        self._deleted_branches.append(branch_name)

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        self._maybe_fail("checkout_branch")
        if branch not in self._history:
            raise RuntimeError(f"error: pathspec '{branch}' did not match")
        self._current_branches[cwd] = branch
        self._checked_out.append((cwd, branch))

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        self._maybe_fail("checkout_detached")
        self._current_branches[cwd] = None
        self._head_commits[cwd] = ref
        self._checked_out.append((cwd, ref))

    def add_worktree(self, repo_root: Path, path: Path, *, branch: str, ref: str) -> None:
        self._maybe_fail("add_worktree")
        if branch in self._history:
            raise RuntimeError(f"fatal: a branch named '{branch}' already exists")
        if path in self._existing_paths:
            raise RuntimeError(f"fatal: '{path}' already exists")
        self._history[branch] = [ref]
        self._worktrees.append(WorktreeInfo(path=path, branch=branch))
        self._existing_paths.add(path)
        self._current_branches[path] = branch
        self._added_worktrees.append((path, branch, ref))

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        self._maybe_fail("remove_worktree")
        if not any(wt.path == path for wt in self._worktrees):
            raise RuntimeError(f"fatal: '{path}' is not a working tree")
        self._worktrees = [wt for wt in self._worktrees if wt.path != path]
        self._existing_paths.discard(path)
        self._current_branches.pop(path, None)
        self._removed_worktrees.append(path)

    # Simulation of what a wrapped command might do

    def record_commit(self, branch: str, commit: str) -> None:
        """Advance branch by one commit."""
        self._history[branch].append(commit)

    def mark_dirty(self, path: Path) -> None:
        """Leave uncommitted changes in the working tree at path."""
        self._dirty_paths.add(path)

    def rename_branch(self, old: str, new: str) -> None:
        """Rename a branch, following it in every directory that has it checked out."""
        self._history[new] = self._history.pop(old)
        for cwd, branch in self._current_branches.items():
            if branch == old:
                self._current_branches[cwd] = new

    # Read-only views for test assertions

    @property
    def branches(self) -> dict[str, str]:
        """Existing branches mapped to their tip commit."""
        return {name: history[-1] for name, history in self._history.items()}

    @property
    def worktrees(self) -> list[WorktreeInfo]:
        return list(self._worktrees)

    @property
    def created_branches(self) -> list[tuple[str, str]]:
        """(branch, start_point) for every create_branch() call."""
        return self._created_branches.copy()

    @property
    def deleted_branches(self) -> list[str]:
        return self._deleted_branches.copy()

    @property
    def checked_out(self) -> list[tuple[Path, str]]:
        """(cwd, branch or ref) for every checkout, in order."""
        return self._checked_out.copy()

    @property
    def added_worktrees(self) -> list[tuple[Path, str, str]]:
        """(path, branch, ref) for every add_worktree() call."""
        return self._added_worktrees.copy()

    @property
    def removed_worktrees(self) -> list[Path]:
        return self._removed_worktrees.copy()
