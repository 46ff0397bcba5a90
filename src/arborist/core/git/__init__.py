"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and verbose output via wrappers.
"""

from arborist.core.git.abc import Git, WorktreeInfo, find_worktree_for_path
from arborist.core.git.printing import PrintingGit
from arborist.core.git.real import RealGit

__all__ = [
    "Git",
    "WorktreeInfo",
    "RealGit",
    "PrintingGit",
    "find_worktree_for_path",
]
