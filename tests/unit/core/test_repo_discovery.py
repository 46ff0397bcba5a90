"""Tests for repository classification."""

from pathlib import Path

import pytest

from arborist.core.git.fake import FakeGit
from arborist.core.repo_discovery import BareRepo, NonGit, NormalRepo, classify
from tests.test_utils.repos import BARE_ROOT, NORMAL_ROOT, fake_bare_repo, fake_normal_repo


def test_directory_outside_repository_is_non_git() -> None:
    cwd = Path("/tmp/scratch")

    result = classify(FakeGit(), cwd)

    assert result == NonGit(cwd=cwd)


def test_normal_repository_captures_branch_and_head() -> None:
    git = fake_normal_repo(branch="main", head="c1")

    result = classify(git, NORMAL_ROOT)

    assert result == NormalRepo(
        cwd=NORMAL_ROOT, root=NORMAL_ROOT, original_branch="main", head_commit="c1"
    )


def test_normal_repository_with_detached_head_has_no_branch() -> None:
    git = fake_normal_repo(branch=None, head="c7")

    result = classify(git, NORMAL_ROOT)

    assert isinstance(result, NormalRepo)
    assert result.original_branch is None
    assert result.head_commit == "c7"


def test_bare_repository_captures_root_and_head() -> None:
    git = fake_bare_repo(head="c1")

    result = classify(git, BARE_ROOT)

    assert result == BareRepo(cwd=BARE_ROOT, root=BARE_ROOT, head_commit="c1")


def test_linked_worktree_of_bare_repository_classifies_as_bare() -> None:
    worktree = Path("/bare.git/feature")
    git = FakeGit(
        git_common_dirs={worktree: BARE_ROOT},
        bare_repos={BARE_ROOT},
        current_branches={worktree: "feature"},
        branches={"main": "c1", "feature": "c5"},
    )

    result = classify(git, worktree)

    assert result == BareRepo(cwd=worktree, root=BARE_ROOT, head_commit="c5")


def test_repository_without_commits_classifies_with_no_head() -> None:
    git = FakeGit(
        git_common_dirs={NORMAL_ROOT: NORMAL_ROOT / ".git"},
        current_branches={NORMAL_ROOT: "main"},
    )

    result = classify(git, NORMAL_ROOT)

    assert isinstance(result, NormalRepo)
    assert result.head_commit is None


def test_git_failure_after_detection_propagates() -> None:
    git = fake_normal_repo(failing_operations={"is_bare_repository"})

    with pytest.raises(RuntimeError, match="is_bare_repository"):
        classify(git, NORMAL_ROOT)
