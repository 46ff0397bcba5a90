"""Tests for the closing report."""

from io import StringIO
from pathlib import Path

from rich.console import Console

from arborist.cli.rendering import render_outcome
from arborist.core.cleanup import Orphaned, Outcome, Removed, Retained
from arborist.core.errors import CleanupError
from arborist.core.provisioner import Isolation

BRANCH_ISOLATION = Isolation(
    identity="blue",
    branch="arborist/blue",
    fork_point="c1",
    repo_dir=Path("/repo"),
    work_dir=Path("/repo"),
    restore_ref="main",
)

WORKTREE_ISOLATION = Isolation(
    identity="teal",
    branch="arborist/teal",
    fork_point="c1",
    repo_dir=Path("/bare.git"),
    work_dir=Path("/bare.git/arborist-teal"),
    worktree_path=Path("/bare.git/arborist-teal"),
)


def _render(outcome: Outcome) -> str:
    buffer = StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    render_outcome(outcome, console=console)
    return buffer.getvalue()


def test_removed_and_non_git_outcomes_print_nothing() -> None:
    assert _render(Outcome(exit_code=0)) == ""
    assert _render(Outcome(exit_code=0, disposition=Removed(BRANCH_ISOLATION))) == ""


def test_retained_branch_shows_how_to_switch_back() -> None:
    output = _render(Outcome(exit_code=0, disposition=Retained(BRANCH_ISOLATION)))

    assert "Kept isolation 'blue'" in output
    assert "Branch:   arborist/blue" in output
    assert "git checkout main" in output
    assert "Worktree:" not in output


def test_retained_worktree_shows_how_to_resume() -> None:
    output = _render(Outcome(exit_code=1, disposition=Retained(WORKTREE_ISOLATION)))

    assert "Kept isolation 'teal'" in output
    assert "Worktree: /bare.git/arborist-teal" in output
    assert "cd /bare.git/arborist-teal" in output


def test_orphaned_lists_errors_and_cleanup_commands() -> None:
    errors = (CleanupError("worktree is locked"),)
    output = _render(Outcome(exit_code=0, disposition=Orphaned(WORKTREE_ISOLATION, errors)))

    assert "Could not remove isolation 'teal'" in output
    assert "worktree is locked" in output
    assert "git worktree remove --force /bare.git/arborist-teal" in output
    assert "git branch -D arborist/teal" in output


def test_orphaned_branch_cleanup_without_switching_when_already_off_it() -> None:
    errors = (CleanupError("branch is locked"),)
    output = _render(Outcome(exit_code=0, disposition=Orphaned(BRANCH_ISOLATION, errors)))

    assert "Remove with: git branch -D arborist/blue" in output
    assert "git checkout" not in output


def test_orphaned_branch_still_checked_out_leaves_it_first() -> None:
    errors = (CleanupError("Could not check out 'main'"),)
    disposition = Orphaned(BRANCH_ISOLATION, errors, branch_checked_out=True)

    output = _render(Outcome(exit_code=0, disposition=disposition))

    assert "Remove with: git checkout --detach c1 && git branch -D arborist/blue" in output


def test_retained_detached_isolation_switches_back_detached() -> None:
    isolation = Isolation(
        identity="blue",
        branch="arborist/blue",
        fork_point="c9",
        repo_dir=Path("/repo"),
        work_dir=Path("/repo"),
        restore_ref="c9",
        restore_detached=True,
    )

    output = _render(Outcome(exit_code=0, disposition=Retained(isolation)))

    assert "git checkout --detach c9" in output
