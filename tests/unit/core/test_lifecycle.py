"""Tests for the end-to-end isolation lifecycle against fakes."""

import random
from pathlib import Path

import pytest

from arborist.core.cleanup import Orphaned, Removed, Retained
from arborist.core.config_store import GlobalConfig
from arborist.core.errors import BranchExistsError, ProvisionError
from arborist.core.identity import PALETTE, SelectionMode, deterministic_identity
from arborist.core.lifecycle import run_isolated
from tests.fakes.command_runner import FakeCommandRunner
from tests.fakes.context import DEFAULT_TEST_PPID, create_test_context, parent_pid_for
from tests.test_utils.repos import BARE_ROOT, NORMAL_ROOT, fake_bare_repo, fake_normal_repo

BLUE_PPID = parent_pid_for("blue")


def test_non_git_runs_command_directly() -> None:
    cwd = Path("/tmp/scratch")
    runner = FakeCommandRunner(exit_code=7)
    ctx = create_test_context(runner=runner, cwd=cwd)

    outcome = run_isolated(ctx, ["make", "test"], SelectionMode.DETERMINISTIC)

    assert outcome.exit_code == 7
    assert outcome.disposition is None
    assert runner.calls == [(["make", "test"], cwd)]


def test_normal_repo_untouched_run_removes_branch() -> None:
    git = fake_normal_repo(branch="main", head="c1")
    runner = FakeCommandRunner()
    ctx = create_test_context(git=git, runner=runner, cwd=NORMAL_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)

    assert outcome.exit_code == 0
    assert isinstance(outcome.disposition, Removed)
    assert git.created_branches == [("arborist/blue", "c1")]
    assert git.deleted_branches == ["arborist/blue"]
    assert git.get_current_branch(NORMAL_ROOT) == "main"
    assert git.get_head_commit(NORMAL_ROOT) == "c1"
    assert runner.calls == [(["true"], NORMAL_ROOT)]


def test_normal_repo_commit_keeps_branch_checked_out() -> None:
    git = fake_normal_repo(branch="main", head="c1")
    runner = FakeCommandRunner(on_run=lambda command, cwd: git.record_commit("arborist/blue", "c2"))
    ctx = create_test_context(git=git, runner=runner, cwd=NORMAL_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["git", "commit"], SelectionMode.DETERMINISTIC)

    assert isinstance(outcome.disposition, Retained)
    assert outcome.disposition.isolation.identity == "blue"
    assert git.get_current_branch(NORMAL_ROOT) == "arborist/blue"
    assert git.get_head_commit(NORMAL_ROOT) == "c2"
    assert git.deleted_branches == []


def test_bare_repo_untracked_file_keeps_worktree() -> None:
    git = fake_bare_repo()
    runner = FakeCommandRunner(on_run=lambda command, cwd: git.mark_dirty(cwd))
    ctx = create_test_context(git=git, runner=runner, cwd=BARE_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["touch", "notes.txt"], SelectionMode.DETERMINISTIC)

    worktree = BARE_ROOT / "arborist-blue"
    assert isinstance(outcome.disposition, Retained)
    assert outcome.disposition.isolation.worktree_path == worktree
    assert runner.calls == [(["touch", "notes.txt"], worktree)]
    assert git.path_exists(worktree)
    assert "arborist/blue" in git.branches


def test_bare_repo_untouched_run_removes_worktree() -> None:
    git = fake_bare_repo()
    ctx = create_test_context(git=git, cwd=BARE_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)

    assert isinstance(outcome.disposition, Removed)
    assert not git.path_exists(BARE_ROOT / "arborist-blue")
    assert "arborist/blue" not in git.branches


@pytest.mark.parametrize("exit_code", [0, 1, 2, 130])
def test_exit_code_is_forwarded(exit_code: int) -> None:
    git = fake_normal_repo()
    ctx = create_test_context(
        git=git, runner=FakeCommandRunner(exit_code=exit_code), cwd=NORMAL_ROOT
    )

    outcome = run_isolated(ctx, ["cmd"], SelectionMode.DETERMINISTIC)

    assert outcome.exit_code == exit_code


def test_failing_command_with_commit_is_still_retained() -> None:
    git = fake_normal_repo()
    runner = FakeCommandRunner(
        exit_code=1,
        on_run=lambda command, cwd: git.record_commit(git.get_current_branch(cwd) or "", "c2"),
    )
    ctx = create_test_context(git=git, runner=runner, cwd=NORMAL_ROOT)

    outcome = run_isolated(ctx, ["cmd"], SelectionMode.DETERMINISTIC)

    assert outcome.exit_code == 1
    assert isinstance(outcome.disposition, Retained)


def test_collision_retries_with_untried_identity() -> None:
    git = fake_normal_repo(extra_branches={"arborist/blue": "c0"})
    ctx = create_test_context(git=git, cwd=NORMAL_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)

    assert isinstance(outcome.disposition, Removed)
    assert outcome.disposition.isolation.identity != "blue"
    assert git.branches["arborist/blue"] == "c0"


def test_collision_gives_up_after_max_attempts() -> None:
    taken = {f"arborist/{name}": "c0" for name in PALETTE}
    git = fake_normal_repo(extra_branches=taken)
    runner = FakeCommandRunner()
    ctx = create_test_context(
        git=git,
        runner=runner,
        cwd=NORMAL_ROOT,
        config=GlobalConfig(max_attempts=2),
    )

    with pytest.raises(BranchExistsError):
        run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)

    assert runner.calls == []
    assert git.created_branches == []


def test_single_attempt_does_not_retry() -> None:
    identity = deterministic_identity(DEFAULT_TEST_PPID)
    git = fake_normal_repo(extra_branches={f"arborist/{identity}": "c0"})
    ctx = create_test_context(git=git, cwd=NORMAL_ROOT, config=GlobalConfig(max_attempts=1))

    with pytest.raises(BranchExistsError):
        run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)


def test_provision_failure_never_runs_command() -> None:
    git = fake_normal_repo(failing_operations={"create_branch"})
    runner = FakeCommandRunner()
    ctx = create_test_context(git=git, runner=runner, cwd=NORMAL_ROOT)

    with pytest.raises(ProvisionError):
        run_isolated(ctx, ["true"], SelectionMode.DETERMINISTIC)

    assert runner.calls == []


def test_random_mode_draws_from_rng() -> None:
    git = fake_normal_repo()
    ctx = create_test_context(git=git, cwd=NORMAL_ROOT, rng=random.Random(11))

    outcome = run_isolated(ctx, ["true"], SelectionMode.RANDOM)

    assert outcome.disposition is not None
    assert outcome.disposition.isolation.identity == random.Random(11).choice(PALETTE)


def test_original_branch_renamed_by_command_orphans_isolation() -> None:
    git = fake_normal_repo(branch="main", head="c1")
    runner = FakeCommandRunner(on_run=lambda command, cwd: git.rename_branch("main", "gone"))
    ctx = create_test_context(git=git, runner=runner, cwd=NORMAL_ROOT, parent_pid=BLUE_PPID)

    outcome = run_isolated(ctx, ["rename-main"], SelectionMode.DETERMINISTIC)

    assert outcome.exit_code == 0
    assert isinstance(outcome.disposition, Orphaned)
    assert outcome.disposition.branch_checked_out
    assert git.get_current_branch(NORMAL_ROOT) == "arborist/blue"
