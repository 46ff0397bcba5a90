"""Factory functions for creating test contexts."""

import random
from pathlib import Path

from arborist.core.config_store import ConfigStore, FakeConfigStore, GlobalConfig
from arborist.core.context import ArboristContext
from arborist.core.git.abc import Git
from arborist.core.git.fake import FakeGit
from arborist.core.identity import deterministic_identity
from tests.fakes.command_runner import FakeCommandRunner

DEFAULT_TEST_PPID = 4242


def create_test_context(
    git: Git | None = None,
    runner: FakeCommandRunner | None = None,
    config: GlobalConfig | None = None,
    config_store: ConfigStore | None = None,
    cwd: Path | None = None,
    parent_pid: int = DEFAULT_TEST_PPID,
    rng: random.Random | None = None,
    verbose: bool = False,
) -> ArboristContext:
    """Create test context with optional pre-configured integrations.

    Args:
        git: Git implementation. If None, creates an empty FakeGit
            (every directory is outside a repository).
        runner: Command runner. If None, creates a FakeCommandRunner exiting 0.
        config: Loaded config. If None, uses the store's config or defaults.
        config_store: Config store. If None, creates a FakeConfigStore holding config.
        cwd: Invocation directory. If None, uses Path("/test/default/cwd").
        parent_pid: Parent pid used for deterministic identities
        rng: Random source. If None, uses a fixed seed for reproducibility.
        verbose: Verbose flag stored on the context

    Returns:
        Frozen ArboristContext for use in tests
    """
    store = config_store if config_store is not None else FakeConfigStore(config=config)
    return ArboristContext(
        git=git if git is not None else FakeGit(),
        runner=runner if runner is not None else FakeCommandRunner(),
        config_store=store,
        config=config if config is not None else store.load(),
        cwd=cwd if cwd is not None else Path("/test/default/cwd"),
        parent_pid=parent_pid,
        rng=rng if rng is not None else random.Random(0),
        verbose=verbose,
    )


def parent_pid_for(identity: str) -> int:
    """Find a parent pid whose deterministic identity is the given colour."""
    for pid in range(1, 100_000):
        if deterministic_identity(pid) == identity:
            return pid
    raise ValueError(f"No parent pid maps to '{identity}'")
