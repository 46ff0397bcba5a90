"""Application context with dependency injection."""

import os
import random
from dataclasses import dataclass
from pathlib import Path

from arborist.core.command_runner import CommandRunner, RealCommandRunner
from arborist.core.config_store import ConfigStore, GlobalConfig, RealConfigStore
from arborist.core.git.abc import Git
from arborist.core.git.printing import PrintingGit
from arborist.core.git.real import RealGit


@dataclass(frozen=True)
class ArboristContext:
    """Immutable context holding all dependencies for one invocation.

    Created at CLI entry point and threaded through the lifecycle. Ambient
    process state (cwd, parent pid, randomness) is captured here once so the
    lifecycle itself only sees explicit values.
    """

    git: Git
    runner: CommandRunner
    config_store: ConfigStore
    config: GlobalConfig
    cwd: Path  # Current working directory at CLI invocation
    parent_pid: int  # Invoking shell, seeds deterministic identities
    rng: random.Random
    verbose: bool


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)

    Note:
        This is an acceptable use of try/except since we're wrapping a third-party
        API (Path.cwd()) that provides no way to check the condition first.
    """
    try:
        cwd_path = Path.cwd()
        return (cwd_path, None)
    except (FileNotFoundError, OSError):
        return (
            None,
            "Current working directory no longer exists",
        )


def create_context(*, verbose: bool, config_store: ConfigStore | None = None) -> ArboristContext:
    """Create production context with real implementations.

    Args:
        verbose: Whether --verbose was given; the config file can also enable it
        config_store: Config store to load from (defaults to ~/.arborist/config.toml)

    Returns:
        ArboristContext with real implementations, git wrapped in PrintingGit
        when verbose

    Raises:
        ConfigError: If the config file is malformed
        RuntimeError: If the current directory no longer exists
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        raise RuntimeError(error_msg)

    store = config_store if config_store is not None else RealConfigStore()
    config = store.load()
    effective_verbose = verbose or config.verbose

    git: Git = RealGit()
    if effective_verbose:
        git = PrintingGit(git)

    return ArboristContext(
        git=git,
        runner=RealCommandRunner(),
        config_store=store,
        config=config,
        cwd=cwd,
        parent_pid=os.getppid(),
        rng=random.Random(),
        verbose=effective_verbose,
    )
