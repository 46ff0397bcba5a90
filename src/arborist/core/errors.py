"""Exception hierarchy for the isolation lifecycle.

Engine failures surface from the git layer as RuntimeError and are converted
into these types at the component boundary that observed them.
"""


class ArboristError(Exception):
    """Base class for all arborist failures."""


class ProvisionError(ArboristError):
    """The isolation could not be created; the wrapped command never starts."""

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class BranchExistsError(ProvisionError):
    """The isolation branch name is already taken."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"Branch '{branch}' already exists", name=branch)


class WorktreeExistsError(ProvisionError):
    """The isolation worktree directory is already taken."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Worktree '{path}' already exists", name=path)


class DetectionError(ArboristError):
    """The post-run repository state could not be determined."""


class CleanupError(ArboristError):
    """A clean isolation could not be fully removed."""


class ConfigError(ArboristError):
    """The configuration file is malformed."""
