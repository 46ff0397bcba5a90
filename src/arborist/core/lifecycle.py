"""The isolation lifecycle for a single invocation.

classify -> provision -> run -> detect -> finalize, strictly in that order.
Provisioning failures abort before the command starts; everything after the
command has started ends in an Outcome carrying the command's exit status.
"""

import logging

from arborist.core.change_detector import detect_changes
from arborist.core.cleanup import Outcome, finalize
from arborist.core.context import ArboristContext
from arborist.core.errors import BranchExistsError, WorktreeExistsError
from arborist.core.identity import SelectionMode, next_identity, select_identity
from arborist.core.provisioner import Isolation, provision_isolation
from arborist.core.repo_discovery import BareRepo, NonGit, NormalRepo, classify

logger = logging.getLogger(__name__)


def run_isolated(ctx: ArboristContext, command: list[str], mode: SelectionMode) -> Outcome:
    """Run command inside a fresh isolation and decide its fate afterwards.

    Args:
        ctx: Invocation context
        command: Wrapped command and its arguments
        mode: How to pick the first identity

    Returns:
        Outcome with the command's exit status and the isolation's disposition

    Raises:
        ProvisionError: If no isolation could be provisioned (command not run)
        RuntimeError: If git failed while classifying the repository
    """
    classification = classify(ctx.git, ctx.cwd)
    if isinstance(classification, NonGit):
        return Outcome(exit_code=ctx.runner.run(command, ctx.cwd))

    isolation = provision_with_retries(ctx, classification, mode)

    exit_code = ctx.runner.run(command, isolation.work_dir)

    change_state = detect_changes(ctx.git, isolation)
    logger.debug("%s is %s", isolation.branch, change_state.value)
    disposition = finalize(ctx.git, isolation, change_state)
    return Outcome(exit_code=exit_code, disposition=disposition)


def provision_with_retries(
    ctx: ArboristContext, repo: NormalRepo | BareRepo, mode: SelectionMode
) -> Isolation:
    """Provision under the selected identity, drawing fresh ones on collision.

    Up to ctx.config.max_attempts identities are tried. Replacements are
    drawn at random from palette entries not tried yet.

    Raises:
        BranchExistsError: If every attempted name collided
        WorktreeExistsError: If every attempted name collided
        ProvisionError: On any other provisioning failure (not retried)
    """
    identity = select_identity(mode, parent_pid=ctx.parent_pid, rng=ctx.rng)
    tried: list[str] = []

    while True:
        tried.append(identity)
        try:
            return provision_isolation(ctx.git, repo, identity)
        except (BranchExistsError, WorktreeExistsError) as e:
            if len(tried) >= ctx.config.max_attempts:
                raise
            replacement = next_identity(tried, ctx.rng)
            if replacement is None:
                raise
            logger.info("%s, trying '%s' instead", e, replacement)
            identity = replacement
