import logging

import click

from arborist.shared.output import format_error, user_output
from arborist.cli.rendering import render_outcome
from arborist.core.config_store import GlobalConfig
from arborist.core.context import ArboristContext, create_context
from arborist.core.errors import (
    BranchExistsError,
    ConfigError,
    ProvisionError,
    WorktreeExistsError,
)
from arborist.core.identity import SelectionMode
from arborist.core.lifecycle import run_isolated

# Distinct from anything the wrapper itself forwards for a command it managed to start
EXIT_PROVISION_FAILED = 125

CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],  # terse help flags
    ignore_unknown_options=True,
    allow_interspersed_args=False,  # everything after COMMAND belongs to COMMAND
)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="arborist: %(message)s",
        force=True,
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="arborist")
@click.option("-v", "--verbose", is_flag=True, help="Show git operations and lifecycle decisions.")
@click.option(
    "-r",
    "--random",
    "random_identity",
    is_flag=True,
    help="Pick a random identity instead of one tied to this terminal.",
)
@click.option(
    "--save-config",
    is_flag=True,
    help="Store the given --verbose/--random choices as defaults.",
)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    random_identity: bool,
    save_config: bool,
    command: tuple[str, ...],
) -> None:
    """Run COMMAND on a throwaway git branch.

    In a normal repository COMMAND runs on a new branch arborist/<colour>; in
    a bare repository it runs in a new worktree arborist-<colour>. If COMMAND
    leaves no commits and no uncommitted changes behind, the branch (and
    worktree) are removed again; otherwise they are kept and reported.
    Outside a repository COMMAND simply runs.

    The exit status is COMMAND's own, or 125 if the isolation could not be
    created.
    """
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = _create_context_or_exit(verbose)
    arborist_ctx: ArboristContext = ctx.obj

    configure_logging(verbose or arborist_ctx.verbose)

    if save_config:
        _save_defaults(arborist_ctx, verbose=verbose, random_identity=random_identity)
        if not command:
            return

    if not command:
        raise click.UsageError("Missing COMMAND to run.", ctx=ctx)

    use_random = random_identity or arborist_ctx.config.random_identity
    mode = SelectionMode.RANDOM if use_random else SelectionMode.DETERMINISTIC

    try:
        outcome = run_isolated(arborist_ctx, list(command), mode)
    except ProvisionError as e:
        user_output(format_error(f"Could not create isolation: {e}"))
        if isinstance(e, (BranchExistsError, WorktreeExistsError)):
            user_output("Remove the existing one, or retry with --random.")
        raise SystemExit(EXIT_PROVISION_FAILED) from e
    except RuntimeError as e:
        user_output(format_error(str(e)))
        raise SystemExit(EXIT_PROVISION_FAILED) from e

    render_outcome(outcome)
    raise SystemExit(outcome.exit_code)


def _create_context_or_exit(verbose: bool) -> ArboristContext:
    try:
        return create_context(verbose=verbose)
    except (ConfigError, RuntimeError) as e:
        user_output(format_error(str(e)))
        raise SystemExit(EXIT_PROVISION_FAILED) from e


def _save_defaults(ctx: ArboristContext, *, verbose: bool, random_identity: bool) -> None:
    config = GlobalConfig(
        random_identity=random_identity,
        verbose=verbose,
        max_attempts=ctx.config.max_attempts,
    )
    ctx.config_store.save(config)
    user_output(f"Saved defaults to {ctx.config_store.location()}")


def main() -> None:
    """CLI entry point used by the `arborist` console script."""
    cli()
