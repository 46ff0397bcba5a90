"""Rendering of the closing report for isolations that outlive the command."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from arborist.core.cleanup import Orphaned, Outcome, Retained
from arborist.core.provisioner import Isolation


def _location_lines(isolation: Isolation) -> list[Text]:
    lines = [Text(f"Branch:   {isolation.branch}")]
    if isolation.worktree_path is not None:
        lines.append(Text(f"Worktree: {isolation.worktree_path}"))
    return lines


def _resume_hint(isolation: Isolation) -> Text:
    if isolation.worktree_path is not None:
        return Text(f"Resume with: cd {isolation.worktree_path}", style="dim")
    detach = "--detach " if isolation.restore_detached else ""
    return Text(f"Switch back with: git checkout {detach}{isolation.restore_ref}", style="dim")


def _cleanup_hint(orphaned: Orphaned) -> Text:
    isolation = orphaned.isolation
    commands: list[str] = []
    if orphaned.branch_checked_out:
        # Leave the isolation branch before deleting it
        commands.append(f"git checkout --detach {isolation.fork_point}")
    if isolation.worktree_path is not None:
        commands.append(f"git worktree remove --force {isolation.worktree_path}")
    commands.append(f"git branch -D {isolation.branch}")
    return Text("Remove with: " + " && ".join(commands), style="dim")


def render_outcome(outcome: Outcome, console: Console | None = None) -> None:
    """Report a retained or orphaned isolation as a panel on stderr.

    Removed isolations and non-repository runs print nothing; the caller's
    shell only sees the wrapped command's own output and exit status.

    Args:
        outcome: Terminal result of the lifecycle
        console: Rich Console to print to (defaults to a stderr console)
    """
    disposition = outcome.disposition
    if not isinstance(disposition, (Retained, Orphaned)):
        return

    if console is None:
        console = Console(stderr=True)

    isolation = disposition.isolation
    lines = _location_lines(isolation)
    lines.append(Text(""))

    if isinstance(disposition, Retained):
        lines.append(_resume_hint(isolation))
        title = f"Kept isolation '{isolation.identity}'"
        border_style = "green"
    else:
        for error in disposition.errors:
            lines.append(Text(str(error), style="red"))
        lines.append(_cleanup_hint(disposition))
        title = f"Could not remove isolation '{isolation.identity}'"
        border_style = "yellow"

    console.print(Panel(Text("\n").join(lines), title=title, border_style=border_style))
