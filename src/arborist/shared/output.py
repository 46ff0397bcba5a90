"""User-facing output shared by the CLI and the verbose git wrapper.

user_output() is the single route for messages addressed to the person at the
terminal. It writes to stderr so the wrapped command keeps stdout to itself.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a user-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def format_error(message: str) -> str:
    """Prefix a message with a red 'Error: ' marker."""
    return click.style("Error: ", fg="red") + message


def format_warning(message: str) -> str:
    """Prefix a message with a yellow 'Warning: ' marker."""
    return click.style("Warning: ", fg="yellow") + message
