"""Subprocess execution with rich error context.

Every git invocation that is allowed to fail loudly goes through
run_subprocess_with_context so the resulting error names the operation,
the command line, the exit code and whatever git printed on stderr.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    capture_output: bool = True,
    text: bool = True,
    encoding: str = "utf-8",
    check: bool = True,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting.

    Wraps subprocess.run() to catch CalledProcessError and re-raise as RuntimeError
    with operation context, stderr output, and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
            (e.g. "create branch 'arborist/blue'")
        cwd: Working directory for command execution
        capture_output: Whether to capture stdout/stderr (default: True)
        text: Whether to decode output as text (default: True)
        encoding: Text encoding to use (default: "utf-8")
        check: Whether to raise on non-zero exit (default: True)
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        RuntimeError: If command fails, or its binary is not found
    """
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=text,
            encoding=encoding,
            check=check,
            **kwargs,
        )

    except subprocess.CalledProcessError as e:
        cmd_str = " ".join(str(arg) for arg in cmd)
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        if e.stdout:
            stdout_text = e.stdout if isinstance(e.stdout, str) else e.stdout.decode("utf-8")
            stdout_stripped = stdout_text.strip()
            if stdout_stripped:
                error_msg += f"\nstdout: {stdout_stripped}"

        if e.stderr:
            stderr_text = e.stderr if isinstance(e.stderr, str) else e.stderr.decode("utf-8")
            stderr_stripped = stderr_text.strip()
            if stderr_stripped:
                error_msg += f"\nstderr: {stderr_stripped}"

        raise RuntimeError(error_msg) from e

    except FileNotFoundError as e:
        cmd_str = " ".join(str(arg) for arg in cmd)
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e
