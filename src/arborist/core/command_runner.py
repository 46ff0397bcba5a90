"""Execution of the wrapped command.

The child inherits stdin, stdout and stderr and runs to completion; the
wrapper blocks on it and does nothing else in the meantime. Exit statuses
follow shell conventions so the caller's shell sees what it would have seen
without the wrapper.
"""

import logging
import signal
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType

logger = logging.getLogger(__name__)

EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127
SIGNAL_EXIT_BASE = 128

# Terminal-generated signals reach the child through its process group
IGNORED_WHILE_RUNNING = (signal.SIGINT, signal.SIGQUIT)
# Signals aimed at the wrapper alone are relayed to the child
FORWARDED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


class CommandRunner(ABC):
    """Runs the wrapped command and reports its exit status."""

    @abstractmethod
    def run(self, command: list[str], cwd: Path) -> int:
        """Run command in cwd with inherited standard streams.

        Args:
            command: Program and arguments, passed through untouched
            cwd: Directory to run the command in

        Returns:
            The command's exit status; 128 + N if it was killed by signal N,
            127 if the program was not found, 126 if it could not be executed
            (including when cwd does not exist)
        """
        ...


class RealCommandRunner(CommandRunner):
    """Production runner backed by subprocess.Popen."""

    def run(self, command: list[str], cwd: Path) -> int:
        """Run command in cwd, forwarding termination signals to it."""
        logger.debug("Running %s in %s", command, cwd)
        if not cwd.is_dir():
            logger.error("Cannot run %s: directory %s does not exist", command[0], cwd)
            return EXIT_CANNOT_EXECUTE
        try:
            process = subprocess.Popen(command, cwd=cwd)
        except FileNotFoundError:
            logger.error("Command not found: %s", command[0])
            return EXIT_NOT_FOUND
        except OSError as e:
            logger.error("Cannot execute %s: %s", command[0], e)
            return EXIT_CANNOT_EXECUTE

        with _forward_signals(process):
            returncode = process.wait()

        logger.debug("Command exited with status %d", returncode)
        return exit_status_from_returncode(returncode)


def exit_status_from_returncode(returncode: int) -> int:
    """Translate a Popen returncode into a shell-style exit status."""
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


@contextmanager
def _forward_signals(process: subprocess.Popen[bytes]) -> Iterator[None]:
    def relay(signum: int, _frame: FrameType | None) -> None:
        if process.poll() is None:
            process.send_signal(signum)

    previous: dict[int, object] = {}
    for signum in IGNORED_WHILE_RUNNING:
        previous[signum] = signal.signal(signum, signal.SIG_IGN)
    for signum in FORWARDED_SIGNALS:
        previous[signum] = signal.signal(signum, relay)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            # None means the handler was installed outside Python
            restored = signal.SIG_DFL if handler is None else handler
            signal.signal(signum, restored)  # type: ignore[arg-type]
