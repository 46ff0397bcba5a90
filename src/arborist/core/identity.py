"""Isolation identities.

An identity is a colour name from a fixed palette. It names the isolation
branch (arborist/<identity>) and, for bare repositories, the worktree
directory (arborist-<identity>). Selecting an identity reserves nothing;
collisions are detected when the isolation is provisioned.
"""

import hashlib
import random
from collections.abc import Collection
from enum import Enum

PALETTE: tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "yellow",
    "purple",
    "orange",
    "pink",
    "cyan",
    "teal",
    "magenta",
    "violet",
    "amber",
    "crimson",
    "navy",
    "indigo",
    "lime",
    "coral",
    "maroon",
    "turquoise",
    "slate",
    "lavender",
    "mint",
    "peach",
    "ruby",
    "sapphire",
    "emerald",
    "topaz",
)

BRANCH_PREFIX = "arborist/"
WORKTREE_PREFIX = "arborist-"


class SelectionMode(Enum):
    """How the first identity of an invocation is chosen."""

    DETERMINISTIC = "deterministic"
    RANDOM = "random"


def branch_name_for(identity: str) -> str:
    return f"{BRANCH_PREFIX}{identity}"


def worktree_name_for(identity: str) -> str:
    return f"{WORKTREE_PREFIX}{identity}"


def deterministic_identity(parent_pid: int, palette: tuple[str, ...] = PALETTE) -> str:
    """Map a parent process id onto the palette.

    Pure function of its arguments: the same terminal session (same parent
    pid) always gets the same colour.
    """
    digest = hashlib.sha256(str(parent_pid).encode("utf-8")).digest()
    return palette[int.from_bytes(digest[:8], "big") % len(palette)]


def random_identity(rng: random.Random, palette: tuple[str, ...] = PALETTE) -> str:
    """Pick a palette entry uniformly at random."""
    return rng.choice(palette)


def select_identity(
    mode: SelectionMode,
    *,
    parent_pid: int,
    rng: random.Random,
    palette: tuple[str, ...] = PALETTE,
) -> str:
    """Choose the first identity to try for this invocation.

    Args:
        mode: Deterministic (parent pid hash) or random selection
        parent_pid: Process id of the invoking shell
        rng: Random source used in random mode
        palette: Candidate identities

    Returns:
        A palette entry
    """
    if mode is SelectionMode.DETERMINISTIC:
        return deterministic_identity(parent_pid, palette)
    return random_identity(rng, palette)


def next_identity(
    tried: Collection[str],
    rng: random.Random,
    palette: tuple[str, ...] = PALETTE,
) -> str | None:
    """Draw a replacement identity after a collision.

    Returns None once every palette entry has been tried.
    """
    remaining = [name for name in palette if name not in tried]
    if not remaining:
        return None
    return rng.choice(remaining)
