"""Shell and git utilities.

Thin wrappers around subprocess for git, plus the output helpers the sync
job uses for progress and diagnostics.
"""

from __future__ import annotations

import subprocess
import sys


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "show", "HEAD").
        check: If True (default), raise CalledProcessError on non-zero exit.
               Set to False for probes whose exit status is the answer.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def git_status(*args: str) -> int:
    """Run a git command for its exit status only."""
    return subprocess.run(["git", *args], capture_output=True).returncode


def echo(output: str) -> None:
    """Print command output, skipping empty results."""
    if output:
        print(output)


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def error(msg: str) -> None:
    """Print an error message to stderr without stopping the run."""
    print(f"ERROR: {msg}", file=sys.stderr)

