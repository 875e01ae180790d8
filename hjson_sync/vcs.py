"""Git operations used by the sync job.

Everything that reads or mutates the repository goes through these few
functions so the pipeline can be tested with them patched out.
"""

from __future__ import annotations

from .shell import echo, git, git_status


def show_commit_diff(path: str, rev: str = "HEAD") -> str:
    """Return the zero-context diff ``rev`` made to ``path``."""
    return git("show", "--pretty=format:", "--unified=0", rev, "--", path)


def configure_identity(name: str, email: str) -> None:
    echo(git("config", "user.name", name))
    echo(git("config", "user.email", email))


def stage(path: str) -> None:
    echo(git("add", path))


def has_staged_changes() -> bool:
    """Check whether the index differs from HEAD."""
    return git_status("diff", "--cached", "--quiet") != 0


def commit(message: str) -> None:
    echo(git("commit", "-m", message))


def push(branch: str) -> None:
    """Push the current commit to ``branch`` on origin."""
    echo(git("push", "origin", f"HEAD:{branch}"))
