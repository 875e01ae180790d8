"""Data models for hjson-sync.

These Pydantic models carry the settings, environment and per-run records
used by the sync job.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, SecretStr

TOKEN_ENV = "OUTREACH_GITHUB_TOKEN"
BRANCH_ENV = "CIRCLE_BRANCH"


class DependencyChange(BaseModel):
    """A dependency version parsed from one added package.json line."""

    name: str
    version: str


class VersionBump(BaseModel):
    """Records the package.hjson entry rewritten during a run.

    Attributes:
        name: Dependency name.
        group: Dependency group the entry lives in ("dependencies" or
               "devDependencies").
        old: The version before syncing.
        new: The version after syncing.
    """

    name: str
    group: str
    old: str
    new: str


class SyncConfig(BaseModel):
    """Static settings for a sync run.

    Paths are relative to the repository root. The defaults describe the
    Node.js gRPC client layout, so CI runs the job without any options.
    """

    client_dir: str = "api/clients/node"
    manifest_name: str = "package.json"
    hjson_name: str = "package.hjson"
    git_user_name: str = "Outreach CI"
    git_user_email: str = "outreach-ci@users.noreply.github.com"
    netrc_machine: str = "github.com"
    netrc_login: str = "outreach-ci"
    dry_run: bool = False
    strict: bool = False
    normalize: bool = False

    @property
    def manifest_path(self) -> str:
        return f"{self.client_dir.rstrip('/')}/{self.manifest_name}"

    @property
    def hjson_path(self) -> str:
        return f"{self.client_dir.rstrip('/')}/{self.hjson_name}"

    @property
    def commit_message(self) -> str:
        return f"chore: sync {self.hjson_path}"


class RunContext(BaseModel):
    """Environment-derived inputs, read once at startup."""

    model_config = ConfigDict(frozen=True)

    github_token: SecretStr | None = None
    branch: str | None = None
    home: Path

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RunContext:
        """Build a context from the process environment (or a given mapping).

        Empty values are treated as unset.
        """
        env = os.environ if environ is None else environ
        token = env.get(TOKEN_ENV) or None
        home = env.get("HOME")
        return cls(
            github_token=SecretStr(token) if token else None,
            branch=env.get(BRANCH_ENV) or None,
            home=Path(home) if home else Path.home(),
        )
