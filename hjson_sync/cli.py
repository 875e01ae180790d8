"""CLI entry point for hjson-sync."""

from __future__ import annotations

import subprocess
import sys

import click

from hjson_sync.errors import HjsonSyncError
from hjson_sync.models import RunContext, SyncConfig
from hjson_sync.pipeline import run_sync


@click.group()
@click.version_option(package_name="hjson-sync")
def cli() -> None:
    """Mirror package.json dependency bumps into package.hjson."""


@cli.command()
@click.option(
    "--client-dir",
    default=SyncConfig.model_fields["client_dir"].default,
    show_default=True,
    help="Client package directory, relative to the repo root.",
)
@click.option("--dry-run", is_flag=True, help="Report the change without writing or pushing.")
@click.option("--strict", is_flag=True, help="Exit 1 when package.hjson lacks the dependency.")
@click.option("--normalize", is_flag=True, help="Rewrite package.hjson in normalized style.")
def sync(client_dir: str, dry_run: bool, strict: bool, normalize: bool) -> None:
    """Sync the last package.json dependency bump (usually called from CI)."""
    config = SyncConfig(
        client_dir=client_dir, dry_run=dry_run, strict=strict, normalize=normalize
    )
    try:
        code = run_sync(config, RunContext.from_env())
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip()
        raise click.ClickException(
            f"{' '.join(exc.cmd)} failed with status {exc.returncode}"
            + (f":\n{detail}" if detail else "")
        ) from exc
    except HjsonSyncError as exc:
        raise click.ClickException(str(exc)) from exc
    sys.exit(code)
