"""Sync pipeline: locate → diff → parse → update → commit → push.

This module orchestrates one hjson-sync run:
1. Check that the Node.js client package exists
2. Read the last commit's diff to its package.json
3. Parse the first added line into a dependency name/version
4. Apply that version to the matching entry in package.hjson
5. Commit the rewritten file and push it back to the CI branch

Every "nothing to sync" path ends the run with status 0. The lookup, the
token check and the branch check all happen before package.hjson is
written, so an aborted run never leaves a modified file behind.
"""

from __future__ import annotations

from pathlib import Path

from .diff import extract_added_line, parse_dependency_change
from .manifest import ManifestDocument, load_manifest, save_manifest
from .models import DependencyChange, RunContext, SyncConfig, VersionBump
from .shell import error, step
from .vcs import commit, configure_identity, has_staged_changes, push, show_commit_diff, stage
from .versions import classify_bump


def locate_target_directory(base_path: Path) -> Path | None:
    """Return the client package directory, or None if it doesn't exist."""
    return base_path if base_path.is_dir() else None


def apply_change_to_document(
    document: ManifestDocument, change: DependencyChange
) -> VersionBump | None:
    """Set the version of the first entry named ``change.name``.

    Groups are searched in order, dependencies before devDependencies, and
    only the first match is updated. Returns None when neither group lists
    the dependency; the document is left untouched in that case.
    """
    group = document.find(change.name)
    if group is None:
        return None

    old = document.get_version(group, change.name)
    document.set_version(group, change.name, change.version)

    kind = classify_bump(old, change.version)
    suffix = f" ({kind})" if kind else ""
    print(f"  Changing {change.name} from {old} to {change.version}{suffix}")
    return VersionBump(name=change.name, group=group, old=old, new=change.version)


def check_push_context(context: RunContext) -> int | None:
    """Return an exit status if the run can't commit and push, else None.

    A missing token is a soft stop (status 0); a missing branch means CI is
    misconfigured (status 1).
    """
    if context.github_token is None:
        print("  No GitHub token found")
        return 0
    if not context.branch:
        error(f"Unknown source branch name: {context.branch!r}")
        return 1
    return None


def write_netrc(context: RunContext, config: SyncConfig) -> Path:
    """Write git-over-HTTPS credentials to ~/.netrc, readable by the owner only."""
    assert context.github_token is not None
    netrc = context.home / ".netrc"
    netrc.write_text(
        f"machine {config.netrc_machine} login {config.netrc_login} "
        f"password {context.github_token.get_secret_value()}"
    )
    netrc.chmod(0o600)
    return netrc


def commit_and_push(path: str, config: SyncConfig, context: RunContext) -> int:
    """Commit ``path`` and push it to the branch CI is building.

    Returns the exit status for the run.
    """
    blocked = check_push_context(context)
    if blocked is not None:
        return blocked
    assert context.branch is not None

    step("Committing to git")
    configure_identity(config.git_user_name, config.git_user_email)
    stage(path)
    if not has_staged_changes():
        print("  No changes to commit")
        return 0
    commit(config.commit_message)
    write_netrc(context, config)

    step(f"Pushing commit to {context.branch}")
    push(context.branch)
    print("  Committed and pushed")
    return 0


def run_sync(config: SyncConfig, context: RunContext, root: Path | None = None) -> int:
    """Execute one sync run and return the process exit status.

    Args:
        config: Static job settings (paths, git identity, run switches).
        context: Environment-derived token, branch and home directory.
        root: Repository root; defaults to the current directory.
    """
    root = root or Path.cwd()

    # Phase 1: Find the change
    step("Locating Node.js client")
    client_dir = locate_target_directory(root / config.client_dir)
    if client_dir is None:
        print("  No Node.js gRPC client found, exiting")
        return 0

    step(f"Reading last change to {config.manifest_path}")
    added = extract_added_line(show_commit_diff(config.manifest_path))
    if added is None:
        print("  Could not find a line that was added")
        return 0
    print(f"  added {added}")

    change = parse_dependency_change(added)
    if change is None:
        print("  No changed dependency found, exiting")
        return 0

    # Phase 2: Update package.hjson in memory
    step(f"Updating {config.hjson_path}")
    hjson_path = client_dir / config.hjson_name
    document = load_manifest(hjson_path)
    bump = apply_change_to_document(document, change)
    if bump is None:
        error(f"Could not find corresponding dependency in {config.hjson_name}")
        return 1 if config.strict else 0

    if config.dry_run:
        print("  Dry run: leaving files and git untouched")
        return 0

    blocked = check_push_context(context)
    if blocked is not None:
        return blocked

    # Phase 3: Write, commit and push
    save_manifest(hjson_path, document, normalize=config.normalize)
    return commit_and_push(str(hjson_path), config, context)
