"""Version parsing and bump classification.

npm manifests usually carry ranges ("^1.2.3", "~2.0") rather than bare
versions, so the leading operator is dropped before handing the rest to
semver. Anything that still doesn't parse (dist-tags, git URLs) is
reported as unclassifiable rather than raising.
"""

from __future__ import annotations

import re

import semver

_RANGE_PREFIX_RE = re.compile(r"^(?:[\^~=v]|[<>]=?)+\s*")


def parse_version(version_str: str) -> semver.Version | None:
    """Parse a dependency version into a semver.Version object.

    Handles range prefixes and incomplete versions:
    - "1.2.3" → 1.2.3
    - "^1.2"  → 1.2.0
    - "~2"    → 2.0.0
    - "latest" → None
    """
    text = _RANGE_PREFIX_RE.sub("", version_str.strip())
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (ValueError, TypeError):
        return None


def classify_bump(old: str, new: str) -> str | None:
    """Describe the move from ``old`` to ``new``.

    Returns one of "major", "minor", "patch", "prerelease", "unchanged" or
    "downgrade", or None when either side isn't a semver-like version.

    Examples:
        classify_bump("1.0.0", "1.2.3") → "minor"
        classify_bump("^2.1.0", "^3.0.0") → "major"
        classify_bump("1.2.3", "1.2.3-beta.1") → "downgrade"
    """
    old_v, new_v = parse_version(old), parse_version(new)
    if old_v is None or new_v is None:
        return None
    if new_v == old_v:
        return "unchanged"
    if new_v < old_v:
        return "downgrade"
    if new_v.major != old_v.major:
        return "major"
    if new_v.minor != old_v.minor:
        return "minor"
    if new_v.patch != old_v.patch:
        return "patch"
    return "prerelease"
