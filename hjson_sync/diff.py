"""Parsing of package.json diffs.

The job only looks at the first added line of the last commit's diff to
package.json, which for a dependency bump looks like:

    +    "leftpad": "1.2.3",
"""

from __future__ import annotations

import re

from .models import DependencyChange

ADDED_MARKER = "+ "

# Quoted key and quoted value, optionally followed by a comma.
DEPENDENCY_LINE_RE = re.compile(r'^\+\s+"(?P<name>[^"]+)":\s*"(?P<version>[^"]*)",?')


def extract_added_line(diff_output: str) -> str | None:
    """Return the first added line of a zero-context diff, if any.

    The "+ " marker skips the "+++ b/path" file header.
    """
    for line in diff_output.splitlines():
        if line.startswith(ADDED_MARKER):
            return line
    return None


def parse_dependency_change(line: str) -> DependencyChange | None:
    """Extract a dependency name/version pair from an added line.

    Examples:
        '+    "leftpad": "1.2.3",' → DependencyChange(name="leftpad", version="1.2.3")
        '+  "version": "2.0.0"'   → DependencyChange(name="version", version="2.0.0")
        '+  "scripts": {'         → None
    """
    match = DEPENDENCY_LINE_RE.match(line)
    if match is None:
        return None
    return DependencyChange(name=match["name"], version=match["version"])
