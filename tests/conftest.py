"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from hjson_sync.models import RunContext

SAMPLE_HJSON = """\
# Source of truth for package.json. Edit this file, not package.json.
{
  "name": "@getoutreach/localizer",
  "version": "1.0.0",
  "dependencies": {
    "@grpc/grpc-js": "^1.3.7",
    // pinned until the TS types are fixed upstream
    "leftpad": "1.0.0",
    "google-protobuf": "^3.17.3"
  },
  "devDependencies": {
    "typescript": "^4.4.2",
    "leftpad": "0.9.0"
  }
}
"""

SAMPLE_DIFF = """\
diff --git a/api/clients/node/package.json b/api/clients/node/package.json
index 3f1c2ab..8d0e4f1 100644
--- a/api/clients/node/package.json
+++ b/api/clients/node/package.json
@@ -12 +12 @@
-    "leftpad": "1.0.0",
+    "leftpad": "1.2.3",
"""


@pytest.fixture
def hjson_file(tmp_path: Path) -> Path:
    """Create a package.hjson inside a Node.js client directory."""
    client_dir = tmp_path / "api" / "clients" / "node"
    client_dir.mkdir(parents=True)
    path = client_dir / "package.hjson"
    path.write_text(SAMPLE_HJSON)
    return path


@pytest.fixture
def context(tmp_path: Path) -> RunContext:
    """A CI context with a token and branch set."""
    home = tmp_path / "home"
    home.mkdir()
    return RunContext.from_env(
        {"OUTREACH_GITHUB_TOKEN": "ghp_secret", "CIRCLE_BRANCH": "renovate/leftpad", "HOME": str(home)}
    )
