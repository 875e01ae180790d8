"""Tests for hjson_sync.manifest."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hjson_sync.errors import ManifestFormatError
from hjson_sync.manifest import ManifestDocument, load_manifest, save_manifest

from conftest import SAMPLE_HJSON

QUOTELESS_HJSON = """\
{
  name: localizer-client
  dependencies: {
    leftpad: 1.0.0
    # kept in step with the server
    typescript: ^4.4.2
  }
}
"""


class TestLoad:
    def test_groups(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        assert doc.group("dependencies")["leftpad"] == "1.0.0"
        assert doc.group("devDependencies")["typescript"] == "^4.4.2"

    def test_missing_group_is_empty(self) -> None:
        doc = ManifestDocument(QUOTELESS_HJSON)
        assert doc.group("devDependencies") == {}

    def test_malformed_document(self) -> None:
        with pytest.raises(ManifestFormatError):
            ManifestDocument("{\n  dependencies: }\n}\n")

    def test_root_must_be_object(self) -> None:
        with pytest.raises(ManifestFormatError):
            ManifestDocument("[1, 2]")

    def test_load_manifest(self, hjson_file: Path) -> None:
        doc = load_manifest(hjson_file)
        assert doc.source == SAMPLE_HJSON
        assert not doc.modified


class TestFind:
    def test_dependencies_before_dev_dependencies(self) -> None:
        """A name listed in both groups resolves to dependencies."""
        doc = ManifestDocument(SAMPLE_HJSON)
        assert doc.find("leftpad") == "dependencies"

    def test_dev_dependency(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        assert doc.find("typescript") == "devDependencies"

    def test_top_level_keys_are_not_dependencies(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        assert doc.find("version") is None

    def test_unknown(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        assert doc.find("rightpad") is None


class TestSetVersion:
    def test_unknown_entry_raises(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        with pytest.raises(KeyError):
            doc.set_version("devDependencies", "google-protobuf", "4.0.0")
        assert not doc.modified

    def test_updates_data(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        doc.set_version("dependencies", "leftpad", "1.2.3")
        assert doc.get_version("dependencies", "leftpad") == "1.2.3"
        assert doc.get_version("devDependencies", "leftpad") == "0.9.0"
        assert doc.modified


class TestDumps:
    def test_unmodified_is_byte_identical(self) -> None:
        assert ManifestDocument(SAMPLE_HJSON).dumps() == SAMPLE_HJSON

    def test_edit_replaces_only_the_value(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        doc.set_version("dependencies", "leftpad", "1.2.3")
        assert doc.dumps() == SAMPLE_HJSON.replace('"leftpad": "1.0.0"', '"leftpad": "1.2.3"')

    def test_edit_in_second_group(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        doc.set_version("devDependencies", "leftpad", "1.0.0")
        out = doc.dumps()
        assert out.count('"leftpad": "1.0.0"') == 2
        assert '"leftpad": "0.9.0"' not in out

    def test_comments_survive(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        doc.set_version("dependencies", "google-protobuf", "^3.19.1")
        out = doc.dumps()
        assert "# Source of truth for package.json" in out
        assert "// pinned until the TS types are fixed upstream" in out

    def test_quoteless_value_stays_quoteless(self) -> None:
        doc = ManifestDocument(QUOTELESS_HJSON)
        doc.set_version("dependencies", "leftpad", "1.2.3")
        assert doc.dumps() == QUOTELESS_HJSON.replace("leftpad: 1.0.0", "leftpad: 1.2.3")

    def test_quoteless_value_quoted_when_needed(self) -> None:
        """A value that would read back as something else gets JSON quotes."""
        doc = ManifestDocument(QUOTELESS_HJSON)
        doc.set_version("dependencies", "leftpad", "2")
        assert 'leftpad: "2"\n' in doc.dumps()

    def test_value_escaping(self) -> None:
        doc = ManifestDocument(SAMPLE_HJSON)
        doc.set_version("dependencies", "leftpad", 'file:"vendored"')
        assert '"leftpad": "file:\\"vendored\\""' in doc.dumps()

    def test_normalize(self) -> None:
        doc = ManifestDocument(QUOTELESS_HJSON)
        doc.set_version("dependencies", "leftpad", "1.2.3")
        out = doc.dumps(normalize=True)
        assert out.endswith("}\n")
        assert '  "name": "localizer-client",' in out
        assert "#" not in out
        assert json.loads(out) == {
            "name": "localizer-client",
            "dependencies": {"leftpad": "1.2.3", "typescript": "^4.4.2"},
        }


class TestSave:
    def test_save_manifest(self, hjson_file: Path) -> None:
        doc = load_manifest(hjson_file)
        doc.set_version("dependencies", "leftpad", "1.2.3")
        save_manifest(hjson_file, doc)
        assert '"leftpad": "1.2.3"' in hjson_file.read_text()
        assert load_manifest(hjson_file).get_version("dependencies", "leftpad") == "1.2.3"

    def test_save_unmodified_round_trip(self, hjson_file: Path) -> None:
        save_manifest(hjson_file, load_manifest(hjson_file))
        assert hjson_file.read_text() == SAMPLE_HJSON
