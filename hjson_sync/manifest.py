"""Hjson reading and writing utilities.

package.hjson is edited by hand and carries comments, so a version sync
rewrites only the value token that changed and leaves every other byte of
the file alone. The hjson library does the parsing; a small scanner finds
where a member's value sits in the source text so it can be replaced.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, NamedTuple

import hjson

from .errors import ManifestFormatError

DEPENDENCY_GROUPS = ("dependencies", "devDependencies")

# Numbers and keywords end a quoteless value early; anything else runs to
# the end of the line.
_LITERAL_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null")
_TERMINATOR_RE = re.compile(r"[ \t]*(?:\r?$|[,}\]#]|//|/\*)")
_UNSAFE_QUOTELESS_START = tuple("\"'{}[],:#") + ("//", "/*")


class _Member(NamedTuple):
    key: str
    start: int
    end: int


class _Scanner:
    """Finds member value spans in Hjson source text.

    Only locates tokens; decoding is left to the hjson library, which has
    already accepted the document before the scanner runs.
    """

    def __init__(self, text: str) -> None:
        self.text = text

    def root_members(self) -> list[_Member]:
        i = self.skip(0)
        # Hjson allows the root braces to be omitted.
        if i < len(self.text) and self.text[i] == "{":
            return self.members(i + 1, "}")[0]
        return self.members(i, None)[0]

    def members(self, i: int, closing: str | None) -> tuple[list[_Member], int]:
        text = self.text
        found: list[_Member] = []
        while True:
            i = self.skip(i)
            if i >= len(text):
                if closing is None:
                    return found, i
                raise ManifestFormatError("unexpected end of document")
            if text[i] == closing:
                return found, i + 1
            if text[i] == ",":
                i += 1
                continue
            key, i = self.key(i)
            i = self.skip(i)
            if i >= len(text) or text[i] != ":":
                raise ManifestFormatError(f"expected ':' after key {key!r}")
            start = self.skip(i + 1)
            end = self.value_end(start)
            found.append(_Member(key, start, end))
            i = end

    def elements_end(self, i: int) -> int:
        text = self.text
        while True:
            i = self.skip(i)
            if i >= len(text):
                raise ManifestFormatError("unterminated array")
            if text[i] == "]":
                return i + 1
            if text[i] == ",":
                i += 1
                continue
            i = self.value_end(i)

    def key(self, i: int) -> tuple[str, int]:
        text = self.text
        if text[i] in "\"'":
            end = self.string_end(i)
            return _decode_string(text[i:end]), end
        end = i
        while end < len(text) and text[end] not in ":,{}[] \t\r\n":
            end += 1
        if end == i:
            raise ManifestFormatError(f"expected a key at offset {i}")
        return text[i:end], end

    def value_end(self, i: int) -> int:
        text = self.text
        if i >= len(text):
            raise ManifestFormatError("missing value at end of document")
        if text[i] in "\"'":
            return self.string_end(i)
        if text[i] == "{":
            return self.members(i + 1, "}")[1]
        if text[i] == "[":
            return self.elements_end(i + 1)
        line_end = text.find("\n", i)
        if line_end == -1:
            line_end = len(text)
        literal = _LITERAL_RE.match(text, i, line_end)
        if literal and _TERMINATOR_RE.match(text, literal.end(), line_end):
            return literal.end()
        return i + len(text[i:line_end].rstrip())

    def string_end(self, i: int) -> int:
        text = self.text
        if text.startswith("'''", i):
            end = text.find("'''", i + 3)
            if end == -1:
                raise ManifestFormatError("unterminated multiline string")
            return end + 3
        quote = text[i]
        j = i + 1
        while j < len(text) and text[j] != "\n":
            if text[j] == "\\":
                j += 2
                continue
            if text[j] == quote:
                return j + 1
            j += 1
        raise ManifestFormatError(f"unterminated string at offset {i}")

    def skip(self, i: int) -> int:
        """Skip whitespace and comments."""
        text = self.text
        while i < len(text):
            if text[i] in " \t\r\n":
                i += 1
            elif text[i] == "#" or text.startswith("//", i):
                end = text.find("\n", i)
                i = len(text) if end == -1 else end + 1
            elif text.startswith("/*", i):
                end = text.find("*/", i + 2)
                if end == -1:
                    raise ManifestFormatError("unterminated comment")
                i = end + 2
            else:
                break
        return i


def _decode_string(token: str) -> str:
    if token.startswith('"'):
        return json.loads(token)
    return token[1:-1].replace("\\'", "'")


def _is_quoteless_safe(value: str) -> bool:
    return (
        bool(value)
        and value == value.strip()
        and "\n" not in value
        and not value.startswith(_UNSAFE_QUOTELESS_START)
        and _LITERAL_RE.fullmatch(value) is None
    )


def _render_value(token: str, value: str) -> str:
    """Format ``value`` in the quoting style of the token it replaces."""
    if token.startswith("'") and not token.startswith("'''"):
        if "'" not in value and "\\" not in value:
            return f"'{value}'"
    elif not token.startswith('"') and _is_quoteless_safe(value):
        return value
    return json.dumps(value, ensure_ascii=False)


def _value_span(text: str, group: str, name: str) -> tuple[int, int]:
    """Locate the value token of ``group.name``.

    Later duplicates win, matching how the parser resolves them.
    """
    scanner = _Scanner(text)
    span: tuple[int, int] | None = None
    for member in scanner.root_members():
        if member.key != group or text[member.start] != "{":
            continue
        for entry in scanner.members(member.start + 1, "}")[0]:
            if entry.key == name:
                span = (entry.start, entry.end)
    if span is None:
        raise ManifestFormatError(f"could not locate {group}.{name} in package.hjson")
    return span


class ManifestDocument:
    """A parsed package.hjson that remembers its source text.

    ``data`` holds the decoded document. Versions changed through
    ``set_version`` are written back by ``dumps`` as in-place token edits,
    so comments, ordering and quoting survive the round trip.
    """

    def __init__(self, text: str) -> None:
        self.source = text
        try:
            self.data = hjson.loads(text)
        except hjson.HjsonDecodeError as exc:
            raise ManifestFormatError(f"invalid Hjson: {exc}") from exc
        if not isinstance(self.data, dict):
            raise ManifestFormatError("package.hjson must contain an object")
        self._edits: dict[tuple[str, str], str] = {}

    def group(self, group: str) -> dict[str, Any]:
        """Return a dependency group, or an empty mapping when it's absent."""
        deps = self.data.get(group)
        return deps if isinstance(deps, dict) else {}

    def find(self, name: str) -> str | None:
        """Return the first dependency group that lists ``name``."""
        for group in DEPENDENCY_GROUPS:
            if name in self.group(group):
                return group
        return None

    def get_version(self, group: str, name: str) -> str:
        return str(self.group(group)[name])

    def set_version(self, group: str, name: str, version: str) -> None:
        deps = self.group(group)
        if name not in deps:
            raise KeyError(f"{name} is not listed in {group}")
        deps[name] = version
        self._edits[(group, name)] = version

    @property
    def modified(self) -> bool:
        return bool(self._edits)

    def dumps(self, normalize: bool = False) -> str:
        """Serialize the document.

        By default the original text is returned with only the edited
        values replaced. With ``normalize``, the document is rendered in a
        fixed style instead: every key and value quoted, comma separators,
        braces on the same line, two-space indent. Comments are dropped in
        that mode.
        """
        if normalize:
            return hjson.dumpsJSON(self.data, indent=2, ensure_ascii=False) + "\n"

        text = self.source
        for (group, name), version in self._edits.items():
            start, end = _value_span(text, group, name)
            text = text[:start] + _render_value(text[start:end], version) + text[end:]

        if self._edits and hjson.loads(text) != self.data:
            raise ManifestFormatError("rewritten package.hjson does not match the edited document")
        return text


def load_manifest(path: Path) -> ManifestDocument:
    """Load and parse a package.hjson file."""
    return ManifestDocument(path.read_bytes().decode("utf-8"))


def save_manifest(path: Path, doc: ManifestDocument, normalize: bool = False) -> None:
    """Write a ManifestDocument back to disk."""
    path.write_bytes(doc.dumps(normalize=normalize).encode("utf-8"))
