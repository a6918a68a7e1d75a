"""Parser for the indentation-based heat rules document.

Supports only the subset of YAML the rules file uses: nested maps, arrays
introduced by ``- `` items (scalars or maps), scalar values and ``#``
comments. Container kind for an empty ``key:`` line is decided by peeking at
the next content line.

Usage example:
    from pipeline_heat.rules_document import parse_rules_document

    tree = parse_rules_document("heatBuckets:\\n  - maxScore: 24\\n    heat: 0\\n")
    assert tree == {"heatBuckets": [{"maxScore": 24, "heat": 0}]}
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, TypeAlias

from .exceptions import RulesDocumentParseError

Scalar: TypeAlias = str | int | float | bool | None
RulesTree: TypeAlias = Scalar | dict[str, "RulesTree"] | list["RulesTree"]

_ITEM_MARKER = "- "
_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class _Frame:
    indent: int
    kind: Literal["map", "array"]
    container: dict[str, RulesTree] | list[RulesTree]


@dataclass(frozen=True)
class _ContentLine:
    number: int
    indent: int
    text: str


def parse_scalar(value: str) -> Scalar:
    """Coerce a raw value into a bool, null, number or string."""
    if value == "true":
        return True
    if value == "false":
        return False
    if value in {"null", "~"}:
        return None
    if _INT_RE.fullmatch(value):
        return int(value)
    if _FLOAT_RE.fullmatch(value):
        return float(value)
    return value


def _content_lines(text: str) -> list[_ContentLine]:
    lines: list[_ContentLine] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip())
        lines.append(_ContentLine(number=number, indent=indent, text=stripped))
    return lines


def _is_item(line: _ContentLine) -> bool:
    return line.text.startswith(_ITEM_MARKER)


def _opens_array(line: _ContentLine, following: _ContentLine | None) -> bool:
    return following is not None and following.indent > line.indent and _is_item(following)


def _split_pair(line: _ContentLine, text: str) -> tuple[str, str]:
    key, separator, value = text.partition(":")
    if not separator:
        raise RulesDocumentParseError(line.number, f"expected 'key: value', got {text!r}")
    key = key.strip()
    if not key:
        raise RulesDocumentParseError(line.number, "empty key")
    return key, value.strip()


def parse_rules_document(text: str) -> dict[str, RulesTree]:
    """Parse a rules document into nested dicts, lists and scalars.

    Raises:
        RulesDocumentParseError: On structural errors, with the 1-based line number.
    """
    root: dict[str, RulesTree] = {}
    stack: list[_Frame] = [_Frame(indent=-1, kind="map", container=root)]
    lines = _content_lines(text)

    for index, line in enumerate(lines):
        while len(stack) > 1 and stack[-1].indent >= line.indent:
            stack.pop()
        parent = stack[-1]

        if _is_item(line):
            if parent.kind != "array" or not isinstance(parent.container, list):
                raise RulesDocumentParseError(line.number, "array item without an array parent")
            content = line.text[1:].strip()
            item: RulesTree
            if not content:
                item = {}
            elif ":" in content:
                key, value = _split_pair(line, content)
                item = {key: parse_scalar(value)} if value else {}
            else:
                item = parse_scalar(content)
            parent.container.append(item)
            if isinstance(item, dict):
                stack.append(_Frame(indent=line.indent, kind="map", container=item))
            continue

        if parent.kind != "map" or not isinstance(parent.container, dict):
            raise RulesDocumentParseError(line.number, "mapping entry inside an array")
        key, value = _split_pair(line, line.text)
        if value:
            parent.container[key] = parse_scalar(value)
            continue

        following = lines[index + 1] if index + 1 < len(lines) else None
        if _opens_array(line, following):
            child_list: list[RulesTree] = []
            parent.container[key] = child_list
            stack.append(_Frame(indent=line.indent, kind="array", container=child_list))
        else:
            child_map: dict[str, RulesTree] = {}
            parent.container[key] = child_map
            stack.append(_Frame(indent=line.indent, kind="map", container=child_map))

    return root
