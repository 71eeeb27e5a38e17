"""JSON Schema validation for persisted block and memo payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import jsonschema

from ..core.blocks import ATTACHMENT_KINDS, TEXT_BLOCK_TYPE
from ..core.levels import CLEAR, LEVEL_ORDER

__all__ = [
    "BLOCK_SCHEMA",
    "MEMO_SCHEMA",
    "ValidationIssue",
    "validate_block_payload",
    "validate_memo_payload",
]

MAX_SCHEMA_ERRORS = 25
_LEVEL_VALUES = [level.value for level in LEVEL_ORDER]

_RANGE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["start", "end", "level"],
    "properties": {
        "start": {"type": "integer", "minimum": 0},
        "end": {"type": "integer", "minimum": 1},
        "level": {"enum": _LEVEL_VALUES},
    },
}

_TEXT_BLOCK_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "type", "content"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "type": {"const": TEXT_BLOCK_TYPE},
        "content": {"type": "string"},
        "importanceRanges": {"type": "array", "items": _RANGE_SCHEMA},
    },
}

_ATTACHMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "type"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "type": {"enum": sorted(ATTACHMENT_KINDS)},
        "importance": {"enum": [*_LEVEL_VALUES, CLEAR]},
    },
}

BLOCK_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "oneOf": [_TEXT_BLOCK_SCHEMA, _ATTACHMENT_SCHEMA],
}

MEMO_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["id", "blocks"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "title": {"type": "string"},
        "importance": {"enum": [*_LEVEL_VALUES, CLEAR]},
        "blocks": {"type": "array", "items": BLOCK_SCHEMA},
    },
}


@dataclass(slots=True)
class ValidationIssue:
    """One problem found in a payload."""

    message: str
    path: str = ""


def validate_block_payload(payload: Any) -> list[ValidationIssue]:
    """Validate a block payload against :data:`BLOCK_SCHEMA` and the range invariants."""

    issues = _schema_issues(BLOCK_SCHEMA, payload)
    if issues:
        return issues
    return _range_issues(payload, prefix="")


def validate_memo_payload(payload: Any) -> list[ValidationIssue]:
    issues = _schema_issues(MEMO_SCHEMA, payload)
    if issues:
        return issues
    for index, block in enumerate(payload.get("blocks") or ()):
        issues.extend(_range_issues(block, prefix=f"blocks[{index}]"))
    return issues


def _schema_issues(schema: Mapping[str, Any], payload: Any) -> list[ValidationIssue]:
    validator = jsonschema.Draft202012Validator(schema)
    issues: list[ValidationIssue] = []
    errors = sorted(validator.iter_errors(payload), key=lambda item: [str(part) for part in item.absolute_path])
    for error in errors:
        issues.append(ValidationIssue(message=error.message, path=_format_schema_path(error.absolute_path)))
        if len(issues) >= MAX_SCHEMA_ERRORS:
            issues.append(ValidationIssue(message="Too many validation errors; stopping early."))
            break
    return issues


def _range_issues(block: Mapping[str, Any], *, prefix: str) -> list[ValidationIssue]:
    if block.get("type") != TEXT_BLOCK_TYPE:
        return []
    content_length = len(block.get("content") or "")
    raw_ranges = block.get("importanceRanges") or []
    issues: list[ValidationIssue] = []
    base = f"{prefix}.importanceRanges" if prefix else "importanceRanges"
    ordered = sorted(enumerate(raw_ranges), key=lambda pair: pair[1]["start"])
    previous: tuple[int, Mapping[str, Any]] | None = None
    for index, item in ordered:
        path = f"{base}[{index}]"
        if item["end"] <= item["start"]:
            issues.append(ValidationIssue(message="range end must be greater than start", path=path))
            continue
        if item["end"] > content_length:
            issues.append(
                ValidationIssue(
                    message=f"range end {item['end']} exceeds content length {content_length}",
                    path=path,
                )
            )
        if previous is not None and item["start"] < previous[1]["end"]:
            issues.append(
                ValidationIssue(message=f"range overlaps {base}[{previous[0]}]", path=path)
            )
        if previous is None or item["end"] > previous[1]["end"]:
            previous = (index, item)
    return issues


def _format_schema_path(path: Sequence[Any]) -> str:
    if not path:
        return ""
    components: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            if components:
                components[-1] = f"{components[-1]}[{segment}]"
            else:
                components.append(f"[{segment}]")
        else:
            components.append(str(segment))
    return ".".join(filter(None, components))
