"""
Dot-notation path codec and the unknown-key stripper.

    nest({"details.bio": "hi", "name": "Ann"})
        -> {"details": {"bio": "hi"}, "name": "Ann"}

    flatten({"details": {"bio": "hi"}, "name": "Ann"})
        -> {"details.bio": "hi", "name": "Ann"}

Only mappings are descended into by `flatten`; lists, datetimes,
compiled patterns and every other value are leaves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from docvault.errors import PathConflictError

PATH_SEPARATOR = "."


def _merge(target: dict[str, Any], key: str, value: Any, path: str) -> None:
    """Put `value` at target[key], merging mappings and refusing any other overlap."""
    if key not in target:
        target[key] = copy_tree(value)
        return

    existing = target[key]
    if isinstance(existing, dict) and isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _merge(existing, sub_key, sub_value, f"{path}{PATH_SEPARATOR}{sub_key}")
        return

    raise PathConflictError(
        f"Conflicting values for {path} in dot-notation data",
        field=path,
    )


def copy_tree(value: Any) -> Any:
    """Copy nested mappings and arrays so the result shares no containers with `value`."""
    if isinstance(value, Mapping):
        return {k: copy_tree(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_tree(item) for item in value]
    if isinstance(value, tuple):
        return tuple(copy_tree(item) for item in value)
    return value


def nest(flat: Mapping[str, Any]) -> dict[str, Any]:
    """
    Expand dot-path keys into nested dicts.

    Raises:
        PathConflictError: a leaf value and another key share a path,
            e.g. {"a": 1, "a.b": 2}.
    """
    nested: dict[str, Any] = {}

    for key, value in flat.items():
        segments = key.split(PATH_SEPARATOR)
        level = nested
        walked = []

        for segment in segments[:-1]:
            walked.append(segment)
            child = level.get(segment)
            if child is None and segment not in level:
                child = level[segment] = {}
            elif not isinstance(child, dict):
                raise PathConflictError(
                    f"Conflicting values for {PATH_SEPARATOR.join(walked)} in dot-notation data",
                    field=PATH_SEPARATOR.join(walked),
                )
            level = child

        _merge(level, segments[-1], value, key)

    return nested


def flatten(nested: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Collapse nested mappings into dot-path keys."""
    result: dict[str, Any] = {}

    for key, value in nested.items():
        if isinstance(value, Mapping):
            result.update(flatten(value, f"{prefix}{key}{PATH_SEPARATOR}"))
        else:
            result[f"{prefix}{key}"] = value

    return result


def strip(record: Mapping[str, Any], node: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of `record` without the keys `node` does not define (one level only)."""
    return {key: value for key, value in record.items() if key in node}
