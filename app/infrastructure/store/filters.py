"""Structured record filters.

Callers build filters from values (eq, ne, gt, lt, and_) instead of
interpolating user input into filter strings. render() produces the
PocketBase filter syntax with every string literal quoted and escaped;
matches() evaluates the same filter against an in-memory record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.shared.utils.datetime import format_store_datetime


class _Now:
    """Placeholder for the store's current time (@now)."""

    def __repr__(self) -> str:
        return "NOW"


NOW = _Now()

_OPERATORS = {"eq": "=", "ne": "!=", "gt": ">", "lt": "<"}


@dataclass(frozen=True)
class Condition:
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class And:
    conditions: tuple[Filter, ...]


Filter = Condition | And


def _check_field(field: str) -> str:
    if not field or not field.replace("_", "").replace(".", "").isalnum():
        raise ValueError(f"Invalid filter field: {field!r}")
    return field


def eq(field: str, value: Any) -> Condition:
    return Condition(_check_field(field), "eq", value)


def ne(field: str, value: Any) -> Condition:
    return Condition(_check_field(field), "ne", value)


def gt(field: str, value: Any) -> Condition:
    return Condition(_check_field(field), "gt", value)


def lt(field: str, value: Any) -> Condition:
    return Condition(_check_field(field), "lt", value)


def and_(*conditions: Filter) -> And:
    return And(tuple(conditions))


def quote(value: str) -> str:
    """Double-quote a string literal, escaping backslashes and quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _render_value(value: Any) -> str:
    if value is NOW:
        return "@now"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, datetime):
        return quote(format_store_datetime(value))
    return quote(str(value))


def render(filter_: Filter | None) -> str:
    """Render filter_ as a PocketBase filter expression ("" for no filter)."""
    if filter_ is None:
        return ""
    if isinstance(filter_, And):
        parts = [render(c) for c in filter_.conditions]
        return " && ".join(f"({p})" if isinstance(c, And) else p for p, c in zip(parts, filter_.conditions))
    return f"{filter_.field} {_OPERATORS[filter_.op]} {_render_value(filter_.value)}"


def _comparable(value: Any, now: datetime) -> Any:
    if value is NOW:
        return format_store_datetime(now)
    if isinstance(value, datetime):
        return format_store_datetime(value)
    return value


def matches(filter_: Filter | None, record: dict[str, Any], now: datetime) -> bool:
    """Evaluate filter_ against a raw record (store date strings compare lexically)."""
    if filter_ is None:
        return True
    if isinstance(filter_, And):
        return all(matches(c, record, now) for c in filter_.conditions)
    actual = record.get(filter_.field)
    expected = _comparable(filter_.value, now)
    if filter_.op == "eq":
        return actual == expected
    if filter_.op == "ne":
        return actual != expected
    if actual is None or expected is None:
        return False
    if filter_.op == "gt":
        return actual > expected
    return actual < expected
