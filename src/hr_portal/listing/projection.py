"""Derive the visible rows from the collection and the view state.

Everything here is pure: same inputs, same output, inputs untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from numbers import Number
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..common.datetime_utils import parse_timestamp
from ..core.constants import ALL_STATUSES
from ..core.enums import SortDirection


@dataclass(frozen=True)
class ViewState:
    search: str = ""
    sort_field: Optional[str] = None
    direction: SortDirection = SortDirection.ASC
    status: str = ALL_STATUSES

    @classmethod
    def from_args(cls, args: Mapping[str, Any], *, default_sort: Optional[str] = None) -> "ViewState":
        direction = str(args.get("dir") or "").lower()
        return cls(
            search=str(args.get("q") or ""),
            sort_field=args.get("sort") or default_sort,
            direction=SortDirection.DESC if direction == SortDirection.DESC.value else SortDirection.ASC,
            status=str(args.get("status") or ALL_STATUSES),
        )

    def toggled(self, field: str) -> "ViewState":
        if self.sort_field == field and self.direction is SortDirection.ASC:
            return replace(self, direction=SortDirection.DESC)
        return replace(self, sort_field=field, direction=SortDirection.ASC)

    def to_args(self) -> dict:
        args = {}
        if self.search:
            args["q"] = self.search
        if self.sort_field:
            args["sort"] = self.sort_field
            args["dir"] = self.direction.value
        if self.status != ALL_STATUSES:
            args["status"] = self.status
        return args


def get_nested_value(entity: Any, path: str, default: Any = None) -> Any:
    current = entity
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def is_date_field(path: str) -> bool:
    last = path.rsplit(".", 1)[-1].lower()
    return last.startswith("date") or last.endswith("_at")


def _to_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, Number):
        text = str(value)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
    else:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    # NaN and infinities are not orderable.
    return number if number.is_finite() else None


def _looks_numeric(values: Iterable[Any]) -> bool:
    seen = False
    for value in values:
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, Number):
            return False
        seen = True
    return seen


def matches_search(entity: Mapping[str, Any], term: str, fields: Sequence[str]) -> bool:
    needle = (term or "").strip().lower()
    if not needle:
        return True
    for path in fields:
        value = get_nested_value(entity, path)
        if value is None or isinstance(value, (Mapping, list, tuple)):
            continue
        if needle in str(value).lower():
            return True
    return False


def matches_status(entity: Mapping[str, Any], status: str, status_field: Optional[str]) -> bool:
    if not status or status == ALL_STATUSES or not status_field:
        return True
    value = get_nested_value(entity, status_field)
    return value is not None and str(value).strip().lower() == status.strip().lower()


def _sort_key(kind: str, value: Any) -> Tuple[int, Any]:
    """(group, comparable); group 1 holds values that cannot be compared."""
    if kind == "date":
        ts = parse_timestamp(value)
        return (0, ts) if ts is not None else (1, 0)
    if kind == "number":
        number = _to_number(value)
        return (0, number) if number is not None else (1, 0)
    return (0, "" if value is None else str(value).lower())


def sort_entities(
    entities: Sequence[Mapping[str, Any]],
    field: str,
    direction: SortDirection,
    *,
    date_fields: Iterable[str] = (),
    numeric_fields: Iterable[str] = (),
) -> List[Mapping[str, Any]]:
    values = [get_nested_value(e, field) for e in entities]
    if field in set(date_fields) or is_date_field(field):
        kind = "date"
    elif field in set(numeric_fields) or _looks_numeric(values):
        kind = "number"
    else:
        kind = "text"

    keyed = [(_sort_key(kind, v), i) for i, v in enumerate(values)]
    comparable = [(k[1], i) for k, i in keyed if k[0] == 0]
    trailing = [i for k, i in keyed if k[0] == 1]

    # list.sort keeps ties in input order with reverse=True as well.
    comparable.sort(key=lambda pair: pair[0], reverse=direction is SortDirection.DESC)
    order = [i for _, i in comparable] + trailing
    return [entities[i] for i in order]


def project(
    collection: Sequence[Mapping[str, Any]],
    view: ViewState,
    *,
    search_fields: Sequence[str] = (),
    status_field: Optional[str] = None,
    date_fields: Iterable[str] = (),
    numeric_fields: Iterable[str] = (),
) -> List[Mapping[str, Any]]:
    rows = [
        e
        for e in collection
        if matches_status(e, view.status, status_field) and matches_search(e, view.search, search_fields)
    ]
    if view.sort_field:
        rows = sort_entities(
            rows,
            view.sort_field,
            view.direction,
            date_fields=date_fields,
            numeric_fields=numeric_fields,
        )
    return rows
