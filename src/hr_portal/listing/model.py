from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.enums import FieldKind
from .projection import get_nested_value


def _norm(value: Any) -> str:
    return "" if value is None else str(value).strip().lower()


@dataclass(frozen=True)
class StatusSet:
    """Status vocabulary of one screen.

    With `locks_terminal` a row can only move from `pending` to one of
    `terminal`, and a terminal row takes no more row actions that require
    a pending status.
    """

    field: str
    pending: str
    terminal: Tuple[str, ...]
    labels: Mapping[str, str] = field(default_factory=dict)
    locks_terminal: bool = True

    @property
    def values(self) -> Tuple[str, ...]:
        return (self.pending,) + tuple(self.terminal)

    def value_of(self, entity: Mapping[str, Any]) -> Any:
        return get_nested_value(entity, self.field)

    def is_pending(self, entity: Mapping[str, Any]) -> bool:
        value = self.value_of(entity)
        # Rows created before the status column existed count as pending.
        return value is None or _norm(value) == _norm(self.pending)

    def is_terminal(self, entity: Mapping[str, Any]) -> bool:
        value = _norm(self.value_of(entity))
        return any(value == _norm(t) for t in self.terminal)

    def canonical(self, value: Any) -> Optional[str]:
        for v in self.values:
            if _norm(value) == _norm(v):
                return v
        return None

    def label(self, value: Any) -> str:
        canonical = self.canonical(value)
        if canonical is None:
            return "" if value is None else str(value)
        return self.labels.get(canonical, canonical)


@dataclass(frozen=True)
class Column:
    field: str
    label: str
    sortable: bool = True
    kind: FieldKind = FieldKind.TEXT


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    choices: Tuple[Tuple[str, str], ...] = ()
    allowed_types: Tuple[str, ...] = ()

    @property
    def is_file(self) -> bool:
        return self.kind is FieldKind.FILE


@dataclass(frozen=True)
class CollectionCommand:
    """Action on the whole screen rather than one row (e.g. send every payslip)."""

    name: str
    label: str
    method: str
    path: str
    success_message: str
    error_message: str
    fields: Tuple[FormField, ...] = ()
    reload: bool = False
    confirm: Optional[str] = None

    def body(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {f.name: payload.get(f.name) for f in self.fields if payload.get(f.name) not in (None, "")}
