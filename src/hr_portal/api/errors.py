"""Single place where API error bodies become user-facing messages.

Endpoints disagree on the shape of their errors (`message`, `error`,
Laravel `errors{field: [...]}` or plain text), so every caller goes
through `normalize_error` instead of picking fields itself.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional


def flatten_field_errors(errors: Any) -> List[str]:
    if not isinstance(errors, Mapping):
        return []
    out: List[str] = []
    for value in errors.values():
        if isinstance(value, (list, tuple)):
            out.extend(str(v) for v in value if v)
        elif value:
            out.append(str(value))
    return out


def normalize_error(payload: Any, *, status: int = 0, fallback: Optional[str] = None) -> str:
    if isinstance(payload, Mapping):
        field_errors = flatten_field_errors(payload.get("errors"))
        if field_errors:
            return "Validation: " + ", ".join(field_errors)
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()

    if fallback:
        return fallback
    return f"Erreur {status}" if status else "Erreur réseau : serveur injoignable."


def success_message(payload: Any, default: str) -> str:
    if isinstance(payload, Mapping):
        value = payload.get("message")
        if isinstance(value, str) and value.strip():
            return value.strip()
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


def extract_items(payload: Any) -> List[Any]:
    """Accept a bare array, `{data: [...]}` or `{message: [...]}`."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in ("data", "message"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def extract_entity(payload: Any, entity_id: Any = None) -> Optional[Dict[str, Any]]:
    """Entity returned by a mutation, from `data` or the body itself.

    The bare body only counts when it carries an id (and the expected one,
    when given), so `{message: "..."}` is never mistaken for an entity.
    """
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if isinstance(data, Mapping):
        return dict(data)
    if "id" in payload:
        if entity_id is not None and str(payload["id"]) != str(entity_id):
            return None
        return {k: v for k, v in payload.items() if k != "message"}
    return None
