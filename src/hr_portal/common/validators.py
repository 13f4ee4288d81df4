from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from ..core.constants import DOCUMENT_EXTENSIONS, MAX_UPLOAD_BYTES
from ..core.exceptions import ValidationError
from .datetime_utils import parse_timestamp


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} est requis.")
    return str(value).strip()


def require_positive_amount(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, AttributeError):
        raise ValidationError(f"{field_name} doit être un nombre.")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} doit être supérieur à 0.")
    return amount


def require_date_order(start: Any, end: Any) -> None:
    """An empty end date is allowed (open-ended request)."""
    if not end:
        return
    start_ts = parse_timestamp(start)
    end_ts = parse_timestamp(end)
    if start_ts is None or end_ts is None:
        raise ValidationError("Date invalide.")
    if end_ts < start_ts:
        raise ValidationError("La date de fin ne peut pas être antérieure à la date de début.")


def require_allowed_file(
    *,
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    allowed_types: Iterable[str],
    label: str = "Le fichier",
) -> None:
    allowed = frozenset(allowed_types)
    if not filename:
        raise ValidationError(f"{label} est requis.")
    if allowed and (content_type or "").lower() not in allowed:
        raise ValidationError(f"{label} doit être de type {_describe(allowed)}.")
    suffixes = tuple(ext for ct in allowed for ext in DOCUMENT_EXTENSIONS.get(ct, ()))
    if suffixes and not filename.lower().endswith(suffixes):
        raise ValidationError(f"{label} doit être de type {_describe(allowed)}.")
    if size > MAX_UPLOAD_BYTES:
        raise ValidationError(f"{label} dépasse la taille maximale (2 Mo).")


def _describe(types: Iterable[str]) -> str:
    return ", ".join(sorted(t.split("/")[-1].upper() for t in types))
