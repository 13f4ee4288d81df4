from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%d/%m/%Y")

_MONTHS_FR = (
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse API date values (ISO strings, with or without time/offset).

    Returns None for empty or unparsable values instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    text = str(value).strip()
    if not text:
        return None
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(value: Any) -> Optional[float]:
    """Comparable timestamp; naive values are taken as UTC so mixed inputs still order."""
    dt = parse_datetime(value)
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def format_date(value: Any, *, with_time: bool = False) -> str:
    dt = parse_datetime(value)
    if dt is None:
        return "N/A"
    out = f"{dt.day:02d} {_MONTHS_FR[dt.month - 1]} {dt.year}"
    if with_time:
        out += f" {dt.hour:02d}:{dt.minute:02d}"
    return out


def format_amount(value: Any, currency: str = "€") -> str:
    if value is None or value == "":
        return "N/A"
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    text = f"{amount:,.2f}".replace(",", " ").replace(".", ",")
    return f"{text} {currency}"
