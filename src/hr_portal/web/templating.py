from __future__ import annotations

from typing import Any, Optional

from flask import Flask, session

from ..common.attachments import attachment_name, attachment_url
from ..common.datetime_utils import format_amount, format_date
from ..container import Container
from ..core.enums import FieldKind, Role
from ..listing.model import Column, StatusSet
from ..listing.projection import get_nested_value


def register(app: Flask, container: Container) -> None:
    def cell(entity: Any, column: Column, statuses: Optional[StatusSet] = None) -> str:
        value = get_nested_value(entity, column.field)
        if statuses is not None and column.field == statuses.field:
            return statuses.label(value)
        if column.kind in (FieldKind.DATE, FieldKind.DATETIME):
            return format_date(value, with_time=column.kind is FieldKind.DATETIME)
        if column.kind is FieldKind.MONEY:
            return format_amount(value)
        if value is None or value == "":
            return "N/A"
        if isinstance(value, bool):
            return "Oui" if value else "Non"
        return str(value)

    app.add_template_global(cell, "cell")
    app.add_template_global(lambda path: attachment_url(path, container.storage_base_url), "attachment_url")
    app.add_template_filter(attachment_name, "attachment_name")
    app.add_template_filter(format_date, "format_date")
    app.add_template_filter(format_amount, "format_amount")
    app.jinja_env.globals["get_value"] = get_nested_value

    @app.context_processor
    def inject_layout():
        return {
            "notification_seconds": app.config.get("NOTIFICATION_SECONDS", 4.0),
            "roles": list(Role),
            "display_names": {r.value: session.get(f"{r.value}_name") for r in Role},
        }
