from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Espace de l'application; chaque rôle a son propre jeton."""

    ADMIN = "admin"
    EMPLOYEE = "employe"


class NotificationKind(str, Enum):
    """Catégorie d'un message transitoire (aussi utilisée comme catégorie flash)."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class DispatchStatus(str, Enum):
    """Issue d'un appel au dispatcher."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"
    BUSY = "busy"


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    MONEY = "money"
    FILE = "file"
    SELECT = "select"
    EMAIL = "email"
    PASSWORD = "password"
