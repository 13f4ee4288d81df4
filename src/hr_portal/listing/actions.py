from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..api.errors import extract_entity
from ..api.transport import Attachment
from ..common.validators import require_allowed_file, require_date_order, require_non_empty, require_positive_amount
from ..core.enums import FieldKind
from ..core.exceptions import ValidationError
from .model import FormField, StatusSet

ALREADY_PROCESSED = "Cette demande a déjà été traitée."
REASON_REQUIRED = "Veuillez fournir une explication."


@dataclass(frozen=True)
class ActionRequest:
    method: str
    path: str
    json: Any = None
    form: Optional[Mapping[str, Any]] = None
    files: Optional[Mapping[str, Attachment]] = None


@dataclass(frozen=True)
class ActionOutcome:
    """Store change produced by a successful action."""

    patch: Optional[Dict[str, Any]] = None
    removed: bool = False


class RowAction(ABC):
    """Strategy Pattern: one mutating operation on one row.

    A strategy validates its payload, describes the HTTP request and maps
    the server answer onto the store. It never talks to the network itself.
    """

    def __init__(
        self,
        name: str,
        *,
        label: str,
        path: str,
        method: str,
        success_message: str,
        error_message: str,
        requires_pending: bool = False,
        confirm: Optional[str] = None,
        style: str = "secondary",
    ):
        self.name = name
        self.label = label
        self.path = path
        self.method = method.upper()
        self.success_message = success_message
        self.error_message = error_message
        self.requires_pending = requires_pending
        self.confirm = confirm
        self.style = style

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    @property
    def fields(self) -> Tuple[FormField, ...]:
        """Inputs the row form must collect before dispatching."""
        return ()

    def path_for(self, entity: Mapping[str, Any]) -> str:
        return self.path.format(id=entity["id"])

    def is_available(self, entity: Mapping[str, Any], statuses: Optional[StatusSet]) -> bool:
        if self.requires_pending and statuses is not None and statuses.locks_terminal:
            return not statuses.is_terminal(entity)
        return True

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        if not self.is_available(entity, statuses):
            raise ValidationError(ALREADY_PROCESSED)

    @abstractmethod
    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        raise NotImplementedError

    def expected_fields(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {}

    def outcome(self, entity: Mapping[str, Any], payload: Mapping[str, Any], response: Any) -> ActionOutcome:
        # Local expectation first, server fields win.
        patch = self.expected_fields(entity, payload)
        server = extract_entity(response, entity["id"])
        if server:
            patch.update(server)
        return ActionOutcome(patch=patch)


class SetStatusAction(RowAction):
    """Move a pending row to a status, optionally with a reason."""

    def __init__(
        self,
        name: str,
        *,
        status_field: str,
        value: Optional[str] = None,
        reason_field: Optional[str] = None,
        reason_required_for: Sequence[str] = (),
        requires_pending: bool = True,
        **kwargs,
    ):
        kwargs.setdefault("method", "PUT")
        super().__init__(name, requires_pending=requires_pending, **kwargs)
        self.status_field = status_field
        self.value = value
        self.reason_field = reason_field
        self.reason_required_for = tuple(reason_required_for)

    @property
    def fields(self) -> Tuple[FormField, ...]:
        if self.reason_field and self.value in self.reason_required_for:
            return (FormField(self.reason_field, "Explication", required=True),)
        return ()

    def target(self, payload: Mapping[str, Any]) -> Any:
        return self.value if self.value is not None else payload.get("status")

    def is_available(self, entity: Mapping[str, Any], statuses: Optional[StatusSet]) -> bool:
        if not super().is_available(entity, statuses):
            return False
        if self.value is not None and statuses is not None:
            return statuses.canonical(statuses.value_of(entity)) != statuses.canonical(self.value)
        return True

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        super().validate(entity, payload, statuses)
        target = self.target(payload)
        if target in (None, ""):
            raise ValidationError("Statut manquant.")
        if statuses is not None:
            allowed = statuses.terminal if statuses.locks_terminal else statuses.values
            if not any(str(target).lower() == str(v).lower() for v in allowed):
                raise ValidationError(f"Statut invalide : {target}.")
        if self.reason_field and target in self.reason_required_for:
            if not str(payload.get(self.reason_field) or "").strip():
                raise ValidationError(REASON_REQUIRED)

    def _body(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = {self.status_field: self.target(payload)}
        if self.reason_field and payload.get(self.reason_field):
            body[self.reason_field] = str(payload[self.reason_field]).strip()
        return body

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        return ActionRequest(self.method, self.path_for(entity), json=self._body(payload))

    def expected_fields(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._body(payload)


class DeleteEntityAction(RowAction):
    def __init__(self, name: str = "delete", **kwargs):
        kwargs.setdefault("method", "DELETE")
        kwargs.setdefault("label", "Supprimer")
        kwargs.setdefault("confirm", "Êtes-vous sûr de vouloir supprimer cet élément ?")
        kwargs.setdefault("style", "danger")
        super().__init__(name, **kwargs)

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        return ActionRequest(self.method, self.path_for(entity))

    def outcome(self, entity: Mapping[str, Any], payload: Mapping[str, Any], response: Any) -> ActionOutcome:
        return ActionOutcome(removed=True)


class UploadAttachmentAction(RowAction):
    """Send a file for a row; the server answers with the stored path."""

    def __init__(
        self,
        name: str,
        *,
        file_field: str,
        target_field: Optional[str] = None,
        allowed_types: Sequence[str],
        file_label: str = "Le fichier",
        form: Optional[Mapping[str, Any]] = None,
        **kwargs,
    ):
        kwargs.setdefault("method", "POST")
        super().__init__(name, **kwargs)
        self.file_field = file_field
        self.target_field = target_field or file_field
        self.allowed_types = tuple(allowed_types)
        self.file_label = file_label
        self.form = dict(form or {})

    @property
    def fields(self) -> Tuple[FormField, ...]:
        return (FormField("file", self.file_label, kind=FieldKind.FILE, required=True, allowed_types=self.allowed_types),)

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        super().validate(entity, payload, statuses)
        attachment = payload.get("file")
        if not isinstance(attachment, Attachment):
            raise ValidationError(f"Veuillez sélectionner un fichier ({self.file_label.lower()}).")
        require_allowed_file(
            filename=attachment.filename,
            content_type=attachment.content_type,
            size=attachment.size,
            allowed_types=self.allowed_types,
            label=self.file_label,
        )

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        return ActionRequest(
            self.method,
            self.path_for(entity),
            form=dict(self.form),
            files={self.file_field: payload["file"]},
        )

    def outcome(self, entity: Mapping[str, Any], payload: Mapping[str, Any], response: Any) -> ActionOutcome:
        server = extract_entity(response, entity["id"]) or {}
        patch = {k: v for k, v in server.items() if k != "id"}
        if self.target_field not in patch and isinstance(response, Mapping) and self.target_field in response:
            patch[self.target_field] = response[self.target_field]
        return ActionOutcome(patch=patch)


class DeleteAttachmentAction(RowAction):
    def __init__(self, name: str, *, target_field: str, **kwargs):
        kwargs.setdefault("method", "DELETE")
        kwargs.setdefault("style", "danger")
        super().__init__(name, **kwargs)
        self.target_field = target_field

    def is_available(self, entity: Mapping[str, Any], statuses: Optional[StatusSet]) -> bool:
        return bool(entity.get(self.target_field)) and super().is_available(entity, statuses)

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        if not entity.get(self.target_field):
            raise ValidationError("Aucun fichier à supprimer.")
        super().validate(entity, payload, statuses)

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        return ActionRequest(self.method, self.path_for(entity))

    def expected_fields(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {self.target_field: None}

    def outcome(self, entity: Mapping[str, Any], payload: Mapping[str, Any], response: Any) -> ActionOutcome:
        outcome = super().outcome(entity, payload, response)
        # Some endpoints echo the entity before the file is detached.
        outcome.patch[self.target_field] = None
        return outcome


class UpdateFieldsAction(RowAction):
    """Edit a row from a form; multipart when a file is attached."""

    def __init__(self, name: str = "edit", *, fields: Sequence[FormField] = (), multipart: bool = False, **kwargs):
        kwargs.setdefault("method", "PUT")
        kwargs.setdefault("label", "Modifier")
        super().__init__(name, **kwargs)
        self._fields = tuple(fields)
        self.multipart = multipart

    @property
    def fields(self) -> Tuple[FormField, ...]:
        return self._fields

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        super().validate(entity, payload, statuses)
        validate_form(self._fields, payload)

    def _values(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values = {}
        for f in self._fields:
            if f.is_file:
                continue
            value = payload.get(f.name)
            if value is None or (value == "" and not f.required):
                continue
            values[f.name] = value
        return values

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        files = {f.name: payload[f.name] for f in self._fields if f.is_file and isinstance(payload.get(f.name), Attachment)}
        if self.multipart or files:
            return ActionRequest(self.method, self.path_for(entity), form=self._values(payload), files=files or None)
        return ActionRequest(self.method, self.path_for(entity), json=self._values(payload))

    def expected_fields(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._values(payload)


class SendDocumentAction(RowAction):
    """Ask the server to issue something for the row (a payslip, a training request).

    The row itself is left unchanged.
    """

    def __init__(self, name: str, *, fields: Sequence[FormField] = (), **kwargs):
        kwargs.setdefault("method", "POST")
        super().__init__(name, **kwargs)
        self._fields = tuple(fields)

    @property
    def fields(self) -> Tuple[FormField, ...]:
        return self._fields

    def validate(self, entity: Mapping[str, Any], payload: Mapping[str, Any], statuses: Optional[StatusSet]) -> None:
        super().validate(entity, payload, statuses)
        validate_form(self._fields, payload)

    def build_request(self, entity: Mapping[str, Any], payload: Mapping[str, Any]) -> ActionRequest:
        body = {f.name: payload.get(f.name) for f in self._fields if payload.get(f.name) not in (None, "")}
        return ActionRequest(self.method, self.path_for(entity), json=body or None)

    def outcome(self, entity: Mapping[str, Any], payload: Mapping[str, Any], response: Any) -> ActionOutcome:
        return ActionOutcome()


def validate_form(fields: Sequence[FormField], payload: Mapping[str, Any]) -> None:
    """Required inputs, file types, then `date_fin >= date_debut` when both are present."""
    for f in fields:
        value = payload.get(f.name)
        if f.is_file:
            if isinstance(value, Attachment):
                require_allowed_file(
                    filename=value.filename,
                    content_type=value.content_type,
                    size=value.size,
                    allowed_types=f.allowed_types,
                    label=f.label,
                )
            elif f.required:
                raise ValidationError(f"{f.label} est requis.")
            continue
        if f.required:
            require_non_empty(value, f.label)
        if f.kind is FieldKind.MONEY and value not in (None, ""):
            require_positive_amount(value, f.label)
        if f.choices and value not in (None, "") and str(value) not in {c for c, _ in f.choices}:
            raise ValidationError(f"{f.label} : valeur invalide.")

    names = {f.name for f in fields}
    if {"date_debut", "date_fin"} <= names and payload.get("date_debut"):
        require_date_order(payload.get("date_debut"), payload.get("date_fin"))
