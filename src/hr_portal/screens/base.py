from __future__ import annotations

from typing import Optional, Tuple

from ..core.enums import FieldKind
from ..listing.actions import SetStatusAction
from ..listing.model import Column, FormField, StatusSet

EMPLOYEE_SEARCH = ("employe.nom", "employe.prenom", "employe.email")


def decision_actions(
    path: str,
    statuses: StatusSet,
    *,
    approve: str,
    reject: str,
    reason_field: Optional[str] = None,
    noun: str = "La demande",
) -> Tuple[SetStatusAction, SetStatusAction]:
    """Approve / reject pair for a pending request; the reject may need a reason."""
    return (
        SetStatusAction(
            "approve",
            label="Approuver",
            path=path,
            status_field=statuses.field,
            value=approve,
            success_message=f"{noun} a été approuvée avec succès.",
            error_message="Erreur lors de la mise à jour du statut.",
            style="success",
        ),
        SetStatusAction(
            "reject",
            label="Rejeter",
            path=path,
            status_field=statuses.field,
            value=reject,
            reason_field=reason_field,
            reason_required_for=(reject,) if reason_field else (),
            success_message=f"{noun} a été rejetée avec succès.",
            error_message="Erreur lors de la mise à jour du statut.",
            style="danger",
        ),
    )


def employee_column() -> Column:
    return Column("employe.nom", "Employé")


def status_column(statuses: StatusSet) -> Column:
    return Column(statuses.field, "Statut", kind=FieldKind.SELECT)


def date_range_fields(*, end_required: bool = True) -> Tuple[FormField, FormField]:
    return (
        FormField("date_debut", "Date de début", kind=FieldKind.DATE, required=True),
        FormField("date_fin", "Date de fin", kind=FieldKind.DATE, required=end_required),
    )
