"""Employee self-service screens."""

from __future__ import annotations

from ..core.constants import DOCUMENT_TYPES
from ..core.enums import FieldKind, Role
from ..listing.actions import DeleteEntityAction, SendDocumentAction, UpdateFieldsAction
from ..listing.model import Column, FormField
from ..listing.screen import ScreenConfig
from .admin import (
    ATTESTATION_STATUSES,
    LEAVE_STATUSES,
    MATERIAL_STATUSES,
    REIMBURSEMENT_STATUSES,
    TRAINING_REQUEST_STATUSES,
)
from .base import date_range_fields, status_column

_DOCUMENTS = tuple(sorted(DOCUMENT_TYPES))

my_leaves = ScreenConfig(
    key="conges",
    role=Role.EMPLOYEE,
    title="Mes congés",
    resource="employe/conges",
    columns=(
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("motif", "Motif", sortable=False),
        Column("explication", "Explication", sortable=False),
        status_column(LEAVE_STATUSES),
    ),
    search_fields=("motif", "explication"),
    statuses=LEAVE_STATUSES,
    default_sort="date_debut",
    create_path="employe/conges",
    create_fields=date_range_fields() + (FormField("motif", "Motif", kind=FieldKind.TEXTAREA, required=True),),
    create_label="Demander un congé",
    create_success="Demande de congé envoyée avec succès.",
    create_error="Erreur lors de l'envoi de la demande de congé.",
    load_error="Erreur lors du chargement de vos congés.",
    empty_message="Aucune demande de congé.",
)

ABSENCE_FIELDS = date_range_fields(end_required=False) + (
    FormField("motif", "Motif", kind=FieldKind.TEXTAREA, required=True),
    FormField("justificatif", "Justificatif", kind=FieldKind.FILE, allowed_types=_DOCUMENTS),
)

my_absences = ScreenConfig(
    key="absences",
    role=Role.EMPLOYEE,
    title="Mes absences",
    resource="employe/absences",
    columns=(
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("motif", "Motif", sortable=False),
        Column("justifiee", "Justifiée"),
        Column("justificatif", "Justificatif", sortable=False, kind=FieldKind.FILE),
    ),
    search_fields=("motif",),
    attachment_fields=("justificatif",),
    default_sort="date_debut",
    actions=(
        UpdateFieldsAction(
            path="employe/absences/{id}",
            fields=ABSENCE_FIELDS,
            multipart=True,
            success_message="Absence mise à jour avec succès.",
            error_message="Erreur lors de la mise à jour de l'absence.",
        ),
        DeleteEntityAction(
            path="employe/absences/{id}",
            success_message="Absence supprimée avec succès.",
            error_message="Erreur lors de la suppression de l'absence.",
        ),
    ),
    create_path="employe/absences",
    create_fields=ABSENCE_FIELDS,
    create_multipart=True,
    create_label="Déclarer une absence",
    create_success="Absence déclarée avec succès.",
    create_error="Erreur lors de la déclaration de l'absence.",
)

MATERIAL_FIELDS = (
    FormField("nom", "Matériel", required=True),
    FormField("motif", "Motif", kind=FieldKind.TEXTAREA, required=True),
    FormField("quantite", "Quantité", kind=FieldKind.NUMBER, required=True),
)

my_materials = ScreenConfig(
    key="materiel",
    role=Role.EMPLOYEE,
    title="Mes demandes de matériel",
    resource="material",
    columns=(
        Column("nom", "Matériel"),
        Column("quantite", "Quantité"),
        Column("motif", "Motif", sortable=False),
        Column("explication", "Explication", sortable=False),
        status_column(MATERIAL_STATUSES),
    ),
    search_fields=("nom", "motif"),
    statuses=MATERIAL_STATUSES,
    numeric_fields=("quantite",),
    default_sort="nom",
    actions=(
        UpdateFieldsAction(
            path="material/{id}",
            fields=MATERIAL_FIELDS,
            requires_pending=True,
            success_message="Demande mise à jour avec succès.",
            error_message="Échec de la mise à jour.",
        ),
        DeleteEntityAction(
            path="material/{id}",
            requires_pending=True,
            success_message="Demande supprimée avec succès.",
            error_message="Échec de la suppression.",
        ),
    ),
    create_path="material",
    create_fields=MATERIAL_FIELDS,
    create_label="Nouvelle demande",
    create_success="Demande de matériel envoyée avec succès.",
    create_error="Échec de l'envoi de la demande.",
)

REIMBURSEMENT_FIELDS = (
    FormField("type", "Type", required=True),
    FormField("montant", "Montant", kind=FieldKind.MONEY, required=True),
    FormField("justification", "Justificatif", kind=FieldKind.FILE, allowed_types=_DOCUMENTS),
)

my_reimbursements = ScreenConfig(
    key="remboursements",
    role=Role.EMPLOYEE,
    title="Mes remboursements",
    resource="employe/remboursements",
    columns=(
        Column("type", "Type"),
        Column("montant", "Montant", kind=FieldKind.MONEY),
        Column("justification", "Justificatif", sortable=False, kind=FieldKind.FILE),
        Column("created_at", "Date", kind=FieldKind.DATE),
        status_column(REIMBURSEMENT_STATUSES),
    ),
    search_fields=("type",),
    statuses=REIMBURSEMENT_STATUSES,
    numeric_fields=("montant",),
    attachment_fields=("justification",),
    default_sort="created_at",
    actions=(
        UpdateFieldsAction(
            path="employe/remboursements/{id}",
            fields=REIMBURSEMENT_FIELDS,
            multipart=True,
            requires_pending=True,
            success_message="Demande de remboursement mise à jour.",
            error_message="Erreur lors de la mise à jour de la demande.",
        ),
        DeleteEntityAction(
            path="employe/remboursements/{id}",
            requires_pending=True,
            success_message="Demande de remboursement supprimée.",
            error_message="Erreur lors de la suppression de la demande.",
        ),
    ),
    create_path="employe/remboursements",
    create_fields=REIMBURSEMENT_FIELDS[:2]
    + (FormField("justification", "Justificatif", kind=FieldKind.FILE, required=True, allowed_types=_DOCUMENTS),),
    create_multipart=True,
    create_label="Nouvelle demande",
    create_success="Demande de remboursement envoyée.",
    create_error="Erreur lors de l'envoi de la demande.",
)

my_attestations = ScreenConfig(
    key="attestations",
    role=Role.EMPLOYEE,
    title="Mes demandes d'attestation",
    resource="employe/mes-demandes",
    columns=(
        Column("attestation.type", "Type"),
        Column("date_livraison", "Date livr.", kind=FieldKind.DATE),
        Column("pdf", "Document", sortable=False, kind=FieldKind.FILE),
        status_column(ATTESTATION_STATUSES),
    ),
    search_fields=("attestation.type",),
    statuses=ATTESTATION_STATUSES,
    date_fields=("date_livraison",),
    attachment_fields=("pdf",),
    default_sort="date_livraison",
    actions=(
        DeleteEntityAction(
            path="employe/attestations/{id}",
            requires_pending=True,
            confirm="Annuler cette demande d'attestation ?",
            success_message="Demande d'attestation annulée.",
            error_message="Erreur lors de l'annulation de la demande.",
        ),
    ),
    create_path="employe/attestations",
    create_fields=(
        FormField("type_id", "Type d'attestation", kind=FieldKind.SELECT, required=True),
        FormField("date_livraison", "Date de livraison souhaitée", kind=FieldKind.DATE, required=True),
    ),
    create_label="Demander une attestation",
    create_success="Demande d'attestation envoyée.",
    create_error="Erreur lors de l'envoi de la demande.",
)

trainings = ScreenConfig(
    key="formations",
    role=Role.EMPLOYEE,
    title="Formations disponibles",
    resource="employe/formations",
    columns=(
        Column("titre", "Titre"),
        Column("description", "Description", sortable=False),
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("places_disponibles", "Places"),
    ),
    search_fields=("titre", "description"),
    numeric_fields=("places_disponibles",),
    default_sort="date_debut",
    actions=(
        SendDocumentAction(
            "request",
            label="Demander",
            path="employe/formations/{id}/demande",
            success_message="Demande de formation envoyée avec succès.",
            error_message="Erreur lors de la demande de formation.",
            style="success",
        ),
    ),
)

my_training_requests = ScreenConfig(
    key="demandes-formations",
    role=Role.EMPLOYEE,
    title="Mes demandes de formation",
    resource="employe/demandes-formations",
    columns=(
        Column("formation.titre", "Formation"),
        Column("created_at", "Date", kind=FieldKind.DATE),
        status_column(TRAINING_REQUEST_STATUSES),
    ),
    search_fields=("formation.titre",),
    statuses=TRAINING_REQUEST_STATUSES,
    default_sort="created_at",
)

my_bonuses = ScreenConfig(
    key="primes",
    role=Role.EMPLOYEE,
    title="Mes primes",
    resource="employe/mes-primes",
    columns=(
        Column("prime.nom", "Prime"),
        Column("prime.montant", "Montant", kind=FieldKind.MONEY),
        Column("date_attribution", "Date", kind=FieldKind.DATE),
    ),
    search_fields=("prime.nom", "prime.description"),
    numeric_fields=("prime.montant",),
    default_sort="date_attribution",
    load_error="Erreur lors du chargement de vos primes.",
    empty_message="Aucune prime attribuée pour le moment.",
)

SCREENS = (
    my_leaves,
    my_absences,
    my_materials,
    my_reimbursements,
    my_attestations,
    trainings,
    my_training_requests,
    my_bonuses,
)

DASHBOARD = (my_leaves, my_materials, my_attestations, my_training_requests)
