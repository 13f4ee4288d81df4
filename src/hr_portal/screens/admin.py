"""Administration screens.

Each screen is a declaration; the list logic lives in `hr_portal.listing`.
"""

from __future__ import annotations

from ..core.constants import DOCUMENT_TYPES, PDF_TYPES
from ..core.enums import FieldKind, Role
from ..listing.actions import (
    DeleteAttachmentAction,
    DeleteEntityAction,
    SendDocumentAction,
    SetStatusAction,
    UpdateFieldsAction,
    UploadAttachmentAction,
)
from ..listing.model import CollectionCommand, Column, FormField, StatusSet
from ..listing.screen import ScreenConfig
from .base import EMPLOYEE_SEARCH, date_range_fields, decision_actions, employee_column, status_column

LEAVE_STATUSES = StatusSet(
    "statut",
    "en_attente",
    ("approuve", "rejete"),
    labels={"en_attente": "En attente", "approuve": "Approuvé", "rejete": "Rejeté"},
)
MATERIAL_STATUSES = StatusSet(
    "statut",
    "en_attente",
    ("approuve", "rejete"),
    labels={"en_attente": "En attente", "approuve": "Approuvée", "rejete": "Rejetée"},
)
REIMBURSEMENT_STATUSES = StatusSet(
    "status",
    "en attente",
    ("approuvé", "refusé"),
    labels={"en attente": "En attente", "approuvé": "Approuvé", "refusé": "Refusé"},
)
ATTESTATION_STATUSES = StatusSet(
    "statut",
    "en attente",
    ("accepte", "refuse"),
    labels={"en attente": "En attente", "accepte": "Acceptée", "refuse": "Refusée"},
)
TRAINING_REQUEST_STATUSES = StatusSet(
    "statut",
    "en attente",
    ("approuvée", "rejetée"),
    labels={"en attente": "En attente", "approuvée": "Approuvée", "rejetée": "Rejetée"},
)
CANDIDATE_STATUSES = StatusSet(
    "statut",
    "en attente",
    ("accepte", "rejete"),
    labels={"en attente": "En attente", "accepte": "Accepté", "rejete": "Rejeté"},
)
# Campaigns can be reopened, so terminal values do not lock the row.
RECRUITMENT_STATUSES = StatusSet(
    "statut",
    "en cours",
    ("clôturé",),
    labels={"en cours": "En cours", "clôturé": "Clôturé"},
    locks_terminal=False,
)

PAYSLIP_PERIOD = (
    FormField("mois", "Mois (01-12)", required=True),
    FormField("annee", "Année", kind=FieldKind.NUMBER, required=True),
)

EMPLOYEE_FIELDS = (
    FormField("nom", "Nom", required=True),
    FormField("prenom", "Prénom", required=True),
    FormField("email", "Email", kind=FieldKind.EMAIL, required=True),
    FormField("telephone", "Téléphone"),
    FormField("poste", "Poste", required=True),
    FormField("salaire", "Salaire", kind=FieldKind.MONEY, required=True),
    FormField("date_entree", "Date d'entrée", kind=FieldKind.DATE, required=True),
)

employees = ScreenConfig(
    key="employes",
    role=Role.ADMIN,
    title="Gestion des employés",
    resource="employes",
    columns=(
        Column("nom", "Nom"),
        Column("prenom", "Prénom"),
        Column("email", "Email"),
        Column("poste", "Poste"),
        Column("salaire", "Salaire", kind=FieldKind.MONEY),
        Column("date_entree", "Date d'entrée", kind=FieldKind.DATE),
    ),
    search_fields=("nom", "prenom", "email", "poste"),
    numeric_fields=("salaire",),
    default_sort="nom",
    actions=(
        UpdateFieldsAction(
            path="employes/{id}",
            fields=EMPLOYEE_FIELDS,
            success_message="Employé mis à jour avec succès.",
            error_message="Erreur lors de la mise à jour de l'employé.",
        ),
        DeleteEntityAction(
            path="employes/{id}",
            success_message="Employé supprimé avec succès.",
            error_message="Erreur lors de la suppression de l'employé.",
        ),
        SendDocumentAction(
            "send_payslip",
            label="Envoyer la fiche de paie",
            path="fiche-paie/send-one/{id}",
            fields=PAYSLIP_PERIOD,
            success_message="Fiche de paie envoyée avec succès.",
            error_message="Une erreur s'est produite lors de l'envoi.",
        ),
    ),
    create_path="employes",
    create_fields=EMPLOYEE_FIELDS + (FormField("password", "Mot de passe", kind=FieldKind.PASSWORD, required=True),),
    create_label="Ajouter un employé",
    create_success="Employé ajouté avec succès.",
    create_error="Erreur lors de l'ajout de l'employé.",
    load_error="Erreur lors du chargement des employés.",
    empty_message="Aucun employé trouvé.",
)

leaves = ScreenConfig(
    key="conges",
    role=Role.ADMIN,
    title="Demandes de congé",
    resource="admin/conges",
    columns=(
        employee_column(),
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("motif", "Motif", sortable=False),
        status_column(LEAVE_STATUSES),
    ),
    search_fields=EMPLOYEE_SEARCH + ("motif",),
    statuses=LEAVE_STATUSES,
    default_sort="date_debut",
    actions=decision_actions(
        "admin/conges/{id}",
        LEAVE_STATUSES,
        approve="approuve",
        reject="rejete",
        reason_field="explication",
        noun="La demande de congé",
    ),
    load_error="Erreur lors du chargement des congés.",
    empty_message="Aucune demande de congé.",
)

materials = ScreenConfig(
    key="materiel",
    role=Role.ADMIN,
    title="Demandes de matériel",
    resource="admin/material",
    columns=(
        employee_column(),
        Column("nom", "Matériel"),
        Column("quantite", "Quantité"),
        Column("motif", "Motif", sortable=False),
        Column("created_at", "Date", kind=FieldKind.DATE),
        status_column(MATERIAL_STATUSES),
    ),
    search_fields=EMPLOYEE_SEARCH + ("nom", "motif"),
    statuses=MATERIAL_STATUSES,
    numeric_fields=("quantite",),
    default_sort="created_at",
    actions=decision_actions(
        "admin/material/{id}",
        MATERIAL_STATUSES,
        approve="approuve",
        reject="rejete",
        reason_field="explication",
        noun="La demande de matériel",
    ),
    load_error="Erreur lors du chargement des demandes de matériel.",
    empty_message="Aucune demande de matériel.",
)

reimbursements = ScreenConfig(
    key="remboursements",
    role=Role.ADMIN,
    title="Remboursements",
    resource="admin/remboursements",
    columns=(
        employee_column(),
        Column("type", "Type"),
        Column("montant", "Montant", kind=FieldKind.MONEY),
        Column("justification", "Justificatif", sortable=False, kind=FieldKind.FILE),
        Column("created_at", "Date", kind=FieldKind.DATE),
        status_column(REIMBURSEMENT_STATUSES),
    ),
    search_fields=EMPLOYEE_SEARCH + ("type",),
    statuses=REIMBURSEMENT_STATUSES,
    numeric_fields=("montant",),
    attachment_fields=("justification",),
    default_sort="created_at",
    actions=decision_actions(
        "admin/remboursements/{id}",
        REIMBURSEMENT_STATUSES,
        approve="approuvé",
        reject="refusé",
        noun="La demande de remboursement",
    )
    + (
        DeleteEntityAction(
            path="admin/remboursements/{id}",
            success_message="Demande de remboursement supprimée.",
            error_message="Erreur lors de la suppression.",
        ),
    ),
    load_error="Erreur lors du chargement des remboursements.",
    empty_message="Aucune demande de remboursement.",
)

attestation_requests = ScreenConfig(
    key="attestations",
    role=Role.ADMIN,
    title="Demandes d'attestation",
    resource="admin/attestation-demandes",
    columns=(
        employee_column(),
        Column("attestation.type", "Type"),
        Column("date_livraison", "Date livr.", kind=FieldKind.DATE),
        Column("pdf", "Doc. PDF", sortable=False, kind=FieldKind.FILE),
        status_column(ATTESTATION_STATUSES),
    ),
    search_fields=EMPLOYEE_SEARCH + ("attestation.type",),
    statuses=ATTESTATION_STATUSES,
    date_fields=("date_livraison",),
    attachment_fields=("pdf",),
    default_sort="date_livraison",
    actions=(
        SetStatusAction(
            "accept",
            label="Accepter",
            path="admin/updateStatut/{id}",
            status_field="statut",
            value="accepte",
            success_message="Statut mis à jour avec succès.",
            error_message="Erreur lors de la mise à jour du statut.",
            style="success",
        ),
        SetStatusAction(
            "refuse",
            label="Refuser",
            path="admin/updateStatut/{id}",
            status_field="statut",
            value="refuse",
            success_message="Statut mis à jour avec succès.",
            error_message="Erreur lors de la mise à jour du statut.",
            style="danger",
        ),
        UploadAttachmentAction(
            "upload_pdf",
            label="Téléverser le PDF",
            path="admin/attestations/{id}/pdf",
            method="PUT",
            file_field="pdf",
            allowed_types=sorted(PDF_TYPES),
            file_label="Le PDF",
            success_message="PDF téléversé avec succès.",
            error_message="Erreur lors du téléversement du PDF.",
        ),
        DeleteAttachmentAction(
            "delete_pdf",
            label="Supprimer le PDF",
            path="admin/attestations/{id}/pdf",
            target_field="pdf",
            confirm="Supprimer le PDF de cette attestation ?",
            success_message="PDF supprimé avec succès.",
            error_message="Erreur lors de la suppression du PDF.",
        ),
        DeleteEntityAction(
            path="admin/deleteAttestation/{id}",
            confirm="Supprimer cette demande d'attestation ?",
            success_message="Demande d'attestation supprimée.",
            error_message="Erreur lors de la suppression de la demande.",
        ),
    ),
    load_error="Erreur lors du chargement des demandes d'attestation.",
    empty_message="Aucune demande d'attestation.",
)

ATTESTATION_TYPE_FIELDS = (
    FormField("type", "Type", required=True),
    FormField("description", "Description", kind=FieldKind.TEXTAREA),
)

attestation_types = ScreenConfig(
    key="types-attestation",
    role=Role.ADMIN,
    title="Types d'attestation",
    resource="admin/attestations",
    columns=(Column("type", "Type"), Column("description", "Description", sortable=False)),
    search_fields=("type", "description"),
    default_sort="type",
    actions=(
        UpdateFieldsAction(
            path="admin/attestations/{id}",
            fields=ATTESTATION_TYPE_FIELDS,
            success_message="Type d'attestation mis à jour.",
            error_message="Erreur lors de la mise à jour du type.",
        ),
        DeleteEntityAction(
            path="admin/attestations/{id}",
            success_message="Type d'attestation supprimé.",
            error_message="Erreur lors de la suppression du type.",
        ),
    ),
    create_path="admin/attestations",
    create_fields=ATTESTATION_TYPE_FIELDS,
    create_label="Ajouter un type",
    create_success="Type d'attestation ajouté.",
    create_error="Erreur lors de l'ajout du type.",
)

TRAINING_FIELDS = (
    FormField("titre", "Titre", required=True),
    FormField("description", "Description", kind=FieldKind.TEXTAREA),
) + date_range_fields() + (
    FormField("places_disponibles", "Places disponibles", kind=FieldKind.NUMBER, required=True),
)

trainings = ScreenConfig(
    key="formations",
    role=Role.ADMIN,
    title="Formations",
    resource="admin/formations",
    columns=(
        Column("titre", "Titre"),
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("places_disponibles", "Places"),
    ),
    search_fields=("titre", "description"),
    numeric_fields=("places_disponibles",),
    default_sort="date_debut",
    actions=(
        UpdateFieldsAction(
            path="admin/formations/{id}",
            fields=TRAINING_FIELDS,
            success_message="Formation mise à jour avec succès.",
            error_message="Erreur lors de la mise à jour de la formation.",
        ),
        DeleteEntityAction(
            path="admin/formations/{id}",
            success_message="Formation supprimée avec succès.",
            error_message="Erreur lors de la suppression de la formation.",
        ),
    ),
    create_path="admin/formations",
    create_fields=TRAINING_FIELDS,
    create_label="Ajouter une formation",
    create_success="Formation ajoutée avec succès.",
    create_error="Erreur lors de l'ajout de la formation.",
)

training_requests = ScreenConfig(
    key="demandes-formations",
    role=Role.ADMIN,
    title="Demandes de formation",
    resource="admin/demandes-formations",
    columns=(
        employee_column(),
        Column("formation.titre", "Formation"),
        Column("created_at", "Date", kind=FieldKind.DATE),
        status_column(TRAINING_REQUEST_STATUSES),
    ),
    search_fields=EMPLOYEE_SEARCH + ("formation.titre",),
    statuses=TRAINING_REQUEST_STATUSES,
    default_sort="created_at",
    actions=decision_actions(
        "admin/demandes-formations/{id}",
        TRAINING_REQUEST_STATUSES,
        approve="approuvée",
        reject="rejetée",
        noun="La demande de formation",
    ),
)

RECRUITMENT_FIELDS = (
    FormField("titre", "Titre", required=True),
    FormField("poste", "Poste", required=True),
    FormField("descriptionPoste", "Description du poste", kind=FieldKind.TEXTAREA),
    FormField("descriptionProfil", "Profil recherché", kind=FieldKind.TEXTAREA),
) + date_range_fields()

recruitments = ScreenConfig(
    key="recrutements",
    role=Role.ADMIN,
    title="Recrutements",
    resource="admin/recrutements",
    columns=(
        Column("titre", "Titre"),
        Column("poste", "Poste"),
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        status_column(RECRUITMENT_STATUSES),
    ),
    search_fields=("titre", "poste"),
    statuses=RECRUITMENT_STATUSES,
    default_sort="date_debut",
    actions=(
        SetStatusAction(
            "close",
            label="Clôturer",
            path="admin/recrutements/{id}",
            status_field="statut",
            value="clôturé",
            requires_pending=False,
            success_message="Recrutement clôturé.",
            error_message="Erreur lors du changement de statut.",
        ),
        SetStatusAction(
            "reopen",
            label="Rouvrir",
            path="admin/recrutements/{id}",
            status_field="statut",
            value="en cours",
            requires_pending=False,
            success_message="Recrutement rouvert.",
            error_message="Erreur lors du changement de statut.",
        ),
        UpdateFieldsAction(
            path="admin/recrutements/{id}",
            fields=RECRUITMENT_FIELDS,
            success_message="Recrutement mis à jour avec succès.",
            error_message="Erreur lors de la mise à jour du recrutement.",
        ),
        DeleteEntityAction(
            path="admin/recrutements/{id}",
            success_message="Recrutement supprimé avec succès.",
            error_message="Erreur lors de la suppression du recrutement.",
        ),
    ),
    create_path="admin/recrutements",
    create_fields=RECRUITMENT_FIELDS,
    create_label="Nouveau recrutement",
    create_success="Recrutement créé avec succès.",
    create_error="Erreur lors de la création du recrutement.",
)

candidates = ScreenConfig(
    key="condidateurs",
    role=Role.ADMIN,
    title="Candidatures",
    resource="admin/condidateurs",
    columns=(
        Column("nom", "Nom"),
        Column("prenom", "Prénom"),
        Column("email", "Email"),
        Column("recrutement.titre", "Offre"),
        Column("cv", "CV", sortable=False, kind=FieldKind.FILE),
        status_column(CANDIDATE_STATUSES),
    ),
    search_fields=("nom", "prenom", "email", "recrutement.titre"),
    statuses=CANDIDATE_STATUSES,
    attachment_fields=("cv",),
    default_sort="nom",
    actions=decision_actions(
        "admin/condidateurs/{id}",
        CANDIDATE_STATUSES,
        approve="accepte",
        reject="rejete",
        reason_field="justification",
        noun="La candidature",
    ),
)

absences = ScreenConfig(
    key="absences",
    role=Role.ADMIN,
    title="Absences",
    resource="admin/absences",
    columns=(
        employee_column(),
        Column("date_debut", "Début", kind=FieldKind.DATE),
        Column("date_fin", "Fin", kind=FieldKind.DATE),
        Column("motif", "Motif", sortable=False),
        Column("justifiee", "Justifiée"),
        Column("justificatif", "Justificatif", sortable=False, kind=FieldKind.FILE),
    ),
    search_fields=EMPLOYEE_SEARCH + ("motif",),
    attachment_fields=("justificatif",),
    default_sort="date_debut",
    actions=(
        UpdateFieldsAction(
            "justify",
            label="Justification",
            method="PUT",
            path="admin/absences/{id}/justification",
            multipart=True,
            fields=(
                FormField(
                    "justifiee",
                    "Justifiée",
                    kind=FieldKind.SELECT,
                    required=True,
                    choices=(("1", "Oui"), ("0", "Non")),
                ),
                FormField("justificatif", "Justificatif", kind=FieldKind.FILE, allowed_types=tuple(sorted(DOCUMENT_TYPES))),
            ),
            success_message="Justification mise à jour.",
            error_message="Erreur lors de la mise à jour de la justification.",
        ),
        DeleteEntityAction(
            path="admin/absences/{id}",
            success_message="Absence supprimée.",
            error_message="Erreur lors de la suppression de l'absence.",
        ),
    ),
    create_path="admin/absences",
    create_fields=(FormField("employe_id", "Employé", kind=FieldKind.NUMBER, required=True),)
    + date_range_fields()
    + (
        FormField("motif", "Motif", kind=FieldKind.TEXTAREA, required=True),
        FormField("justificatif", "Justificatif", kind=FieldKind.FILE, allowed_types=tuple(sorted(DOCUMENT_TYPES))),
    ),
    create_multipart=True,
    create_label="Enregistrer une absence",
    create_success="Absence enregistrée avec succès.",
    create_error="Erreur lors de l'enregistrement de l'absence.",
    load_error="Impossible de charger les données initiales.",
)

BONUS_FIELDS = (
    FormField("nom", "Nom", required=True),
    FormField("montant", "Montant", kind=FieldKind.MONEY, required=True),
    FormField("description", "Description", kind=FieldKind.TEXTAREA),
)

bonuses = ScreenConfig(
    key="primes",
    role=Role.ADMIN,
    title="Primes",
    resource="admin/primes",
    columns=(
        Column("nom", "Nom"),
        Column("montant", "Montant", kind=FieldKind.MONEY),
        Column("description", "Description", sortable=False),
    ),
    search_fields=("nom", "description"),
    numeric_fields=("montant",),
    default_sort="nom",
    actions=(
        UpdateFieldsAction(
            path="admin/primes/{id}",
            fields=BONUS_FIELDS,
            success_message="Prime mise à jour avec succès.",
            error_message="Erreur lors de la mise à jour de la prime.",
        ),
        DeleteEntityAction(
            path="admin/primes/{id}",
            success_message="Prime supprimée avec succès.",
            error_message="Erreur lors de la suppression de la prime.",
        ),
    ),
    create_path="admin/primes",
    create_fields=BONUS_FIELDS,
    create_label="Ajouter une prime",
    create_success="Prime ajoutée avec succès.",
    create_error="Erreur lors de l'ajout de la prime.",
    load_error="Erreur chargement des primes.",
)

bonus_awards = ScreenConfig(
    key="attributions",
    role=Role.ADMIN,
    title="Attributions de primes",
    resource="admin/prime-attributions",
    columns=(
        employee_column(),
        Column("prime.nom", "Prime"),
        Column("prime.montant", "Montant", kind=FieldKind.MONEY),
        Column("date_attribution", "Date", kind=FieldKind.DATE),
    ),
    search_fields=EMPLOYEE_SEARCH + ("prime.nom",),
    numeric_fields=("prime.montant",),
    default_sort="date_attribution",
    actions=(
        DeleteEntityAction(
            path="admin/prime-attributions/{id}",
            confirm="Êtes-vous sûr de vouloir supprimer cette attribution de prime ?",
            success_message="Attribution supprimée avec succès.",
            error_message="Erreur suppression attribution.",
        ),
    ),
    create_path="admin/primes/attribuer",
    create_fields=(
        FormField("employe_id", "Employé", kind=FieldKind.NUMBER, required=True),
        FormField("prime_id", "Prime", kind=FieldKind.NUMBER, required=True),
        FormField("date_attribution", "Date d'attribution", kind=FieldKind.DATE, required=True),
    ),
    create_label="Attribuer une prime",
    create_success="Attribution effectuée avec succès.",
    create_error="Erreur attribution prime.",
    load_error="Erreur chargement des attributions.",
)

payslips = ScreenConfig(
    key="fiches-paie",
    role=Role.ADMIN,
    title="Fiches de paie",
    resource="employes",
    columns=(
        Column("nom", "Nom"),
        Column("prenom", "Prénom"),
        Column("email", "Email"),
        Column("salaire", "Salaire", kind=FieldKind.MONEY),
    ),
    search_fields=("nom", "prenom", "email"),
    numeric_fields=("salaire",),
    default_sort="nom",
    actions=(
        SendDocumentAction(
            "send_payslip",
            label="Envoyer",
            path="fiche-paie/send-one/{id}",
            fields=PAYSLIP_PERIOD,
            success_message="Fiche de paie envoyée avec succès.",
            error_message="Une erreur s'est produite lors de l'envoi.",
        ),
    ),
    commands=(
        CollectionCommand(
            "send_all",
            label="Envoyer à tous les employés",
            method="POST",
            path="fiche-paie/send-all",
            fields=PAYSLIP_PERIOD,
            success_message="Fiches de paie envoyées avec succès.",
            error_message="Une erreur s'est produite lors de l'envoi.",
            confirm="Envoyer les fiches de paie à tous les employés ?",
        ),
    ),
    load_error="Erreur lors du chargement des employés.",
)

SCREENS = (
    employees,
    leaves,
    materials,
    reimbursements,
    attestation_requests,
    attestation_types,
    trainings,
    training_requests,
    recruitments,
    candidates,
    absences,
    bonuses,
    bonus_awards,
    payslips,
)

# Screens whose pending rows show up on the dashboard.
DASHBOARD = (employees, leaves, materials, reimbursements, attestation_requests, training_requests, candidates)
