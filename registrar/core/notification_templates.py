"""Notification Templates — pure formatting of inbox titles and messages.

Invariants:
    - All functions are pure (no IO, no clock, no randomness)
    - Each template returns a NotificationDraft; type and priority are fixed per event
    - Grade values are rendered with two decimals on the /20 scale

Design Decisions:
    - Extracted from NotificationHub (shell) to core so message wording is
      testable without storage
    - User-facing text is French, the institution's working language; code,
      logs and identifiers stay English
"""

from dataclasses import dataclass

from registrar.core.domain_types import (
    DEFAULT_ASSIGNER_LABEL, NotificationPriority, NotificationType,
)


@dataclass(frozen=True)
class NotificationDraft:
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    related_entity_id: str | None = None


def grade_added(
    module_code: str, module_name: str, value: float, professor_name: str,
) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.GRADE_ADDED,
        title="📝 Nouvelle note disponible",
        message=(
            f"Une nouvelle note a été saisie par {professor_name} pour le module "
            f"{module_name} ({module_code}). Note: {value:.2f}/20"
        ),
        priority=NotificationPriority.HIGH,
        related_entity_id=module_code,
    )


def grade_modified(module_code: str, module_name: str, value: float) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.GRADE_MODIFIED,
        title="📝 Note modifiée",
        message=(
            f"Votre note pour le module {module_name} ({module_code}) a été modifiée. "
            f"Nouvelle note: {value:.2f}/20"
        ),
        priority=NotificationPriority.HIGH,
        related_entity_id=module_code,
    )


def absence_recorded(module_code: str, module_name: str, date_label: str) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.ABSENCE_RECORDED,
        title="📅 Absence enregistrée",
        message=(
            f"Une absence a été enregistrée pour le module {module_name} "
            f"({module_code}) le {date_label}"
        ),
        priority=NotificationPriority.NORMAL,
        related_entity_id=module_code,
    )


def module_assigned(
    module_code: str, module_name: str, assigned_by: str = DEFAULT_ASSIGNER_LABEL,
) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.MODULE_ASSIGNED,
        title="📚 Nouveau module assigné",
        message=f"Le module {module_name} ({module_code}) vous a été assigné par {assigned_by}",
        priority=NotificationPriority.HIGH,
        related_entity_id=module_code,
    )


def account_created(account_type: str, temporary_password: str) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.ACCOUNT_CREATED,
        title="👤 Compte créé",
        message=(
            f"Votre compte {account_type} a été créé. Mot de passe temporaire: "
            f"{temporary_password}. Veuillez le changer lors de votre première connexion."
        ),
        priority=NotificationPriority.URGENT,
    )


def account_modified(modification: str) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.ACCOUNT_MODIFIED,
        title="👤 Compte modifié",
        message=(
            f"Votre compte a été modifié: {modification}. Si vous n'êtes pas à "
            "l'origine de cette modification, contactez l'administration."
        ),
        priority=NotificationPriority.HIGH,
    )


def enrollment_validated(module_names: list[str]) -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.ENROLLMENT_VALIDATED,
        title="✓ Inscription validée",
        message=(
            "Vos inscriptions ont été validées pour les modules suivants: "
            + ", ".join(module_names)
        ),
        priority=NotificationPriority.HIGH,
    )


def password_reset() -> NotificationDraft:
    return NotificationDraft(
        type=NotificationType.PASSWORD_RESET,
        title="🔒 Mot de passe réinitialisé",
        message=(
            "Votre mot de passe a été réinitialisé par l'administration. Si vous n'êtes "
            "pas à l'origine de cette demande, contactez rapidement le service scolarité."
        ),
        priority=NotificationPriority.URGENT,
    )
