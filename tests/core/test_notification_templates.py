"""Notification template tests — fixed type/priority per event and message wording."""

from registrar.core import notification_templates as templates
from registrar.core.domain_types import NotificationPriority, NotificationType


def test_grade_added_formats_value_on_twenty_scale():
    draft = templates.grade_added("GL01", "Génie Logiciel", 14, "Jean Petit")
    assert draft.type == NotificationType.GRADE_ADDED
    assert draft.priority == NotificationPriority.HIGH
    assert draft.related_entity_id == "GL01"
    assert "14.00/20" in draft.message
    assert "Jean Petit" in draft.message
    assert "Génie Logiciel (GL01)" in draft.message


def test_grade_modified_is_high_priority():
    draft = templates.grade_modified("BD02", "Base de Données", 9.5)
    assert draft.type == NotificationType.GRADE_MODIFIED
    assert draft.priority == NotificationPriority.HIGH
    assert "9.50/20" in draft.message


def test_absence_recorded_is_normal_priority_with_date():
    draft = templates.absence_recorded("RS04", "Réseaux", "05/02/2024")
    assert draft.priority == NotificationPriority.NORMAL
    assert draft.message.endswith("le 05/02/2024")
    assert draft.related_entity_id == "RS04"


def test_module_assigned_defaults_assigner():
    draft = templates.module_assigned("IA03", "Intelligence Artificielle")
    assert draft.type == NotificationType.MODULE_ASSIGNED
    assert draft.message.endswith("par Vice-Doyen")


def test_account_created_is_urgent_and_shows_password():
    draft = templates.account_created("student", "password123")
    assert draft.priority == NotificationPriority.URGENT
    assert "password123" in draft.message
    assert draft.related_entity_id is None


def test_account_modified_includes_modification():
    draft = templates.account_modified("email changé")
    assert draft.type == NotificationType.ACCOUNT_MODIFIED
    assert "email changé" in draft.message


def test_enrollment_validated_lists_modules():
    draft = templates.enrollment_validated(["Réseaux", "IA Avancée"])
    assert draft.type == NotificationType.ENROLLMENT_VALIDATED
    assert draft.message.endswith("Réseaux, IA Avancée")


def test_password_reset_is_urgent_without_entity():
    draft = templates.password_reset()
    assert draft.type == NotificationType.PASSWORD_RESET
    assert draft.priority == NotificationPriority.URGENT
    assert draft.related_entity_id is None
    assert "réinitialisé" in draft.message
