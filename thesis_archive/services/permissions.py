"""Role and ownership checks for thesis mutations"""
from thesis_archive.core.exceptions import AuthorizationError
from thesis_archive.models.thesis import Thesis, ThesisStatus
from thesis_archive.models.user import User, UserRole, STAFF_ROLES


def is_staff(actor: User) -> bool:
    return actor.role in STAFF_ROLES


def ensure_staff(actor: User) -> None:
    if not is_staff(actor):
        raise AuthorizationError("Admin or student assistant access required")


def ensure_admin(actor: User) -> None:
    if actor.role != UserRole.ADMIN:
        raise AuthorizationError("Admin access required")


def can_modify(thesis: Thesis, actor: User) -> bool:
    """Staff may change any thesis; a student only their own pending submission"""
    if is_staff(actor):
        return True
    return (
        thesis.submitted_by is not None
        and str(thesis.submitted_by) == str(actor.id)
        and thesis.status == ThesisStatus.PENDING
    )


def ensure_can_modify(thesis: Thesis, actor: User) -> None:
    """Raise AuthorizationError (403) unless ``actor`` may update/delete ``thesis``"""
    if is_staff(actor):
        return
    if thesis.submitted_by is None or str(thesis.submitted_by) != str(actor.id):
        raise AuthorizationError("You can only edit your own submissions")
    if thesis.status != ThesisStatus.PENDING:
        raise AuthorizationError("You can only edit pending submissions")
