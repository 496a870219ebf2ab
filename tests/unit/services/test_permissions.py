"""
Unit Tests for ownership-gated thesis mutation
"""
import pytest

from thesis_archive.core.exceptions import AuthorizationError
from thesis_archive.models.thesis import Thesis, ThesisStatus
from thesis_archive.models.user import User, UserRole
from thesis_archive.services import permissions


def _user(user_id: str, role: UserRole) -> User:
    return User(id=user_id, username=f"user{user_id}", first_name="Test", last_name="User", role=role)


def _thesis(owner_id, status: ThesisStatus) -> Thesis:
    return Thesis(title="A Study", submitted_by=owner_id, status=status)


STUDENT = _user("s1", UserRole.STUDENT)


class TestStudentGate:
    def test_owner_with_pending_allowed(self):
        thesis = _thesis("s1", ThesisStatus.PENDING)

        permissions.ensure_can_modify(thesis, STUDENT)
        assert permissions.can_modify(thesis, STUDENT)

    def test_other_students_row_refused(self):
        thesis = _thesis("s2", ThesisStatus.PENDING)

        with pytest.raises(AuthorizationError, match="your own submissions"):
            permissions.ensure_can_modify(thesis, STUDENT)
        assert not permissions.can_modify(thesis, STUDENT)

    @pytest.mark.parametrize("status", [ThesisStatus.APPROVED, ThesisStatus.REJECTED])
    def test_owner_after_review_refused(self, status):
        thesis = _thesis("s1", status)

        with pytest.raises(AuthorizationError, match="pending submissions"):
            permissions.ensure_can_modify(thesis, STUDENT)

    def test_unowned_row_refused(self):
        with pytest.raises(AuthorizationError):
            permissions.ensure_can_modify(_thesis(None, ThesisStatus.PENDING), STUDENT)


class TestStaffBypass:
    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.STUDENT_ASSISTANT])
    @pytest.mark.parametrize("status", list(ThesisStatus))
    def test_staff_may_modify_anything(self, role, status):
        staff = _user("a1", role)
        thesis = _thesis("s9", status)

        permissions.ensure_can_modify(thesis, staff)
        assert permissions.can_modify(thesis, staff)


class TestRoleChecks:
    def test_ensure_staff(self):
        permissions.ensure_staff(_user("a", UserRole.STUDENT_ASSISTANT))
        with pytest.raises(AuthorizationError):
            permissions.ensure_staff(STUDENT)

    def test_ensure_admin(self):
        permissions.ensure_admin(_user("a", UserRole.ADMIN))
        with pytest.raises(AuthorizationError):
            permissions.ensure_admin(_user("b", UserRole.STUDENT_ASSISTANT))
