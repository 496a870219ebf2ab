"""
Unit Tests for the error hierarchy and its HTTP mapping
"""
from thesis_archive.core.exceptions import (
    ArchiveError,
    AuthenticationError,
    AuthorizationError,
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidStatusTransitionError,
    ThesisNotFoundError,
    UserNotFoundError,
    ValidationError,
)


class TestStatusCodes:
    def test_categories(self):
        assert ValidationError("bad").status_code == 400
        assert AuthenticationError().status_code == 401
        assert AuthorizationError().status_code == 403
        assert ThesisNotFoundError("x").status_code == 404
        assert ArchiveError("boom").status_code == 500

    def test_upload_and_workflow_errors_are_validation_errors(self):
        assert isinstance(InvalidFileTypeError("text/plain", ["application/pdf"]), ValidationError)
        assert isinstance(FileTooLargeError(10, 5), ValidationError)
        assert isinstance(InvalidStatusTransitionError("approved", "approved"), ValidationError)


class TestErrorBody:
    def test_to_dict_envelope(self):
        body = ThesisNotFoundError("abc").to_dict()

        assert body == {
            "error": "Thesis not found",
            "code": "THESIS_NOT_FOUND",
            "details": {"resource_type": "Thesis", "resource_id": "abc"},
        }

    def test_transition_error_code(self):
        error = InvalidStatusTransitionError("approved", "rejected")

        assert error.code == "INVALID_STATUS_TRANSITION"
        assert error.details == {"current_status": "approved", "target_status": "rejected"}

    def test_user_not_found_uses_role_label(self):
        error = UserNotFoundError("42", "Student assistant")

        assert error.message == "Student assistant not found"
        assert error.code == "STUDENT_ASSISTANT_NOT_FOUND"

    def test_validation_error_field(self):
        assert ValidationError("Year must be a number", field="year").details == {"field": "year"}
