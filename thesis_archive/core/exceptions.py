"""
Custom Exceptions for the Thesis Archive
========================================

Services raise these instead of HTTPException so the same rules apply whether
they are called from an endpoint, the admin CLI or a test. The API layer maps
them onto HTTP responses via ``status_code``.

Usage:
    from thesis_archive.core.exceptions import ThesisNotFoundError

    if not thesis:
        raise ThesisNotFoundError(thesis_id)
"""

from typing import Optional, Any, Dict


class ArchiveError(Exception):
    """Base exception for all thesis archive errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ArchiveError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Username or password did not match"""

    def __init__(self):
        super().__init__("Invalid username or password")
        self.code = "INVALID_CREDENTIALS"


class AuthorizationError(ArchiveError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ArchiveError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ThesisNotFoundError(ResourceNotFoundError):
    def __init__(self, thesis_id: str):
        super().__init__("Thesis", thesis_id)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str, resource_type: str = "User"):
        super().__init__(resource_type, user_id)


class ProgramNotFoundError(ResourceNotFoundError):
    def __init__(self, program_id: str):
        super().__init__("Program", program_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ArchiveError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class DuplicateResourceError(ValidationError):
    """A unique value is already taken"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "DUPLICATE_RESOURCE"


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__(
            f"Only PDF files are allowed (got '{file_type}')"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"file_type": file_type, "allowed_types": allowed_types}


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the configured cap"""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"
        )
        self.code = "FILE_TOO_LARGE"
        self.details = {"size": size, "max_size": max_size}


class InvalidStatusTransitionError(ValidationError):
    """Requested workflow transition is not allowed from the current status"""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot change thesis status from '{current}' to '{target}'"
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details = {"current_status": current, "target_status": target}


# ============================================
# Storage Errors
# ============================================

class StorageError(ArchiveError):
    """Storage operation failed"""

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")


class S3UploadError(StorageError):
    """S3 upload failed"""

    def __init__(self, key: str, message: str = "Upload failed"):
        super().__init__(f"Failed to upload to S3: {message}")
        self.code = "S3_UPLOAD_FAILED"
        self.details["s3_key"] = key

