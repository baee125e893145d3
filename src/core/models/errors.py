"""Custom exception classes for the media asset service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_CONCURRENT_MODIFICATION,
    ERROR_CODE_FILE_CONTENT_MISMATCH,
    ERROR_CODE_FILE_EMPTY,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_INVALID_FILE_TYPE,
    ERROR_CODE_MAX_IMAGES_EXCEEDED,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_OWNERSHIP_MISMATCH,
    ERROR_CODE_PARENT_NOT_FOUND,
    ERROR_CODE_REMOTE_STORE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_VALIDATION_FAILED,
)


class MediaServiceError(Exception):
    """
    Base exception for all media service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message; subclasses supply a default
    error code. Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class _DefaultCodeError(MediaServiceError):
    default_error_code: str = ERROR_CODE_VALIDATION_FAILED

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or self.default_error_code,
            details=details,
        )


class ValidationError(_DefaultCodeError):
    """Raised when request validation fails."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class NotFoundError(_DefaultCodeError):
    """Raised when a requested resource is not found."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class ParentNotFoundError(NotFoundError):
    """Raised when the project or blog post named in the path does not exist."""

    default_error_code = ERROR_CODE_PARENT_NOT_FOUND


class AssetNotFoundError(NotFoundError):
    """Raised when an asset row does not exist."""

    default_error_code = ERROR_CODE_IMAGE_NOT_FOUND


class OwnershipMismatchError(_DefaultCodeError):
    """Raised when an asset exists but belongs to a different parent."""

    default_error_code = ERROR_CODE_OWNERSHIP_MISMATCH


class InvalidFileError(_DefaultCodeError):
    """Raised when an uploaded file is rejected by validation."""

    default_error_code = ERROR_CODE_INVALID_FILE_TYPE


class EmptyFileError(InvalidFileError):
    """Raised when the uploaded payload is empty."""

    default_error_code = ERROR_CODE_FILE_EMPTY


class FileSizeError(InvalidFileError):
    """Raised when file size exceeds the allowed limit."""

    default_error_code = ERROR_CODE_FILE_SIZE_EXCEEDED


class MIMETypeError(InvalidFileError):
    """Raised when an unsupported MIME type is declared."""

    default_error_code = ERROR_CODE_INVALID_FILE_TYPE


class MagicBytesMismatchError(InvalidFileError):
    """Raised when file content does not match the declared MIME type."""

    default_error_code = ERROR_CODE_FILE_CONTENT_MISMATCH


class LimitExceededError(_DefaultCodeError):
    """Raised when a parent already holds the maximum number of assets."""

    default_error_code = ERROR_CODE_MAX_IMAGES_EXCEEDED


class LockTimeoutError(_DefaultCodeError):
    """Raised when the per-parent lock cannot be acquired in time."""

    default_error_code = ERROR_CODE_CONCURRENT_MODIFICATION


class RemoteStoreError(_DefaultCodeError):
    """Raised when an upload or delete against the media store fails."""

    default_error_code = ERROR_CODE_REMOTE_STORE


class PersistenceError(_DefaultCodeError):
    """Raised when an asset metadata operation fails."""

    default_error_code = ERROR_CODE_METADATA_OPERATION_FAILED
