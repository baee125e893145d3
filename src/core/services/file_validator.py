"""Validation of untrusted upload payloads.

The declared content type is only a claim made by the caller; the payload's
leading bytes must carry the signature of that type before the file is
allowed anywhere near the media store.
"""

from collections.abc import Iterable

from aws_lambda_powertools import Logger

from core.models.errors import (
    EmptyFileError,
    FileSizeError,
    MagicBytesMismatchError,
    MIMETypeError,
)
from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    MIN_SIGNATURE_LENGTH,
    format_file_size,
)
from core.utils.mime import detect_mime_type, matches_signature

logger = Logger(UTC=True)


class FileValidator:
    """Checks emptiness, size, declared type and magic bytes, in that order."""

    def __init__(
        self,
        *,
        max_file_size: int = MAX_FILE_SIZE,
        allowed_content_types: Iterable[str] = ALLOWED_MIME_TYPES,
    ) -> None:
        self.max_file_size = max_file_size
        self.allowed_content_types = frozenset(t.lower() for t in allowed_content_types)

    def validate(self, file_data: bytes, declared_content_type: str | None) -> str:
        """Validate an image payload.

        Args:
            file_data: Raw file bytes (never mutated)
            declared_content_type: Content type claimed by the caller

        Returns:
            The normalized (lower-case) content type

        Raises:
            EmptyFileError: If the payload is empty
            FileSizeError: If the payload exceeds the size limit
            MIMETypeError: If the declared type is missing or not allowed
            MagicBytesMismatchError: If the bytes do not match the declared type
        """
        logger.debug(
            "Validating image file",
            extra={"size": len(file_data), "content_type": declared_content_type},
        )

        if not file_data:
            raise EmptyFileError(message="File is empty")

        if len(file_data) > self.max_file_size:
            raise FileSizeError(
                message=(
                    f"File size ({len(file_data)} bytes) exceeds maximum allowed "
                    f"({self.max_file_size} bytes)"
                ),
                details={
                    "size": format_file_size(len(file_data)),
                    "limit": format_file_size(self.max_file_size),
                },
            )

        content_type = (declared_content_type or "").strip().lower()
        if content_type not in self.allowed_content_types:
            raise MIMETypeError(
                message=(
                    f"Invalid file type: {declared_content_type}. "
                    f"Allowed types: {', '.join(sorted(self.allowed_content_types))}"
                ),
                details={"content_type": declared_content_type},
            )

        if len(file_data) < MIN_SIGNATURE_LENGTH or not matches_signature(
            file_data, content_type
        ):
            detected = detect_mime_type(file_data)
            logger.warning(
                "File content does not match declared content type",
                extra={"declared": content_type, "detected": detected},
            )
            raise MagicBytesMismatchError(
                message="File content does not match declared content type",
                details={"declared": content_type, "detected": detected},
            )

        logger.debug("Image file validation successful")
        return content_type
