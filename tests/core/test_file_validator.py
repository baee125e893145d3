import pytest

from core.models.errors import (
    EmptyFileError,
    FileSizeError,
    InvalidFileError,
    MagicBytesMismatchError,
    MIMETypeError,
)
from core.services.file_validator import FileValidator

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def validator() -> FileValidator:
    return FileValidator()


class TestFileValidator:
    def test_valid_png(self, validator, sample_png) -> None:
        assert validator.validate(sample_png, "image/png") == "image/png"

    def test_valid_jpeg(self, validator, sample_jpeg) -> None:
        assert validator.validate(sample_jpeg, "image/jpeg") == "image/jpeg"

    def test_declared_type_is_case_insensitive(self, validator) -> None:
        assert validator.validate(PNG_HEADER + b"data", " Image/PNG ") == "image/png"

    def test_empty(self, validator) -> None:
        with pytest.raises(EmptyFileError) as exc:
            validator.validate(b"", "image/png")

        assert exc.value.error_code == "FILE_EMPTY"

    def test_exactly_at_limit_is_accepted(self) -> None:
        validator = FileValidator(max_file_size=64)
        payload = PNG_HEADER + b"\x00" * (64 - len(PNG_HEADER))

        assert validator.validate(payload, "image/png") == "image/png"

    def test_one_byte_over_limit(self) -> None:
        validator = FileValidator(max_file_size=64)
        payload = PNG_HEADER + b"\x00" * (65 - len(PNG_HEADER))

        with pytest.raises(FileSizeError) as exc:
            validator.validate(payload, "image/png")

        assert exc.value.error_code == "FILE_TOO_LARGE"

    def test_default_limit_is_ten_mebibytes(self, validator) -> None:
        payload = PNG_HEADER + b"\x00" * (10 * 1024 * 1024)

        with pytest.raises(FileSizeError):
            validator.validate(payload, "image/png")

    @pytest.mark.parametrize("declared", [None, "", "image/svg+xml", "application/pdf"])
    def test_unsupported_declared_type(self, validator, declared) -> None:
        with pytest.raises(MIMETypeError) as exc:
            validator.validate(PNG_HEADER, declared)

        assert exc.value.error_code == "INVALID_FILE_TYPE"

    def test_arbitrary_bytes_declared_png(self, validator) -> None:
        with pytest.raises(MagicBytesMismatchError) as exc:
            validator.validate(b"%PDF-1.7 definitely not a png", "image/png")

        assert exc.value.error_code == "FILE_CONTENT_MISMATCH"
        assert exc.value.details["detected"] is None

    def test_mismatch_reports_detected_type(self, validator, sample_jpeg) -> None:
        with pytest.raises(MagicBytesMismatchError) as exc:
            validator.validate(sample_jpeg, "image/png")

        assert exc.value.details == {"declared": "image/png", "detected": "image/jpeg"}

    def test_zero_bytes_declared_jpeg(self, validator) -> None:
        with pytest.raises(InvalidFileError):
            validator.validate(b"\x00\x00\x00\x00", "image/jpeg")

    def test_payload_shorter_than_signature_window(self, validator) -> None:
        with pytest.raises(MagicBytesMismatchError):
            validator.validate(b"GIF", "image/gif")

    def test_restricted_allowed_types(self, sample_png) -> None:
        validator = FileValidator(allowed_content_types={"image/jpeg"})

        with pytest.raises(MIMETypeError):
            validator.validate(sample_png, "image/png")

    def test_input_is_not_mutated(self, validator, sample_png) -> None:
        before = bytes(sample_png)
        validator.validate(sample_png, "image/png")
        assert sample_png == before
