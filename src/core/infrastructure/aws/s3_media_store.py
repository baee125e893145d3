"""S3-backed implementation of MediaStoreRepository."""

import io
import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from PIL import Image, UnidentifiedImageError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.asset import UploadResult
from core.models.errors import RemoteStoreError
from core.repositories.storage_repository import DeleteOutcome, MediaStoreRepository
from core.utils.constants import (
    DEFAULT_BASE_FOLDER,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    MIME_TYPE_EXTENSION_MAP,
)

logger = Logger(UTC=True)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def read_dimensions(file_data: bytes) -> tuple[int | None, int | None]:
    """Read width and height from the image header.

    Pillow only parses the header here; the pixel data is never decoded.
    Headers declaring an oversized canvas are treated as unreadable.
    """
    try:
        with Image.open(io.BytesIO(file_data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        logger.warning("Unable to read image dimensions", extra={"size": len(file_data)})
        return None, None

    return width, height


class S3MediaStore(MediaStoreRepository):
    """Media store implementation backed by Amazon S3."""

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        *,
        base_folder: str = DEFAULT_BASE_FOLDER,
        public_base_url: str | None = None,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()
        self._base_folder = base_folder.strip("/")
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def upload(
        self,
        *,
        file_data: bytes,
        folder_path: str,
        content_type: str,
    ) -> UploadResult:
        """Upload image bytes under a unique key and describe the stored object."""
        extension = self._get_extension(content_type)
        key = self.build_key(folder_path, extension)
        width, height = read_dimensions(file_data)

        logger.info(
            "Uploading image to media store",
            extra={"key": key, "size": len(file_data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=content_type,
                metadata={"folder": folder_path},
            )
        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise RemoteStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"folder": folder_path},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise RemoteStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"folder": folder_path},
            ) from exc

        secure_url = self.public_url(key)

        logger.info("Image uploaded successfully", extra={"key": key})
        return UploadResult(
            url=secure_url.replace("https://", "http://", 1),
            secure_url=secure_url,
            external_id=key,
            format=extension,
            byte_size=len(file_data),
            width=width,
            height=height,
        )

    def delete(self, *, external_id: str | None) -> DeleteOutcome:
        """Delete an image object from S3.

        S3 deletes are idempotent, so existence is checked first to report
        objects that were already gone.
        """
        if not external_id or not external_id.strip():
            logger.warning("Attempted to delete image with empty external id")
            return DeleteOutcome.SKIPPED

        logger.info("Deleting image from media store", extra={"key": external_id})

        try:
            self._s3.head_object(key=external_id)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                logger.warning("Image not found in media store", extra={"key": external_id})
                return DeleteOutcome.NOT_FOUND

            logger.error("S3 head_object failed", extra={"key": external_id})
            raise RemoteStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"external_id": external_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error checking image before delete")
            raise RemoteStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"external_id": external_id},
            ) from exc

        try:
            self._s3.delete_object(key=external_id)
        except Exception as exc:
            logger.exception("S3 deletion failed", extra={"key": external_id})
            raise RemoteStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"external_id": external_id},
            ) from exc

        logger.info("Image deleted successfully", extra={"key": external_id})
        return DeleteOutcome.OK

    def build_key(self, folder_path: str, extension: str) -> str:
        folder = "/".join(
            part for part in (self._base_folder, folder_path.strip("/")) if part
        )
        return f"{folder}/{uuid.uuid4().hex}.{extension}"

    def public_url(self, key: str) -> str:
        """Return the https URL under which ``key`` is served."""
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"

        if self._s3.endpoint_url:
            return f"{self._s3.endpoint_url.rstrip('/')}/{self._s3.bucket}/{key}"

        region = self._s3.region or "us-east-1"
        return f"https://{self._s3.bucket}.s3.{region}.amazonaws.com/{key}"

    @staticmethod
    def _get_extension(content_type: str) -> str:
        """Return file extension for a given MIME type."""
        return MIME_TYPE_EXTENSION_MAP.get(content_type, "bin")
