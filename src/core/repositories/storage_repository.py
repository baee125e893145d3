"""Abstract contract for the remote media store."""

from abc import ABC, abstractmethod
from enum import Enum

from core.models.asset import UploadResult


class DeleteOutcome(str, Enum):
    """Result of a remote delete that did not raise."""

    OK = "ok"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"


class MediaStoreRepository(ABC):
    """Contract for storing and deleting image binaries.

    Implementations could be S3, Cloudinary, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload(
        self,
        *,
        file_data: bytes,
        folder_path: str,
        content_type: str,
    ) -> UploadResult:
        """Upload an image under ``folder_path`` and describe the stored object.

        Raises:
            RemoteStoreError: If the upload fails or times out
        """

    @abstractmethod
    def delete(self, *, external_id: str | None) -> DeleteOutcome:
        """Delete an object by its external identifier.

        An empty or missing identifier is a no-op (``SKIPPED``).

        Raises:
            RemoteStoreError: If deletion fails
        """
