"""Business logic for images attached to projects and blog posts.

One service instance serves one parent kind. The write order for uploads is
always: media store first, metadata row second, and a single compensating
media store delete when the row could not be written. Sequences that read the
sibling count or primary flag and then write run under the parent lock.
"""

import dataclasses

from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.dynamodb_assets import DynamoDBAssetRepository
from core.infrastructure.aws.dynamodb_lock import DynamoDBParentLock
from core.infrastructure.aws.dynamodb_parents import DynamoDBParentRepository
from core.infrastructure.aws.s3_media_store import S3MediaStore
from core.models.asset import Asset, AssetMetadata, AssetPatch, AssetView, parent_key_for
from core.models.errors import (
    AssetNotFoundError,
    LimitExceededError,
    NotFoundError,
    ParentNotFoundError,
    PersistenceError,
)
from core.models.parent import PARENT_KINDS, Parent, ParentKind
from core.repositories.asset_repository import AssetRepository
from core.repositories.lock_repository import ParentLock
from core.repositories.parent_repository import ParentRepository
from core.repositories.storage_repository import MediaStoreRepository
from core.services.file_validator import FileValidator
from core.services.ownership import verify_ownership
from core.utils.constants import ERROR_CODE_METADATA_CREATE_FAILED, METRICS_NAMESPACE
from core.utils.settings import MediaSettings, get_settings

logger = Logger(UTC=True)
metrics = Metrics(namespace=METRICS_NAMESPACE)


class AssetService:
    """Application service for one parent kind.

    This service orchestrates:
    - Parent resolution and file validation
    - Count and primary checks under the parent lock
    - Media store upload and metadata persistence
    - Compensation when persistence fails
    """

    def __init__(
        self,
        kind: ParentKind,
        *,
        assets: AssetRepository,
        store: MediaStoreRepository,
        parents: ParentRepository,
        lock: ParentLock,
        validator: FileValidator | None = None,
    ) -> None:
        self.kind = kind
        self.assets = assets
        self.store = store
        self.parents = parents
        self.lock = lock
        self.validator = validator or FileValidator()

    def parent_key(self, parent_id: str) -> str:
        return parent_key_for(self.kind.name, parent_id)

    def upload_asset(
        self,
        *,
        parent_id: str,
        file_data: bytes,
        content_type: str | None,
        metadata: AssetMetadata | None = None,
    ) -> AssetView:
        """Validate, store and record a new image for a parent.

        The upload flow is:
        1. Resolve the parent
        2. Validate the payload
        3. Under the parent lock, check the sibling count
        4. Upload to the media store
        5. Demote the current primary when the new image is primary
        6. Persist the metadata row
        7. Delete the stored object once if steps 5-6 fail

        Raises:
            ParentNotFoundError: If the parent does not exist
            InvalidFileError: If the payload is rejected
            ValidationError: If the image type is not valid for this kind
            LimitExceededError: If the parent already holds the maximum
            LockTimeoutError: If the parent lock is busy
            RemoteStoreError: If the media store upload fails
            PersistenceError: If the metadata row could not be written
        """
        metadata = metadata or AssetMetadata()
        parent = self._require_parent(parent_id)
        normalized_type = self.validator.validate(file_data, content_type)
        asset_type = self.kind.parse_asset_type(metadata.asset_type)
        parent_key = self.parent_key(parent_id)

        logger.debug(
            "Starting image upload",
            extra={"parent_key": parent_key, "size": len(file_data)},
        )

        with self.lock.hold(parent_key):
            count = self.assets.count_by_parent(parent_key)
            if count >= self.kind.max_assets:
                logger.info(
                    "Image limit reached",
                    extra={"parent_key": parent_key, "count": count},
                )
                raise LimitExceededError(
                    message=f"Maximum {self.kind.max_assets} images per {self.kind.label}",
                    details={"max_images": self.kind.max_assets, "current": count},
                )

            result = self.store.upload(
                file_data=file_data,
                folder_path=self.kind.folder_path_for(parent),
                content_type=normalized_type,
            )

            try:
                asset = Asset(
                    parent_type=self.kind.name,
                    parent_id=parent_id,
                    url=result.secure_url,
                    external_id=result.external_id,
                    alt_text=metadata.alt_text,
                    caption=metadata.caption,
                    asset_type=asset_type,
                    display_order=metadata.display_order,
                    is_primary=metadata.is_primary,
                    format=result.format,
                    byte_size=result.byte_size,
                    width=result.width,
                    height=result.height,
                )
                if asset.is_primary:
                    self.assets.clear_primary_for_parent(parent_key)
                saved = self.assets.save(asset)

            except Exception as exc:
                logger.exception(
                    "Failed to persist image metadata",
                    extra={"parent_key": parent_key, "external_id": result.external_id},
                )
                self._delete_remote_best_effort(result.external_id)
                metrics.add_metric(name="UploadCompensations", unit=MetricUnit.Count, value=1)
                raise PersistenceError(
                    message="Unable to save image metadata",
                    error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                    details={"parent_id": parent_id},
                ) from exc

        metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)
        logger.info(
            "Image uploaded successfully",
            extra={"image_id": saved.asset_id, "parent_key": parent_key},
        )
        return AssetView.from_asset(saved)

    def list_assets(self, *, parent_id: str, asset_type: str | None = None) -> list[AssetView]:
        self._require_parent(parent_id)
        parent_key = self.parent_key(parent_id)

        if asset_type is None:
            assets = self.assets.find_all_by_parent(parent_key)
        else:
            assets = self.assets.find_all_by_parent_and_type(
                parent_key, self.kind.parse_asset_type(asset_type)
            )

        return [AssetView.from_asset(asset) for asset in assets]

    def get_asset(self, *, parent_id: str, asset_id: str) -> AssetView:
        return AssetView.from_asset(self._require_owned_asset(parent_id, asset_id))

    def update_asset(self, *, parent_id: str, asset_id: str, patch: AssetPatch) -> AssetView:
        """Apply a partial metadata update.

        The row is re-read under the parent lock so a concurrent primary
        change is never overwritten by a stale copy. Promoting an image to
        primary demotes its siblings. The stored object is never touched.
        """
        self._require_owned_asset(parent_id, asset_id)
        changes = patch.changes()
        if "asset_type" in changes:
            changes["asset_type"] = self.kind.parse_asset_type(changes["asset_type"])

        parent_key = self.parent_key(parent_id)
        with self.lock.hold(parent_key):
            current = self._require_owned_asset(parent_id, asset_id)
            if changes.get("is_primary") and not current.is_primary:
                self.assets.clear_primary_except(parent_key, asset_id)
            saved = self.assets.save(self._apply(current, changes))

        logger.info(
            "Image metadata updated",
            extra={"image_id": asset_id, "fields": sorted(changes)},
        )
        return AssetView.from_asset(saved)

    def delete_asset(self, *, parent_id: str, asset_id: str) -> None:
        """Remove the metadata row, then the stored object.

        The row is authoritative; a failed media store delete only leaves an
        orphaned object behind and is logged.
        """
        asset = self._require_owned_asset(parent_id, asset_id)

        self.assets.delete_by_id(asset_id)
        metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

        self._delete_remote_best_effort(asset.external_id)
        logger.info("Image deleted", extra={"image_id": asset_id, "parent_id": parent_id})

    def set_primary(self, *, parent_id: str, asset_id: str) -> AssetView:
        self._require_owned_asset(parent_id, asset_id)
        parent_key = self.parent_key(parent_id)

        with self.lock.hold(parent_key):
            current = self._require_owned_asset(parent_id, asset_id)
            self.assets.clear_primary_except(parent_key, asset_id)
            saved = current if current.is_primary else self.assets.save(
                self._apply(current, {"is_primary": True})
            )

        logger.info("Primary image set", extra={"image_id": asset_id, "parent_key": parent_key})
        return AssetView.from_asset(saved)

    def _require_parent(self, parent_id: str) -> Parent:
        parent = self.parents.resolve_parent(parent_type=self.kind.name, parent_id=parent_id)
        if parent is None:
            raise ParentNotFoundError(
                message=f"{self.kind.label.capitalize()} not found",
                details={"parent_id": parent_id},
            )
        return parent

    def _require_owned_asset(self, parent_id: str, asset_id: str) -> Asset:
        asset = self.assets.find_by_id(asset_id)
        if asset is None:
            raise AssetNotFoundError(message="Image not found", details={"image_id": asset_id})

        verify_ownership(asset, self.kind, parent_id)
        return asset

    @staticmethod
    def _apply(asset: Asset, changes: dict) -> Asset:
        return Asset.model_validate({**asset.model_dump(), **changes})

    def _delete_remote_best_effort(self, external_id: str) -> None:
        try:
            outcome = self.store.delete(external_id=external_id)
        except Exception:
            logger.warning(
                "Failed to delete stored image",
                extra={"external_id": external_id},
                exc_info=True,
            )
            metrics.add_metric(name="OrphanedObjects", unit=MetricUnit.Count, value=1)
            return

        logger.debug(
            "Stored image removed",
            extra={"external_id": external_id, "outcome": outcome.value},
        )


def build_asset_service(collection: str, settings: MediaSettings | None = None) -> AssetService:
    """Wire an AssetService for ``collection`` against the AWS implementations.

    Raises:
        NotFoundError: If the collection is not a known parent kind
    """
    kind = PARENT_KINDS.get(collection)
    if kind is None:
        raise NotFoundError(
            message="Resource not found",
            details={"collection": collection},
        )

    settings = settings or get_settings()

    return AssetService(
        dataclasses.replace(kind, max_assets=settings.max_assets_per_parent),
        assets=DynamoDBAssetRepository(),
        store=S3MediaStore(
            S3Adapter(
                max_attempts=settings.remote_max_attempts,
                connect_timeout=settings.remote_connect_timeout,
                read_timeout=settings.remote_read_timeout,
            ),
            base_folder=settings.base_folder,
            public_base_url=settings.public_base_url,
        ),
        parents=DynamoDBParentRepository(),
        lock=DynamoDBParentLock(
            lease_seconds=settings.lock_lease_seconds,
            wait_seconds=settings.lock_wait_seconds,
            poll_interval=settings.lock_poll_interval,
        ),
        validator=FileValidator(
            max_file_size=settings.max_file_size,
            allowed_content_types=settings.allowed_content_types,
        ),
    )
