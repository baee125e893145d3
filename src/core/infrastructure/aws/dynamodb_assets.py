"""DynamoDB-backed implementation of AssetRepository.

Table layout:
- partition key ``parent_key`` (``<parent_type>#<parent_id>``)
- sort key ``asset_id``
- GSI ``asset-id-index`` on ``asset_id`` for lookups by id alone

Per-parent reads (list, count, primary demotion) are strongly consistent
queries on the base table. Lookups by id go through the GSI and are then
confirmed with a consistent ``get_item``, so a deleted row is never
reported as present.
"""

import uuid
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.asset import Asset
from core.models.errors import AssetNotFoundError, PersistenceError
from core.repositories.asset_repository import AssetRepository
from core.utils.constants import (
    ASSET_ID_INDEX,
    ASSET_ID_PREFIX,
    ENV_MEDIA_ASSET_TABLE_NAME,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_METADATA_UPDATE_FAILED,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


def _sort_key(asset: Asset) -> tuple[int, str]:
    return asset.display_order, asset.created_at or ""


class DynamoDBAssetRepository(AssetRepository):
    """DynamoDB-backed asset metadata storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_MEDIA_ASSET_TABLE_NAME)

    @staticmethod
    def generate_asset_id() -> str:
        """Generate a unique asset identifier."""
        return f"{ASSET_ID_PREFIX}{uuid.uuid4().hex}"

    def save(self, asset: Asset) -> Asset:
        """Create a new row, or replace an existing one that still exists."""
        is_new = asset.asset_id is None
        if is_new:
            asset = asset.model_copy(
                update={"asset_id": self.generate_asset_id(), "created_at": utc_now_iso()}
            )

        condition = "attribute_not_exists(asset_id)" if is_new else "attribute_exists(asset_id)"
        error_code = ERROR_CODE_METADATA_CREATE_FAILED if is_new else ERROR_CODE_METADATA_UPDATE_FAILED

        logger.debug(
            "Saving asset",
            extra={"asset_id": asset.asset_id, "parent_key": asset.parent_key, "new": is_new},
        )

        try:
            self._db.put_item(item=asset.to_item(), condition_expression=condition)

        except ClientError as exc:
            if not is_new and _is_conditional_failure(exc):
                raise AssetNotFoundError(
                    message="Image not found",
                    details={"image_id": asset.asset_id},
                ) from exc

            logger.error("DynamoDB put_item failed", extra={"asset_id": asset.asset_id})
            raise PersistenceError(
                message="Unable to save image metadata at this time",
                error_code=error_code,
                details={"image_id": asset.asset_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error saving asset")
            raise PersistenceError(
                message="Unable to save image metadata at this time",
                error_code=error_code,
                details={"image_id": asset.asset_id},
            ) from exc

        logger.info("Asset saved", extra={"asset_id": asset.asset_id, "new": is_new})
        return asset

    def find_by_id(self, asset_id: str) -> Asset | None:
        logger.debug("Fetching asset", extra={"asset_id": asset_id})

        try:
            response = self._db.query(
                IndexName=ASSET_ID_INDEX,
                KeyConditionExpression=Key("asset_id").eq(asset_id),
                Limit=1,
            )
            items = response.get("Items", [])
            if not items:
                return None

            # The index is eventually consistent; confirm against the base table.
            key = {"parent_key": items[0]["parent_key"], "asset_id": asset_id}
            item = self._db.get_item(key=key, consistent_read=True).get("Item")

        except ClientError as exc:
            logger.error("DynamoDB asset lookup failed", extra={"asset_id": asset_id})
            raise PersistenceError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": asset_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching asset")
            raise PersistenceError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": asset_id},
            ) from exc

        return Asset.from_item(item) if item else None

    def find_all_by_parent(self, parent_key: str) -> list[Asset]:
        assets = [Asset.from_item(item) for item in self._query_parent(parent_key)]
        return sorted(assets, key=_sort_key)

    def find_all_by_parent_and_type(self, parent_key: str, asset_type: str) -> list[Asset]:
        items = self._query_parent(parent_key, filter_expression=Attr("asset_type").eq(asset_type))
        return sorted((Asset.from_item(item) for item in items), key=_sort_key)

    def count_by_parent(self, parent_key: str) -> int:
        logger.debug("Counting assets", extra={"parent_key": parent_key})

        query_kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key("parent_key").eq(parent_key),
            "Select": "COUNT",
            "ConsistentRead": True,
        }
        total = 0

        try:
            while True:
                response = self._db.query(**query_kwargs)
                total += int(response.get("Count", 0))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except Exception as exc:
            logger.exception("Failed to count assets", extra={"parent_key": parent_key})
            raise PersistenceError(
                message="Unable to count images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"parent_key": parent_key},
            ) from exc

        return total

    def clear_primary_for_parent(self, parent_key: str) -> list[str]:
        return self._clear_primary(parent_key, keep_id=None)

    def clear_primary_except(self, parent_key: str, keep_id: str) -> list[str]:
        return self._clear_primary(parent_key, keep_id=keep_id)

    def delete_by_id(self, asset_id: str) -> None:
        asset = self.find_by_id(asset_id)
        if asset is None:
            raise AssetNotFoundError(message="Image not found", details={"image_id": asset_id})

        logger.debug("Removing asset", extra={"asset_id": asset_id})

        try:
            self._db.delete_item(
                key={"parent_key": asset.parent_key, "asset_id": asset_id},
                condition_expression="attribute_exists(asset_id)",
            )

        except ClientError as exc:
            if _is_conditional_failure(exc):
                raise AssetNotFoundError(
                    message="Image not found",
                    details={"image_id": asset_id},
                ) from exc

            logger.error("DynamoDB delete_item failed", extra={"asset_id": asset_id})
            raise PersistenceError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": asset_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing asset")
            raise PersistenceError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": asset_id},
            ) from exc

        logger.info("Asset removed", extra={"asset_id": asset_id})

    def _clear_primary(self, parent_key: str, *, keep_id: str | None) -> list[str]:
        """Demote every primary sibling except ``keep_id``.

        Rows deleted concurrently are skipped rather than recreated.
        """
        primaries = self._query_parent(parent_key, filter_expression=Attr("is_primary").eq(True))
        demoted: list[str] = []

        for item in primaries:
            asset_id = item["asset_id"]
            if asset_id == keep_id:
                continue

            try:
                self._db.update_item(
                    key={"parent_key": parent_key, "asset_id": asset_id},
                    update_expression="SET is_primary = :false",
                    condition_expression="attribute_exists(asset_id)",
                    expression_attribute_values={":false": False},
                )
            except ClientError as exc:
                if _is_conditional_failure(exc):
                    continue

                logger.error("DynamoDB update_item failed", extra={"asset_id": asset_id})
                raise PersistenceError(
                    message="Unable to update primary image",
                    error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                    details={"parent_key": parent_key},
                ) from exc

            except Exception as exc:
                logger.exception("Unexpected error clearing primary flag")
                raise PersistenceError(
                    message="Unable to update primary image",
                    error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                    details={"parent_key": parent_key},
                ) from exc

            demoted.append(asset_id)

        logger.info(
            "Primary flag cleared",
            extra={"parent_key": parent_key, "demoted": demoted, "kept": keep_id},
        )
        return demoted

    def _query_parent(
        self,
        parent_key: str,
        *,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        query_kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key("parent_key").eq(parent_key),
            "ConsistentRead": True,
        }
        if filter_expression is not None:
            query_kwargs["FilterExpression"] = filter_expression

        items: list[dict[str, Any]] = []

        try:
            while True:
                response = self._db.query(**query_kwargs)
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except ClientError as exc:
            logger.error("DynamoDB query failed", extra={"parent_key": parent_key})
            raise PersistenceError(
                message="Unable to list images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"parent_key": parent_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing assets")
            raise PersistenceError(
                message="Unable to list images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"parent_key": parent_key},
            ) from exc

        return items
