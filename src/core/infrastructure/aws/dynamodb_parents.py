"""DynamoDB-backed lookup of projects and blog posts."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.asset import parent_key_for
from core.models.errors import PersistenceError
from core.models.parent import Parent
from core.repositories.parent_repository import ParentRepository
from core.utils.constants import ENV_MEDIA_PARENT_TABLE_NAME, ERROR_CODE_PARENT_LOOKUP_FAILED

logger = Logger(UTC=True)


class DynamoDBParentRepository(ParentRepository):
    """Reads parent rows keyed by ``<parent_type>#<parent_id>``."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_MEDIA_PARENT_TABLE_NAME)

    def resolve_parent(self, *, parent_type: str, parent_id: str) -> Parent | None:
        key = {"parent_key": parent_key_for(parent_type, parent_id)}

        try:
            response = self._db.get_item(key=key, consistent_read=True)
        except ClientError as exc:
            logger.error(
                "DynamoDB parent lookup failed",
                extra={"parent_type": parent_type, "parent_id": parent_id},
            )
            raise PersistenceError(
                message="Unable to look up parent",
                error_code=ERROR_CODE_PARENT_LOOKUP_FAILED,
                details={"parent_type": parent_type, "parent_id": parent_id},
            ) from exc

        item = response.get("Item")
        if not item:
            return None

        return Parent(
            parent_id=str(item.get("parent_id", parent_id)),
            slug=item["slug"],
            title=item.get("title"),
        )
