"""Lease-based per-parent lock stored in DynamoDB.

Each lock is one item keyed by ``lock_key``. Acquisition is a conditional
put that succeeds when no item exists or the existing lease has expired,
so a crashed holder blocks others for at most one lease period.
"""

import time
import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import LockTimeoutError, PersistenceError
from core.repositories.lock_repository import ParentLock
from core.utils.constants import (
    DEFAULT_LOCK_LEASE_SECONDS,
    DEFAULT_LOCK_POLL_INTERVAL,
    DEFAULT_LOCK_WAIT_SECONDS,
    ENV_MEDIA_LOCK_TABLE_NAME,
    ERROR_CODE_LOCK_FAILED,
)
from core.utils.time import epoch_seconds

logger = Logger(UTC=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class DynamoDBParentLock(ParentLock):
    """Cross-process lock usable from concurrent Lambda invocations."""

    def __init__(
        self,
        adapter: DynamoDBAdapterProtocol | None = None,
        *,
        lease_seconds: int = DEFAULT_LOCK_LEASE_SECONDS,
        wait_seconds: float = DEFAULT_LOCK_WAIT_SECONDS,
        poll_interval: float = DEFAULT_LOCK_POLL_INTERVAL,
    ) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_MEDIA_LOCK_TABLE_NAME)
        self._lease_seconds = lease_seconds
        self._wait_seconds = wait_seconds
        self._poll_interval = poll_interval

    def acquire(self, key: str) -> str:
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self._wait_seconds

        while True:
            if self._try_acquire(key, token):
                logger.debug("Lock acquired", extra={"lock_key": key})
                return token

            if time.monotonic() >= deadline:
                logger.warning("Timed out waiting for lock", extra={"lock_key": key})
                raise LockTimeoutError(
                    message="Another change to these images is in progress, retry shortly",
                    details={"lock_key": key},
                )

            time.sleep(self._poll_interval)

    def release(self, key: str, token: str) -> None:
        try:
            self._db.delete_item(
                key={"lock_key": key},
                condition_expression="#owner = :token",
                expression_attribute_names={"#owner": "owner"},
                expression_attribute_values={":token": token},
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED:
                # Lease expired and another holder took over.
                logger.warning("Lock no longer owned at release", extra={"lock_key": key})
                return

            logger.error("Failed to release lock", extra={"lock_key": key})
            raise PersistenceError(
                message="Unable to release lock",
                error_code=ERROR_CODE_LOCK_FAILED,
                details={"lock_key": key},
            ) from exc

        logger.debug("Lock released", extra={"lock_key": key})

    def _try_acquire(self, key: str, token: str) -> bool:
        now = epoch_seconds()

        try:
            self._db.put_item(
                item={"lock_key": key, "owner": token, "expires_at": now + self._lease_seconds},
                condition_expression="attribute_not_exists(lock_key) OR expires_at < :now",
                expression_attribute_values={":now": now},
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED:
                return False

            logger.error("Failed to acquire lock", extra={"lock_key": key})
            raise PersistenceError(
                message="Unable to acquire lock",
                error_code=ERROR_CODE_LOCK_FAILED,
                details={"lock_key": key},
            ) from exc

        return True
