"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    DEFAULT_REMOTE_CONNECT_TIMEOUT,
    DEFAULT_REMOTE_MAX_ATTEMPTS,
    DEFAULT_REMOTE_READ_TIMEOUT,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_MEDIA_S3_BUCKET_NAME,
)


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Mapping[str, str],
    ) -> Any: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (store-facing)."""

    bucket: str
    region: str | None
    endpoint_url: str | None

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client with bounded retries and timeouts
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_REMOTE_MAX_ATTEMPTS,
        connect_timeout: int = DEFAULT_REMOTE_CONNECT_TIMEOUT,
        read_timeout: int = DEFAULT_REMOTE_READ_TIMEOUT,
    ) -> None:
        """Create S3 client from environment configuration."""
        bucket_name = os.getenv(ENV_MEDIA_S3_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_MEDIA_S3_BUCKET_NAME} environment variable is not set")

        self.bucket = bucket_name
        self.region = os.getenv(ENV_AWS_REGION)
        self.endpoint_url = os.getenv(ENV_AWS_ENDPOINT_URL)
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            config=Config(
                retries={"max_attempts": max_attempts, "mode": "standard"},
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
            ),
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=self.bucket,
            Key=key,
        )

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self.bucket,
            Key=key,
        )
