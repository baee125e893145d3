"""
Pytest configuration and fixtures for media asset service tests.
Provides AWS mocking, DynamoDB tables, an S3 bucket and sample payloads.
"""

import base64
import io
import os
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from moto import mock_aws
from PIL import Image

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("MEDIA_S3_BUCKET_NAME", "test-media-bucket")
os.environ.setdefault("MEDIA_ASSET_TABLE_NAME", "test-media-assets")
os.environ.setdefault("MEDIA_PARENT_TABLE_NAME", "test-media-parents")
os.environ.setdefault("MEDIA_LOCK_TABLE_NAME", "test-media-locks")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "media-asset-service")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "MediaAssetService")

# Ensure a local endpoint override from the shell never leaks into moto.
os.environ.pop("AWS_ENDPOINT_URL", None)

from core.utils.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def assets_table(dynamodb_resource):
    """Asset table keyed by parent, with the id lookup index."""
    return dynamodb_resource.create_table(
        TableName=os.environ["MEDIA_ASSET_TABLE_NAME"],
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[
            {"AttributeName": "parent_key", "KeyType": "HASH"},
            {"AttributeName": "asset_id", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "parent_key", "AttributeType": "S"},
            {"AttributeName": "asset_id", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "asset-id-index",
                "KeySchema": [{"AttributeName": "asset_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )


@pytest.fixture(scope="function")
def parents_table(dynamodb_resource):
    return dynamodb_resource.create_table(
        TableName=os.environ["MEDIA_PARENT_TABLE_NAME"],
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "parent_key", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "parent_key", "AttributeType": "S"}],
    )


@pytest.fixture(scope="function")
def locks_table(dynamodb_resource):
    return dynamodb_resource.create_table(
        TableName=os.environ["MEDIA_LOCK_TABLE_NAME"],
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "lock_key", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "lock_key", "AttributeType": "S"}],
    )


@pytest.fixture
def put_parent(parents_table) -> Callable[..., dict[str, Any]]:
    """
    Helper to register a parent row.

    Usage:
        put_parent("project", "p1", slug="my-project")
    """

    def _put(parent_type: str, parent_id: str, *, slug: str, title: str | None = None):
        item = {
            "parent_key": f"{parent_type}#{parent_id}",
            "parent_id": parent_id,
            "slug": slug,
        }
        if title:
            item["title"] = title
        parents_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    s3_client.create_bucket(Bucket=os.environ["MEDIA_S3_BUCKET_NAME"])
    return s3_client


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    def _get(key: str) -> bytes:
        response = s3_client.get_object(Bucket=os.environ["MEDIA_S3_BUCKET_NAME"], Key=key)
        return response["Body"].read()

    return _get


@pytest.fixture
def s3_keys(s3_client) -> Callable[[], list[str]]:
    def _keys() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=os.environ["MEDIA_S3_BUCKET_NAME"])
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _keys


@pytest.fixture
def aws_stack(assets_table, parents_table, locks_table, s3_bucket):
    """All tables and the bucket used by the wired service."""
    return {
        "assets": assets_table,
        "parents": parents_table,
        "locks": locks_table,
        "s3": s3_bucket,
    }


def _encode_image(fmt: str, size: tuple[int, int] = (2, 3)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def sample_png() -> bytes:
    """2x3 PNG."""
    return _encode_image("PNG")


@pytest.fixture
def sample_jpeg() -> bytes:
    """2x3 JPEG."""
    return _encode_image("JPEG")


@pytest.fixture
def sample_png_b64(sample_png) -> str:
    return base64.b64encode(sample_png).decode("utf-8")
