import json
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def make_event():
    """
    Build an API Gateway proxy event.

    Usage:
        make_event("POST", collection="projects", parent_id="p1", body={...})
    """

    def _make(
        method: str,
        *,
        collection: str = "projects",
        parent_id: str = "p1",
        image_id: str | None = None,
        body: dict[str, Any] | None = None,
        query: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        path_params = {"collection": collection, "parent_id": parent_id}
        path = f"/{collection}/{parent_id}/images"
        if image_id is not None:
            path_params["image_id"] = image_id
            path = f"{path}/{image_id}"

        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": path_params,
            "queryStringParameters": query,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(body) if body is not None else None,
        }

    return _make


@pytest.fixture
def project_parent(aws_stack, put_parent):
    return put_parent("project", "p1", slug="my-project", title="My Project")


@pytest.fixture
def post_parent(aws_stack, put_parent):
    return put_parent("post", "b1", slug="hello-world", title="Hello World")


@pytest.fixture
def seed_asset(sample_png):
    """
    Upload an image through the wired service.

    Usage:
        view = seed_asset("projects", "p1", is_primary=True)
    """
    from core.models.asset import AssetMetadata
    from core.services.asset_service import build_asset_service

    def _seed(collection: str = "projects", parent_id: str = "p1", **metadata: Any):
        return build_asset_service(collection).upload_asset(
            parent_id=parent_id,
            file_data=sample_png,
            content_type="image/png",
            metadata=AssetMetadata(**metadata),
        )

    return _seed

