import base64
import json
from http import HTTPStatus
from unittest.mock import patch

from core.infrastructure.aws.dynamodb_assets import DynamoDBAssetRepository
from core.models.errors import PersistenceError
from handlers.upload_asset.handler import handler


def body_of(resp):
    return json.loads(resp["body"])


def upload_event(make_event, file_b64, **overrides):
    body = {"file": file_b64, "content_type": "image/png"}
    body.update(overrides.pop("body", {}))
    return make_event("POST", body=body, **overrides)


class TestUploadHandler:
    def test_upload_success(self, project_parent, make_event, sample_png_b64, lambda_context, s3_keys):
        event = upload_event(
            make_event,
            sample_png_b64,
            body={"alt_text": "Home page", "is_primary": True, "asset_type": "banner"},
        )

        resp = handler(event, lambda_context)
        body = body_of(resp)

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert body["id"].startswith("img_")
        assert body["is_primary"] is True
        assert body["asset_type"] == "BANNER"
        assert body["display_order"] == 0
        assert body["width"] == 2 and body["height"] == 3
        assert body["request_id"] == "test-request-id"
        assert s3_keys() == [body["external_id"]]
        assert body["external_id"].startswith("portfolio/my-project/")

    def test_blog_post_folder(self, post_parent, make_event, sample_png_b64, lambda_context):
        event = upload_event(make_event, sample_png_b64, collection="posts", parent_id="b1")

        body = body_of(handler(event, lambda_context))

        assert body["external_id"].startswith("portfolio/blog/hello-world/")
        assert body["asset_type"] == "INLINE"

    def test_invalid_json(self, project_parent, make_event, lambda_context):
        event = make_event("POST")
        event["body"] = "{not json"

        assert handler(event, lambda_context)["statusCode"] == HTTPStatus.BAD_REQUEST

    def test_invalid_base64_is_422(self, project_parent, make_event, lambda_context):
        resp = handler(upload_event(make_event, "!!!not-base64!!!"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
        assert body_of(resp)["error"] == "VALIDATION_FAILED"

    def test_alt_text_too_long_is_422(self, project_parent, make_event, sample_png_b64, lambda_context):
        event = upload_event(make_event, sample_png_b64, body={"alt_text": "x" * 256})

        assert handler(event, lambda_context)["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY

    def test_content_mismatch(self, project_parent, make_event, lambda_context, s3_keys):
        file_b64 = base64.b64encode(b"\x00\x00\x00\x00" * 16).decode()
        event = upload_event(make_event, file_b64, body={"content_type": "image/jpeg"})

        resp = handler(event, lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body_of(resp)["error"] == "FILE_CONTENT_MISMATCH"
        assert s3_keys() == []

    def test_empty_file(self, project_parent, make_event, lambda_context):
        resp = handler(upload_event(make_event, ""), lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body_of(resp)["error"] == "FILE_EMPTY"

    def test_unknown_parent(self, project_parent, make_event, sample_png_b64, lambda_context):
        resp = handler(upload_event(make_event, sample_png_b64, parent_id="nope"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.NOT_FOUND
        assert body_of(resp)["error"] == "PARENT_NOT_FOUND"

    def test_unknown_collection(self, project_parent, make_event, sample_png_b64, lambda_context):
        resp = handler(upload_event(make_event, sample_png_b64, collection="videos"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.NOT_FOUND

    def test_limit(self, project_parent, make_event, sample_png_b64, lambda_context, monkeypatch):
        monkeypatch.setenv("MEDIA_MAX_ASSETS_PER_PARENT", "1")
        event = upload_event(make_event, sample_png_b64)

        assert handler(event, lambda_context)["statusCode"] == HTTPStatus.CREATED
        resp = handler(event, lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body_of(resp)["error"] == "MAX_IMAGES"

    def test_persist_failure_removes_uploaded_object(
        self, project_parent, make_event, sample_png_b64, lambda_context, s3_keys
    ):
        with patch.object(
            DynamoDBAssetRepository,
            "save",
            side_effect=PersistenceError(message="boom"),
        ):
            resp = handler(upload_event(make_event, sample_png_b64), lambda_context)

        body = body_of(resp)
        assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
        assert body["error"] == "METADATA_CREATE_FAILED"
        assert "details" not in body
        assert s3_keys() == []

    def test_options_preflight(self, make_event, lambda_context):
        resp = handler(make_event("OPTIONS"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.NO_CONTENT
