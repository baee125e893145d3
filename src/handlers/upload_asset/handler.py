"""
Lambda handler responsible for uploading an image to a project or blog post.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import MediaServiceError
from core.services.asset_service import build_asset_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import path_parameter, validate_request

from .models import AssetUploadRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /{collection}/{parent_id}/images``.

    Expected API Gateway event structure:
    {
        "pathParameters": {"collection": "projects", "parent_id": "..."},
        "body": "{\"file\": \"<base64>\", \"content_type\": \"image/png\", ...}"
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        201 with the created image, or an error response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    collection = path_parameter(event, "collection")
    parent_id = path_parameter(event, "parent_id")

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Invalid JSON body received", extra={"request_id": request_id})
        return ResponseBuilder.bad_request(message="Invalid JSON body", request_id=request_id)

    ok, result = validate_request(AssetUploadRequest, body, request_id=request_id)
    if not ok:
        logger.warning("Request validation failed", extra={"request_id": request_id})
        return result

    request: AssetUploadRequest = result

    try:
        service = build_asset_service(collection)
        view = service.upload_asset(
            parent_id=parent_id,
            file_data=request.file_bytes(),
            content_type=request.content_type,
            metadata=request.metadata(),
        )
    except MediaServiceError as exc:
        logger.warning(
            "Image upload rejected",
            extra={"parent_id": parent_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_service_error(exc, request_id=request_id)

    return ResponseBuilder.created(view.model_dump(), request_id=request_id)
