"""
Lambda handler responsible for updating image metadata.
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

from .models import AssetUpdateRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``PUT /{collection}/{parent_id}/images/{image_id}``.

    Only the fields present in the body change. Setting ``is_primary`` to
    true demotes the parent's current primary image.
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image update request",
        extra={"path": event.get("path"), "request_id": request_id},
    )

    collection = path_parameter(event, "collection")
    parent_id = path_parameter(event, "parent_id")
    image_id = path_parameter(event, "image_id")

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return ResponseBuilder.bad_request(message="Invalid JSON body", request_id=request_id)

    ok, result = validate_request(AssetUpdateRequest, body, request_id=request_id)
    if not ok:
        logger.warning("Request validation failed", extra={"request_id": request_id})
        return result

    request: AssetUpdateRequest = result

    try:
        view = build_asset_service(collection).update_asset(
            parent_id=parent_id,
            asset_id=image_id,
            patch=request.patch(),
        )
    except MediaServiceError as exc:
        logger.warning(
            "Image update failed",
            extra={"image_id": image_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_service_error(exc, request_id=request_id)

    return ResponseBuilder.ok(view.model_dump(), request_id=request_id)
