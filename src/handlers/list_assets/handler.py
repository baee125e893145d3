"""
Lambda handler responsible for listing the images of a project or blog post.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import MediaServiceError
from core.services.asset_service import build_asset_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import path_parameter

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``GET /{collection}/{parent_id}/images[?type=...]``.

    Images are returned in display order; ``type`` narrows the list to one
    image category of the parent kind.
    """
    request_id = getattr(context, "aws_request_id", None)
    params = event.get("queryStringParameters") or {}
    logger.info(
        "Received image list request",
        extra={"path": event.get("path"), "query_params": params, "request_id": request_id},
    )

    collection = path_parameter(event, "collection")
    parent_id = path_parameter(event, "parent_id")
    asset_type = (params.get("type") or "").strip() or None

    try:
        views = build_asset_service(collection).list_assets(
            parent_id=parent_id,
            asset_type=asset_type,
        )
    except MediaServiceError as exc:
        logger.warning(
            "Image list failed",
            extra={"parent_id": parent_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_service_error(exc, request_id=request_id)

    return ResponseBuilder.ok(
        {"items": [view.model_dump() for view in views], "count": len(views)},
        request_id=request_id,
    )
