"""
Lambda handler responsible for marking an image as the parent's primary image.
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
    """Handle ``PUT /{collection}/{parent_id}/images/{image_id}/primary``."""
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received set primary request",
        extra={"path": event.get("path"), "request_id": request_id},
    )

    collection = path_parameter(event, "collection")
    parent_id = path_parameter(event, "parent_id")
    image_id = path_parameter(event, "image_id")

    try:
        view = build_asset_service(collection).set_primary(parent_id=parent_id, asset_id=image_id)
    except MediaServiceError as exc:
        logger.warning(
            "Set primary failed",
            extra={"image_id": image_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_service_error(exc, request_id=request_id)

    return ResponseBuilder.ok(view.model_dump(), request_id=request_id)
