"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.utils.response import ResponseBuilder

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Drops ``input``, ``ctx`` and ``url`` so caller payloads (such as the
    base64 file) are never echoed back.
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        msg = err.get("msg", "Invalid value").replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "base64" in msg_lower:
            msg = "File must be a valid Base64-encoded string"
        elif "field required" in msg_lower:
            msg = "This field is required"

        sanitized.append({"field": field, "message": msg})

    return sanitized


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Validate request data against a Pydantic model.

    Returns:
        (True, validated_model) on success
        (False, error_response) on validation failure
    """
    try:
        return True, model(**data)

    except ValidationError as exc:
        return (
            False,
            ResponseBuilder.validation_error(
                message="Invalid request payload",
                details={"errors": sanitize_validation_errors(exc.errors())},
                request_id=request_id,
                cors_origin=cors_origin,
            ),
        )


def path_parameter(event: dict[str, Any], name: str) -> str:
    """Read a required, non-blank path parameter.

    Raises:
        ValueError: If the parameter is missing or blank
    """
    value = (event.get("pathParameters") or {}).get(name)
    if not value or not str(value).strip():
        raise ValueError(f"Missing path parameter '{name}'")
    return str(value).strip()
