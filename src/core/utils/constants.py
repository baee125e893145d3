"""Global constants used throughout the application.

Error codes, upload constraints, metadata limits and environment variable
names live here so that handlers, services and infrastructure agree on them.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_ASSET_TYPE = "INVALID_ASSET_TYPE"

# File Errors
ERROR_CODE_FILE_EMPTY = "FILE_EMPTY"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_TOO_LARGE"
ERROR_CODE_INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
ERROR_CODE_FILE_CONTENT_MISMATCH = "FILE_CONTENT_MISMATCH"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_PARENT_NOT_FOUND = "PARENT_NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Invariant Errors
ERROR_CODE_OWNERSHIP_MISMATCH = "IMAGE_OWNERSHIP_MISMATCH"
ERROR_CODE_MAX_IMAGES_EXCEEDED = "MAX_IMAGES"
ERROR_CODE_CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

# Remote Store Errors
ERROR_CODE_REMOTE_STORE = "REMOTE_STORE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Metadata / DynamoDB Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_UPDATE_FAILED = "METADATA_UPDATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_PARENT_LOOKUP_FAILED = "PARENT_LOOKUP_FAILED"
ERROR_CODE_LOCK_FAILED = "LOCK_OPERATION_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
MIN_SIGNATURE_LENGTH = 4

MIME_TYPE_EXTENSION_MAP: Final[dict[str, str]] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())


# ============================================================================
# Asset Constraints
# ============================================================================

MAX_ASSETS_PER_PARENT = 20
ALT_TEXT_MAX_LENGTH = 255
CAPTION_MAX_LENGTH = 500
ASSET_ID_PREFIX = "img_"
DEFAULT_BASE_FOLDER = "portfolio"

# ============================================================================
# Locking
# ============================================================================

DEFAULT_LOCK_LEASE_SECONDS = 180
DEFAULT_LOCK_WAIT_SECONDS = 15.0
DEFAULT_LOCK_POLL_INTERVAL = 0.2

# ============================================================================
# Remote Store Client
# ============================================================================

DEFAULT_REMOTE_MAX_ATTEMPTS = 3
DEFAULT_REMOTE_CONNECT_TIMEOUT = 5
DEFAULT_REMOTE_READ_TIMEOUT = 30

# ============================================================================
# DynamoDB Indexes
# ============================================================================

ASSET_ID_INDEX = "asset-id-index"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
DEFAULT_CONTENT_TYPE = "application/json"
METRICS_NAMESPACE = "MediaAssetService"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_MEDIA_S3_BUCKET_NAME = "MEDIA_S3_BUCKET_NAME"
ENV_MEDIA_ASSET_TABLE_NAME = "MEDIA_ASSET_TABLE_NAME"
ENV_MEDIA_PARENT_TABLE_NAME = "MEDIA_PARENT_TABLE_NAME"
ENV_MEDIA_LOCK_TABLE_NAME = "MEDIA_LOCK_TABLE_NAME"

# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
