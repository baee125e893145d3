"""Media Asset Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Image asset service for portfolio projects and blog posts "
    "using AWS Lambda, S3, and DynamoDB"
)

__all__ = ["handlers", "core"]
