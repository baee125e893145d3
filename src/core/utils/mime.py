"""Magic-byte signatures for the image formats the service accepts."""

from collections.abc import Mapping

MAGIC_BYTES: Mapping[str, bytes] = {
    "image/jpeg": b"\xff\xd8\xff",
    "image/png": b"\x89PNG",
    "image/gif": b"GIF",
    "image/webp": b"RIFF",
}


def matches_signature(file_data: bytes, mime_type: str) -> bool:
    """Return True if the payload starts with the signature for ``mime_type``."""
    signature = MAGIC_BYTES.get(mime_type)
    if signature is None:
        return False
    return file_data.startswith(signature)


def detect_mime_type(file_data: bytes) -> str | None:
    """Detect the image type from leading bytes, or None if unrecognized."""
    for mime, signature in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    return None
