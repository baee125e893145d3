"""Pydantic models for image upload requests."""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.asset import AssetMetadata
from core.utils.constants import ALT_TEXT_MAX_LENGTH, CAPTION_MAX_LENGTH


class AssetUploadRequest(BaseModel):
    """Validation model for an image upload.

    Emptiness, size and content checks happen in the file validator so that
    they report their own error codes; here the file only has to be base64.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    content_type: str = Field(..., min_length=1, description="Declared MIME type")
    alt_text: str | None = Field(None, max_length=ALT_TEXT_MAX_LENGTH)
    caption: str | None = Field(None, max_length=CAPTION_MAX_LENGTH)
    asset_type: str | None = Field(None, description="Image category for the parent kind")
    display_order: int = Field(0, ge=0)
    is_primary: bool = False

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Invalid base64 encoded file") from exc
        return value

    def file_bytes(self) -> bytes:
        return base64.b64decode(self.file)

    def metadata(self) -> AssetMetadata:
        return AssetMetadata(
            alt_text=self.alt_text,
            caption=self.caption,
            asset_type=self.asset_type,
            display_order=self.display_order,
            is_primary=self.is_primary,
        )
