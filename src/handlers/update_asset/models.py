"""Pydantic models for image metadata updates."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.models.asset import AssetPatch
from core.utils.constants import ALT_TEXT_MAX_LENGTH, CAPTION_MAX_LENGTH


class AssetUpdateRequest(BaseModel):
    """Validation model for a partial metadata update."""

    model_config = ConfigDict(str_strip_whitespace=True)

    alt_text: str | None = Field(None, max_length=ALT_TEXT_MAX_LENGTH)
    caption: str | None = Field(None, max_length=CAPTION_MAX_LENGTH)
    asset_type: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_primary: bool | None = None

    @model_validator(mode="after")
    def require_a_change(self) -> "AssetUpdateRequest":
        if not self.patch().changes():
            raise ValueError("At least one field must be provided")
        return self

    def patch(self) -> AssetPatch:
        return AssetPatch(**self.model_dump(exclude_unset=True))
