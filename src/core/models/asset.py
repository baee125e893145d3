"""Asset metadata models shared by services, repositories and handlers."""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from core.utils.constants import ALT_TEXT_MAX_LENGTH, CAPTION_MAX_LENGTH

CLEARABLE_FIELDS = frozenset({"alt_text", "caption"})


class ProjectImageType(str, Enum):
    """Image categories available on portfolio projects."""

    SCREENSHOT = "SCREENSHOT"
    DIAGRAM = "DIAGRAM"
    BANNER = "BANNER"
    GALLERY = "GALLERY"


class BlogImageType(str, Enum):
    """Image categories available on blog posts."""

    FEATURED = "FEATURED"
    INLINE = "INLINE"
    GALLERY = "GALLERY"
    THUMBNAIL = "THUMBNAIL"


def parent_key_for(parent_type: str, parent_id: str) -> str:
    """Build the partition key that scopes assets to one parent."""
    return f"{parent_type}#{parent_id}"


class Asset(BaseModel):
    """One stored image: a metadata row pointing at a remote object."""

    model_config = ConfigDict(validate_assignment=True)

    asset_id: StrictStr | None = Field(None, description="Unique asset identifier")
    parent_type: StrictStr = Field(..., description="Owning parent kind (project, post)")
    parent_id: StrictStr = Field(..., description="Owning parent identifier")

    url: StrictStr = Field(..., description="Public retrieval URL")
    external_id: StrictStr = Field(..., description="Remote store object identifier")

    alt_text: StrictStr | None = Field(None, max_length=ALT_TEXT_MAX_LENGTH)
    caption: StrictStr | None = Field(None, max_length=CAPTION_MAX_LENGTH)
    asset_type: StrictStr = Field(..., description="Parent-specific image category")
    display_order: StrictInt = Field(0, ge=0, description="Presentation sort key")
    is_primary: StrictBool = Field(False, description="Featured/cover image flag")

    created_at: StrictStr | None = Field(None, description="ISO-8601 creation timestamp (UTC)")

    format: StrictStr | None = None
    byte_size: StrictInt | None = None
    width: StrictInt | None = None
    height: StrictInt | None = None

    @property
    def parent_key(self) -> str:
        return parent_key_for(self.parent_type, self.parent_id)

    def to_item(self) -> dict[str, Any]:
        """Serialize to a DynamoDB item (None values are omitted)."""
        item = self.model_dump(exclude_none=True)
        item["parent_key"] = self.parent_key
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Asset":
        """Build an asset from a DynamoDB item.

        The boto3 resource layer returns numbers as ``Decimal``.
        """
        data = {
            key: int(value) if isinstance(value, Decimal) else value
            for key, value in item.items()
            if key != "parent_key"
        }
        return cls(**data)


class UploadResult(BaseModel):
    """Result of storing a binary object in the media store."""

    url: StrictStr
    secure_url: StrictStr
    external_id: StrictStr
    format: StrictStr
    byte_size: StrictInt
    width: StrictInt | None = None
    height: StrictInt | None = None


class AssetView(BaseModel):
    """Asset representation returned by the API."""

    id: StrictStr = Field(..., description="Asset identifier")
    parent_type: StrictStr
    parent_id: StrictStr
    url: StrictStr
    external_id: StrictStr
    alt_text: StrictStr | None = None
    caption: StrictStr | None = None
    asset_type: StrictStr
    display_order: StrictInt
    is_primary: StrictBool
    created_at: StrictStr | None = None
    format: StrictStr | None = None
    byte_size: StrictInt | None = None
    width: StrictInt | None = None
    height: StrictInt | None = None

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetView":
        data = asset.model_dump(exclude={"asset_id"})
        return cls(id=asset.asset_id or "", **data)


class AssetMetadata(BaseModel):
    """Caller-supplied metadata for a new upload."""

    alt_text: str | None = Field(None, max_length=ALT_TEXT_MAX_LENGTH)
    caption: str | None = Field(None, max_length=CAPTION_MAX_LENGTH)
    asset_type: str | None = None
    display_order: int = Field(0, ge=0)
    is_primary: bool = False


class AssetPatch(BaseModel):
    """Partial metadata update.

    Only fields that were explicitly set are applied. An explicit None clears
    the optional text fields and is ignored for the others.
    """

    alt_text: str | None = Field(None, max_length=ALT_TEXT_MAX_LENGTH)
    caption: str | None = Field(None, max_length=CAPTION_MAX_LENGTH)
    asset_type: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_primary: bool | None = None

    def changes(self) -> dict[str, Any]:
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_FIELDS
        }
