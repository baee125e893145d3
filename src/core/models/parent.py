"""Parent content models and the per-kind capability used by the asset service."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, StrictStr

from core.models.asset import BlogImageType, ProjectImageType
from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_INVALID_ASSET_TYPE, MAX_ASSETS_PER_PARENT


class Parent(BaseModel):
    """The facet of a project or blog post that the asset subsystem needs."""

    parent_id: StrictStr = Field(..., description="Parent identifier")
    slug: StrictStr = Field(..., min_length=1, description="URL slug, used as the storage folder")
    title: StrictStr | None = None


@dataclass(frozen=True)
class ParentKind:
    """Everything that differs between project images and blog post images."""

    name: str
    collection: str
    label: str
    asset_type_enum: type[Enum]
    default_asset_type: Enum
    folder_prefix: str | None = None
    max_assets: int = MAX_ASSETS_PER_PARENT

    def folder_path_for(self, parent: Parent) -> str:
        if self.folder_prefix:
            return f"{self.folder_prefix}/{parent.slug}"
        return parent.slug

    def parse_asset_type(self, value: str | None) -> str:
        """Normalize an asset type against this kind's closed set.

        Raises:
            ValidationError: If the value is not a member of the set
        """
        if value is None:
            return str(self.default_asset_type.value)

        normalized = value.strip().upper()
        allowed = [member.value for member in self.asset_type_enum]
        if normalized not in allowed:
            raise ValidationError(
                message=f"Invalid image type '{value}' for {self.label}",
                error_code=ERROR_CODE_INVALID_ASSET_TYPE,
                details={"allowed": allowed},
            )
        return normalized


PROJECT = ParentKind(
    name="project",
    collection="projects",
    label="project",
    asset_type_enum=ProjectImageType,
    default_asset_type=ProjectImageType.SCREENSHOT,
)

BLOG_POST = ParentKind(
    name="post",
    collection="posts",
    label="blog post",
    asset_type_enum=BlogImageType,
    default_asset_type=BlogImageType.INLINE,
    folder_prefix="blog",
)

PARENT_KINDS: dict[str, ParentKind] = {
    kind.collection: kind for kind in (PROJECT, BLOG_POST)
}
