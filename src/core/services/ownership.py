"""Ownership checks for per-asset operations."""

from core.models.asset import Asset
from core.models.errors import OwnershipMismatchError
from core.models.parent import ParentKind


def verify_ownership(asset: Asset, kind: ParentKind, expected_parent_id: str) -> None:
    """Ensure ``asset`` belongs to the parent named in the request path.

    Raises:
        OwnershipMismatchError: If the asset belongs to another parent
    """
    if asset.parent_type != kind.name or asset.parent_id != expected_parent_id:
        raise OwnershipMismatchError(
            message=f"Image does not belong to specified {kind.label}",
            details={"image_id": asset.asset_id, "parent_id": expected_parent_id},
        )
