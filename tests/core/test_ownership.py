import pytest

from core.models.asset import Asset
from core.models.errors import OwnershipMismatchError
from core.models.parent import BLOG_POST, PROJECT
from core.services.ownership import verify_ownership


@pytest.fixture
def asset() -> Asset:
    return Asset(
        asset_id="img_1",
        parent_type="project",
        parent_id="p1",
        url="https://cdn.test/a.png",
        external_id="k",
        asset_type="SCREENSHOT",
    )


def test_owner_passes(asset) -> None:
    verify_ownership(asset, PROJECT, "p1")


def test_other_parent(asset) -> None:
    with pytest.raises(OwnershipMismatchError) as exc:
        verify_ownership(asset, PROJECT, "p2")

    assert exc.value.details == {"image_id": "img_1", "parent_id": "p2"}


def test_same_id_other_kind(asset) -> None:
    with pytest.raises(OwnershipMismatchError):
        verify_ownership(asset, BLOG_POST, "p1")
