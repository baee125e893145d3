"""In-memory collaborators for AssetService tests."""

import dataclasses
import threading
import uuid
from typing import Any

import pytest

from core.infrastructure.local_lock import InProcessParentLock
from core.models.asset import Asset, UploadResult
from core.models.errors import AssetNotFoundError, PersistenceError, RemoteStoreError
from core.models.parent import BLOG_POST, PROJECT, Parent
from core.repositories.asset_repository import AssetRepository
from core.repositories.parent_repository import ParentRepository
from core.repositories.storage_repository import DeleteOutcome, MediaStoreRepository
from core.services.asset_service import AssetService
from core.utils.time import utc_now_iso


class InMemoryAssetRepository(AssetRepository):
    def __init__(self) -> None:
        self.rows: dict[str, Asset] = {}
        self.fail_save = False
        self.fail_clear = False
        self._guard = threading.Lock()

    def save(self, asset: Asset) -> Asset:
        if self.fail_save:
            raise PersistenceError(message="save failed")

        with self._guard:
            if asset.asset_id is None:
                asset = asset.model_copy(
                    update={"asset_id": f"img_{uuid.uuid4().hex}", "created_at": utc_now_iso()}
                )
            elif asset.asset_id not in self.rows:
                raise AssetNotFoundError(message="Image not found")
            self.rows[asset.asset_id] = asset
        return asset

    def find_by_id(self, asset_id: str) -> Asset | None:
        return self.rows.get(asset_id)

    def find_all_by_parent(self, parent_key: str) -> list[Asset]:
        assets = [a for a in self.rows.values() if a.parent_key == parent_key]
        return sorted(assets, key=lambda a: (a.display_order, a.created_at or ""))

    def find_all_by_parent_and_type(self, parent_key: str, asset_type: str) -> list[Asset]:
        return [a for a in self.find_all_by_parent(parent_key) if a.asset_type == asset_type]

    def count_by_parent(self, parent_key: str) -> int:
        return len(self.find_all_by_parent(parent_key))

    def clear_primary_for_parent(self, parent_key: str) -> list[str]:
        return self.clear_primary_except(parent_key, keep_id=None)

    def clear_primary_except(self, parent_key: str, keep_id: str | None) -> list[str]:
        if self.fail_clear:
            raise PersistenceError(message="clear failed")

        demoted = []
        for asset in self.find_all_by_parent(parent_key):
            if asset.is_primary and asset.asset_id != keep_id:
                self.rows[asset.asset_id] = asset.model_copy(update={"is_primary": False})
                demoted.append(asset.asset_id)
        return demoted

    def delete_by_id(self, asset_id: str) -> None:
        if self.rows.pop(asset_id, None) is None:
            raise AssetNotFoundError(message="Image not found")

    def primaries(self, parent_key: str) -> list[Asset]:
        return [a for a in self.find_all_by_parent(parent_key) if a.is_primary]


class FakeMediaStore(MediaStoreRepository):
    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.deletes: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, *, file_data: bytes, folder_path: str, content_type: str) -> UploadResult:
        if self.fail_upload:
            raise RemoteStoreError(message="upload failed")

        external_id = f"portfolio/{folder_path}/{uuid.uuid4().hex}"
        self.uploads.append(
            {"folder_path": folder_path, "content_type": content_type, "external_id": external_id}
        )
        return UploadResult(
            url=f"http://cdn.test/{external_id}",
            secure_url=f"https://cdn.test/{external_id}",
            external_id=external_id,
            format=content_type.split("/")[1],
            byte_size=len(file_data),
        )

    def delete(self, *, external_id: str) -> DeleteOutcome:
        self.deletes.append(external_id)
        if self.fail_delete:
            raise RemoteStoreError(message="delete failed")
        return DeleteOutcome.OK


class FakeParentRepository(ParentRepository):
    def __init__(self, parents: dict[tuple[str, str], Parent] | None = None) -> None:
        self.parents = parents or {}

    def resolve_parent(self, *, parent_type: str, parent_id: str) -> Parent | None:
        return self.parents.get((parent_type, parent_id))


@pytest.fixture
def assets():
    return InMemoryAssetRepository()


@pytest.fixture
def store():
    return FakeMediaStore()


@pytest.fixture
def parents():
    return FakeParentRepository(
        {
            ("project", "p1"): Parent(parent_id="p1", slug="my-project"),
            ("project", "p2"): Parent(parent_id="p2", slug="other-project"),
            ("post", "b1"): Parent(parent_id="b1", slug="hello-world"),
        }
    )


@pytest.fixture
def lock():
    return InProcessParentLock(wait_seconds=2.0)


@pytest.fixture
def make_service(assets, store, parents, lock):
    def _make(kind=PROJECT, *, max_assets: int | None = None) -> AssetService:
        if max_assets is not None:
            kind = dataclasses.replace(kind, max_assets=max_assets)
        return AssetService(kind, assets=assets, store=store, parents=parents, lock=lock)

    return _make


@pytest.fixture
def project_service(make_service):
    return make_service(PROJECT)


@pytest.fixture
def post_service(make_service):
    return make_service(BLOG_POST)


@pytest.fixture
def png_payload() -> bytes:
    """50 KB payload carrying the PNG signature."""
    header = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])
    return header + b"\x00" * (50 * 1024 - len(header))
