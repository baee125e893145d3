"""Abstract contract for asset metadata persistence."""

from abc import ABC, abstractmethod

from core.models.asset import Asset


class AssetRepository(ABC):
    """Contract for storing and retrieving asset metadata rows.

    Operations scoped to a parent take the ``parent_key`` built by
    ``parent_key_for(parent_type, parent_id)``.
    """

    @abstractmethod
    def save(self, asset: Asset) -> Asset:
        """Create or replace an asset row.

        The first save assigns ``asset_id`` and ``created_at``.

        Raises:
            AssetNotFoundError: If an existing asset was deleted meanwhile
            PersistenceError: If the write fails
        """

    @abstractmethod
    def find_by_id(self, asset_id: str) -> Asset | None:
        """Fetch a single asset, or None if it does not exist."""

    @abstractmethod
    def find_all_by_parent(self, parent_key: str) -> list[Asset]:
        """List a parent's assets ordered by display order ascending."""

    @abstractmethod
    def find_all_by_parent_and_type(self, parent_key: str, asset_type: str) -> list[Asset]:
        """List a parent's assets of one type, ordered by display order."""

    @abstractmethod
    def count_by_parent(self, parent_key: str) -> int:
        """Count a parent's assets."""

    @abstractmethod
    def clear_primary_for_parent(self, parent_key: str) -> list[str]:
        """Set ``is_primary = False`` on every asset of the parent.

        Returns:
            Identifiers of the assets that were demoted
        """

    @abstractmethod
    def clear_primary_except(self, parent_key: str, keep_id: str) -> list[str]:
        """Same as ``clear_primary_for_parent`` but leaves ``keep_id`` untouched."""

    @abstractmethod
    def delete_by_id(self, asset_id: str) -> None:
        """Delete an asset row.

        Raises:
            AssetNotFoundError: If the asset does not exist
            PersistenceError: If deletion fails
        """
