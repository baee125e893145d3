"""Abstract contract for resolving parent content items."""

from abc import ABC, abstractmethod

from core.models.parent import Parent


class ParentRepository(ABC):
    """Read-only access to projects and blog posts.

    Parents are owned by the content CRUD layer; the asset subsystem only
    needs to prove that one exists and learn its slug.
    """

    @abstractmethod
    def resolve_parent(self, *, parent_type: str, parent_id: str) -> Parent | None:
        """Return the parent, or None if it does not exist.

        Raises:
            PersistenceError: If the lookup fails
        """
