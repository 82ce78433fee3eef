from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from .models import MediaFileRecord


class IMediaFileRepository(ABC):
    """
    Contract for MediaFile persistence.
    """

    @abstractmethod
    def create(self, record: MediaFileRecord) -> UUID:
        pass

    @abstractmethod
    def get(self, file_id: UUID) -> Optional[MediaFileRecord]:
        pass

    @abstractmethod
    def save(self, record: MediaFileRecord) -> None:
        """Persists every mutable field of an existing record."""
        pass

    @abstractmethod
    def delete(self, file_id: UUID) -> bool:
        pass

    @abstractmethod
    def list_for_owner(self, owner_id: str) -> List[MediaFileRecord]:
        pass
