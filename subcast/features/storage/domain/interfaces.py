from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class IObjectStorage(ABC):
    """
    Contract for the object storage collaborator.
    Keys are opaque strings; see storage.domain.keys for the namespacing scheme.
    """

    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Stores the bytes under `key`. Returns the public URL."""
        pass

    @abstractmethod
    def upload_file(self, key: str, path: Path, content_type: Optional[str] = None) -> str:
        """Streams a local file into storage. Returns the public URL."""
        pass

    @abstractmethod
    def download(self, key: str) -> bytes:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def public_url(self, key: str) -> str:
        pass

    @abstractmethod
    def key_from_url(self, url: str) -> Optional[str]:
        """Reverse of public_url. Returns None for URLs this storage did not issue."""
        pass
