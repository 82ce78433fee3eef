import logging
import shutil
from pathlib import Path
from typing import Optional

from subcast.core.errors import StorageError
from ..domain.interfaces import IObjectStorage

logger = logging.getLogger(__name__)


class LocalObjectStorage(IObjectStorage):
    """
    Object storage backed by a local directory: {root}/{key}.
    Public URLs are {base_url}/{key}.
    """

    def __init__(self, root: Path, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        if not key or key.startswith("/"):
            raise StorageError(f"Invalid storage key: {key!r}")

        path = (self.root / key).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            raise StorageError(f"Storage key escapes the storage root: {key!r}")
        return path

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        destination = self._path_for(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as e:
            logger.error(f"Upload of {key} failed: {e}")
            raise StorageError(f"Upload failed for {key}: {e}") from e

        logger.info(f"Stored {key} ({len(data)} bytes)")
        return self.public_url(key)

    def upload_file(self, key: str, path: Path, content_type: Optional[str] = None) -> str:
        destination = self._path_for(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            # Copy (not move): the scratch file is released by its owning job
            shutil.copyfile(str(path), str(destination))
        except OSError as e:
            logger.error(f"Upload of {key} from {path} failed: {e}")
            raise StorageError(f"Upload failed for {key}: {e}") from e

        logger.info(f"Stored {key} from {Path(path).name}")
        return self.public_url(key)

    def download(self, key: str) -> bytes:
        source = self._path_for(key)
        try:
            return source.read_bytes()
        except OSError as e:
            raise StorageError(f"Download failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        target = self._path_for(key)
        try:
            target.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Delete failed for {key}: {e}") from e
        logger.info(f"Deleted {key}")

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        prefix = f"{self.base_url}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None
