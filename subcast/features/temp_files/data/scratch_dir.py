import logging
import uuid
from pathlib import Path
from threading import Lock
from typing import BinaryIO, Iterable, Union

from ..domain.interfaces import ITempFileManager

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


class ScratchDirManager(ITempFileManager):
    """
    Scratch files live flat inside one directory shared by all jobs.
    Names are random UUIDs, so concurrent jobs never collide.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self._created = False
        self._lock = Lock()

    def _ensure_root(self) -> None:
        # Created lazily on first allocation
        with self._lock:
            if not self._created:
                self.root.mkdir(parents=True, exist_ok=True)
                self._created = True

    def allocate(self, extension: str, suffix: str = "") -> Path:
        self._ensure_root()
        ext = extension.lstrip(".") or "bin"
        tail = f"-{suffix}" if suffix else ""
        return self.root / f"{uuid.uuid4()}{tail}.{ext}"

    def contains(self, path: Path) -> bool:
        try:
            Path(path).resolve().relative_to(self.root)
        except ValueError:
            return False
        return True

    def release(self, path: Path) -> bool:
        if path is None:
            return False

        path = Path(path)
        if not self.contains(path):
            logger.warning(f"Refusing to delete path outside scratch dir: {path}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to clean up temp file {path}: {e}")
            return False

        logger.debug(f"Released temp file {path}")
        return True

    def save_stream(self, stream: Union[BinaryIO, Iterable[bytes]], extension: str) -> Path:
        path = self.allocate(extension)

        if hasattr(stream, "read"):
            chunks = iter(lambda: stream.read(CHUNK_SIZE), b"")
        else:
            chunks = stream

        try:
            with open(path, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
        except Exception:
            self.release(path)
            raise

        return path
