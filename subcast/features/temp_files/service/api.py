import logging
from pathlib import Path
from typing import List

from ..domain.interfaces import ITempFileManager

logger = logging.getLogger(__name__)


class TempScope:
    """
    Tracks every path allocated for one job and releases all of them on exit,
    whether the block returns normally or raises.

        with TempScope(manager) as scope:
            src = scope.allocate("mp4")
            ...
    """

    def __init__(self, manager: ITempFileManager):
        self.manager = manager
        self.paths: List[Path] = []

    def allocate(self, extension: str, suffix: str = "") -> Path:
        path = self.manager.allocate(extension, suffix)
        self.paths.append(path)
        return path

    def adopt(self, path: Path) -> Path:
        """Registers a path allocated elsewhere (e.g. by the transcoder) for cleanup."""
        if path is not None and path not in self.paths:
            self.paths.append(path)
        return path

    def release_all(self) -> int:
        released = 0
        while self.paths:
            if self.manager.release(self.paths.pop()):
                released += 1
        return released

    def __enter__(self) -> "TempScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        count = self.release_all()
        if count:
            logger.debug(f"Cleaned up {count} temp file(s)")
