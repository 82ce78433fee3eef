from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Iterable, Union


class ITempFileManager(ABC):
    """
    Contract for the scratch space used by codec steps.
    Every allocated path must be released by the caller, on success and on failure.
    """

    @abstractmethod
    def allocate(self, extension: str, suffix: str = "") -> Path:
        """
        Returns a fresh, collision-free path inside the scratch directory.
        The file itself is not created.
        """
        pass

    @abstractmethod
    def release(self, path: Path) -> bool:
        """
        Deletes the file if it still exists.
        Idempotent. Never touches anything outside the scratch directory.

        Returns:
            True if a file was removed.
        """
        pass

    @abstractmethod
    def save_stream(self, stream: Union[BinaryIO, Iterable[bytes]], extension: str) -> Path:
        """
        Writes the stream into a newly allocated scratch file and returns its path.
        A partially written file is removed before the error propagates.
        """
        pass
