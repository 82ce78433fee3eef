# File: subcast/core/errors.py


class SubcastError(Exception):
    """Base class for every error raised by this package."""


class ProbeError(SubcastError):
    """The source could not be read or its probe output was unusable."""


class TranscodeError(SubcastError):
    """A codec invocation failed, produced no output, or timed out."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class StorageError(SubcastError):
    """Upload, download or delete against object storage failed."""


class ValidationError(SubcastError, ValueError):
    """Malformed input: segment timing, split or format parameters, styling values."""
