import logging
from typing import Iterable, List, Optional

from subcast.core.errors import StorageError
from ..domain.interfaces import IObjectStorage

logger = logging.getLogger(__name__)


def delete_artifacts(storage: IObjectStorage, urls: Iterable[Optional[str]]) -> List[str]:
    """
    Deletes every stored object referenced by the given public URLs.
    URLs not issued by this storage are skipped. Duplicates are deleted once.

    Returns:
        The keys that were deleted.
    """
    deleted = []
    for url in urls:
        key = storage.key_from_url(url) if url else None
        if not key or key in deleted:
            continue
        try:
            storage.delete(key)
        except StorageError as e:
            logger.error(f"Failed to delete artifact {key}: {e}")
            raise
        deleted.append(key)
    return deleted
