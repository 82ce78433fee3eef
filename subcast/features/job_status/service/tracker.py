# File: subcast/features/job_status/service/tracker.py
import logging
import queue
from threading import Lock
from typing import Any, Dict, Optional
from uuid import UUID

from subcast.core.errors import ValidationError
from ..domain.interfaces import IMediaFileRepository
from ..domain.models import EventKind, Milestone, ProgressEvent, StatusSnapshot

logger = logging.getLogger(__name__)


class JobStatusTracker:
    """
    Per-file processing status.

    Jobs only write events onto a queue (never touch the record directly);
    events are applied in order when the status is read or when a job flushes
    its terminal event. Clients poll snapshot(); there is no push channel.
    """

    def __init__(self, repo: IMediaFileRepository):
        self.repo = repo
        self.events: "queue.Queue[ProgressEvent]" = queue.Queue()
        self._apply_lock = Lock()

    # --- Writer side (jobs) ---

    def publish(self, event: ProgressEvent) -> None:
        self.events.put(event)

    def milestone(self, file_id: UUID, milestone: Milestone) -> None:
        logger.info(f"File {file_id}: {milestone.name.lower()} ({int(milestone)}%)")
        self.publish(ProgressEvent(file_id=file_id, kind=EventKind.PROGRESS, progress=int(milestone)))

    def complete(self, file_id: UUID, updates: Dict[str, Any]) -> None:
        self.publish(ProgressEvent(file_id=file_id, kind=EventKind.READY, progress=100, updates=dict(updates)))

    def fail(self, file_id: UUID, message: str) -> None:
        self.publish(ProgressEvent(file_id=file_id, kind=EventKind.ERROR, error=message))

    def restart(self, file_id: UUID) -> None:
        self.publish(ProgressEvent(file_id=file_id, kind=EventKind.RESTART))

    # --- Reader side ---

    def drain(self) -> int:
        """
        Applies every queued event to its record. Returns the number applied.
        Events for unknown files or illegal transitions are logged and dropped.
        """
        applied = 0
        with self._apply_lock:
            while True:
                try:
                    event = self.events.get_nowait()
                except queue.Empty:
                    break

                record = self.repo.get(event.file_id)
                if record is None:
                    logger.warning(f"Dropping {event.kind.value} event for unknown file {event.file_id}")
                    continue

                try:
                    record.apply(event)
                except ValidationError as e:
                    logger.warning(f"Dropping event for file {event.file_id}: {e}")
                    continue

                self.repo.save(record)
                applied += 1

        return applied

    def snapshot(self, file_id: UUID) -> Optional[StatusSnapshot]:
        self.drain()
        record = self.repo.get(file_id)
        return record.snapshot() if record else None
