# File: subcast/features/media_processing/service/orchestrator.py
import logging
import threading
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union
from uuid import UUID

from subcast.core.common.enums import MediaType
from subcast.core.errors import ProbeError, StorageError, SubcastError, TranscodeError, ValidationError
from subcast.features.job_status.domain.interfaces import IMediaFileRepository
from subcast.features.job_status.domain.models import MediaFileRecord, Milestone
from subcast.features.job_status.service.tracker import JobStatusTracker
from subcast.features.media_transcoding.domain.interfaces import IMediaTranscoder
from subcast.features.storage.domain.interfaces import IObjectStorage
from subcast.features.storage.domain.keys import StorageKeys
from subcast.features.storage.service.api import delete_artifacts
from subcast.features.temp_files.domain.interfaces import ITempFileManager
from subcast.features.temp_files.service.api import TempScope

from ..domain.media_types import MAX_FILE_SIZE_BYTES, validate_upload
from ..domain.models import DerivedArtifacts, ProcessingRequest

logger = logging.getLogger(__name__)


class ProcessingOrchestrator:
    """
    Runs the media pipeline for one file as a detached background job:
    probe -> (video) preview -> audio -> (video) thumbnail -> store -> ready.

    start() returns immediately; the job writes its progress to the tracker
    and clients poll the tracker. Each job is its own error boundary.
    """

    def __init__(self, temp: ITempFileManager, transcoder: IMediaTranscoder, storage: IObjectStorage,
                 repo: IMediaFileRepository, tracker: JobStatusTracker, executor: Executor,
                 max_file_size: int = MAX_FILE_SIZE_BYTES, thumbnail_percent: float = 25.0):
        self.temp = temp
        self.transcoder = transcoder
        self.storage = storage
        self.repo = repo
        self.tracker = tracker
        self.executor = executor
        self.max_file_size = max_file_size
        self.thumbnail_percent = thumbnail_percent
        # Serialises the idle check with the state change that claims the file
        self._claim_lock = threading.Lock()

    # --- Entry points ---

    def submit_upload(self, owner_id: str, filename: str, mime_type: str,
                      stream: Union[BinaryIO, Iterable[bytes]], size_bytes: Optional[int] = None) -> UUID:
        """
        Accepts an upload: validates it, keeps the original, creates the file
        record and hands the rest to a background job. Returns the file id.
        """
        media_type = validate_upload(mime_type, size_bytes, self.max_file_size)
        extension = Path(filename).suffix.lstrip(".").lower() or "bin"

        source_path = self.temp.save_stream(stream, extension)
        try:
            actual_size = source_path.stat().st_size
            validate_upload(mime_type, actual_size, self.max_file_size)

            # Unreadable media is rejected before anything is stored
            info = self.transcoder.probe(source_path)

            record = MediaFileRecord(
                owner_id=owner_id,
                filename=filename,
                mime_type=mime_type,
                media_type=media_type,
                size_bytes=actual_size,
                duration_seconds=round(info.duration),
            )
            key = StorageKeys.upload_key(owner_id, str(record.id), extension)
            record.original_url = self.storage.upload_file(key, source_path, mime_type)
            record.storage_url = record.original_url

            self.repo.create(record)
        except Exception:
            self.temp.release(source_path)
            raise

        logger.info(f"Accepted upload {filename} as file {record.id} ({media_type.value}, {actual_size} bytes)")
        self.tracker.milestone(record.id, Milestone.UPLOADED)
        self.start(record.id, source_path)
        return record.id

    def start(self, file_id: UUID, source_path: Path) -> Future:
        """
        Schedules processing of an existing file record. Fire-and-forget:
        the returned future never raises, failures end up on the record.
        """
        record = self.repo.get(file_id)
        if record is None:
            raise KeyError(f"Media file {file_id} not found")

        request = ProcessingRequest(
            file_id=file_id,
            source_path=Path(source_path),
            owner_id=record.owner_id,
            media_type=record.media_type,
        )
        logger.info(f"Scheduling processing for file {file_id}")
        return self.executor.submit(self.run, request)

    def reprocess(self, file_id: UUID) -> Future:
        """
        Re-derives every artifact from the stored original.
        Only files whose last job has finished (ready or error) can be reprocessed.
        """
        with self._claim_lock:
            record = self.repo.get(file_id)
            if record is None:
                raise KeyError(f"Media file {file_id} not found")
            record = self._require_idle(record)

            key = self.storage.key_from_url(record.original_url)
            if not key:
                raise StorageError(f"Original of file {file_id} is not in this storage")

            data = self.storage.download(key)
            source_path = self.temp.save_stream([data], Path(key).suffix)

            # Clear out the state of the previous run before scheduling
            self.tracker.restart(file_id)
            self.tracker.drain()
            try:
                return self.start(file_id, source_path)
            except Exception:
                self.temp.release(source_path)
                raise

    def delete_file(self, file_id: UUID) -> bool:
        """
        Removes the record and its stored artifacts. Refused while a job is running.
        """
        with self._claim_lock:
            record = self.repo.get(file_id)
            if record is None:
                return False
            record = self._require_idle(record)

            deleted = delete_artifacts(self.storage, [
                record.original_url, record.preview_url, record.thumbnail_url, record.audio_url
            ])
            self.repo.delete(file_id)

        logger.info(f"Deleted file {file_id} and {len(deleted)} stored artifact(s)")
        return True

    def _require_idle(self, record: MediaFileRecord) -> MediaFileRecord:
        # Apply queued events first so a job that just finished counts as finished
        self.tracker.drain()
        current = self.repo.get(record.id) or record
        if not current.status.is_terminal:
            raise ValidationError(f"File {record.id} is still {current.status.value}; wait for its job to finish")
        return current

    # --- Job ---

    def run(self, request: ProcessingRequest) -> None:
        """
        Job body and error boundary. Never raises.
        """
        uploaded: List[str] = []

        with TempScope(self.temp) as scope:
            scope.adopt(request.source_path)
            try:
                artifacts = self._pipeline(request, scope, uploaded)
                self.tracker.complete(request.file_id, artifacts.as_updates())
                logger.info(f"File {request.file_id} processing complete")
            except Exception as e:
                logger.exception(f"File {request.file_id} processing failed: {e}")
                self._discard_uploads(request.file_id, uploaded)
                self.tracker.fail(request.file_id, str(e) or e.__class__.__name__)
            finally:
                # Flush the terminal state so it is durable without a poller
                try:
                    self.tracker.drain()
                except Exception:
                    logger.exception(f"Failed to record final status of file {request.file_id}")

    def _pipeline(self, request: ProcessingRequest, scope: TempScope, uploaded: List[str]) -> DerivedArtifacts:
        file_id = request.file_id
        source = request.source_path

        self.tracker.milestone(file_id, Milestone.PROCESSING_STARTED)

        info = self.transcoder.probe(source)
        is_video = request.media_type == MediaType.VIDEO and self.transcoder.has_video_stream(source)

        preview = None
        if is_video:
            preview = self.transcoder.to_preview(source)
            scope.adopt(preview.output_path)

        audio = self.transcoder.extract_audio(source)
        scope.adopt(audio.output_path)

        thumbnail = None
        if is_video:
            try:
                thumbnail = self.transcoder.extract_thumbnail(source, self.thumbnail_percent)
                scope.adopt(thumbnail.output_path)
            except (ProbeError, TranscodeError) as e:
                logger.warning(f"Thumbnail extraction failed for file {file_id}, continuing without: {e}")

        self.tracker.milestone(file_id, Milestone.TRANSCODED)

        owner, upload_id = request.owner_id, request.upload_id

        audio_url = self.storage.upload_file(StorageKeys.audio_key(owner, upload_id), audio.output_path, "audio/mpeg")
        uploaded.append(audio_url)
        self.tracker.milestone(file_id, Milestone.AUDIO_UPLOADED)

        preview_url = None
        if preview:
            preview_url = self.storage.upload_file(StorageKeys.video_key(owner, upload_id), preview.output_path, "video/mp4")
            uploaded.append(preview_url)

        thumbnail_url = None
        if thumbnail:
            thumbnail_url = self.storage.upload_file(
                StorageKeys.thumbnail_key(owner, upload_id), thumbnail.output_path, "image/jpeg"
            )
            uploaded.append(thumbnail_url)

        self.tracker.milestone(file_id, Milestone.ARTIFACTS_UPLOADED)

        return DerivedArtifacts(
            audio_url=audio_url,
            duration_seconds=info.duration,
            preview_url=preview_url,
            thumbnail_url=thumbnail_url,
        )

    def _discard_uploads(self, file_id: UUID, urls: List[str]) -> None:
        if not urls:
            return
        try:
            delete_artifacts(self.storage, urls)
        except SubcastError as e:
            logger.error(f"Could not remove partial artifacts of file {file_id}: {e}")
