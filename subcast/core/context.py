# File: subcast/core/context.py

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from subcast.core.config.settings import Settings, settings as default_settings
from subcast.core.database.base import Base
from subcast.core.database.connection import build_engine, build_session_factory
from subcast.core.logging import configure_logging
from subcast.features.job_status.data.repository import SqlMediaFileRepository
from subcast.features.job_status.service.tracker import JobStatusTracker
from subcast.features.media_processing.service.orchestrator import ProcessingOrchestrator
from subcast.features.media_transcoding.data.ffmpeg_adapter import FFmpegTranscoder
from subcast.features.storage.data.local_store import LocalObjectStorage
from subcast.features.temp_files.data.scratch_dir import ScratchDirManager
from subcast.features.transcription.data.repository import SqlTranscriptionRepository
from subcast.features.transcription.service.api import TranscriptionService

logger = logging.getLogger(__name__)


def register_models() -> None:
    """Imports every SQL model so they are registered on Base.metadata."""
    import subcast.features.job_status.data.sql_models  # noqa: F401
    import subcast.features.transcription.data.sql_models  # noqa: F401


@dataclass
class AppContext:
    """
    Everything a process needs, built once at start-up and passed by reference.
    Nothing in the package looks collaborators up from module globals.
    """
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    temp: ScratchDirManager
    transcoder: FFmpegTranscoder
    storage: LocalObjectStorage
    media_files: SqlMediaFileRepository
    tracker: JobStatusTracker
    executor: ThreadPoolExecutor
    orchestrator: ProcessingOrchestrator
    transcriptions: TranscriptionService

    @classmethod
    def create(cls, config: Optional[Settings] = None, log_level: Optional[int] = logging.INFO) -> "AppContext":
        config = config or default_settings
        if log_level is not None:
            configure_logging(log_level)

        config.ensure_dirs()
        engine = build_engine(config.DATABASE_URL)
        session_factory = build_session_factory(engine)

        temp = ScratchDirManager(config.SCRATCH_DIR)
        transcoder = FFmpegTranscoder(temp, config)
        storage = LocalObjectStorage(config.ARTIFACTS_DIR, config.PUBLIC_BASE_URL)
        media_files = SqlMediaFileRepository(session_factory)
        tracker = JobStatusTracker(media_files)
        executor = ThreadPoolExecutor(max_workers=config.MAX_CONCURRENT_JOBS, thread_name_prefix="subcast-job")

        orchestrator = ProcessingOrchestrator(
            temp=temp,
            transcoder=transcoder,
            storage=storage,
            repo=media_files,
            tracker=tracker,
            executor=executor,
            max_file_size=config.MAX_FILE_SIZE_BYTES,
            thumbnail_percent=transcoder.profile.thumbnail_position_percent,
        )

        logger.info(f"Context ready (db={engine.url.drivername}, workers={config.MAX_CONCURRENT_JOBS})")

        return cls(
            settings=config,
            engine=engine,
            session_factory=session_factory,
            temp=temp,
            transcoder=transcoder,
            storage=storage,
            media_files=media_files,
            tracker=tracker,
            executor=executor,
            orchestrator=orchestrator,
            transcriptions=TranscriptionService(SqlTranscriptionRepository(session_factory)),
        )

    def create_tables(self) -> None:
        register_models()
        Base.metadata.create_all(bind=self.engine)

    def shutdown(self, wait: bool = True) -> None:
        """Waits for running jobs (by default), then releases the pool and DB connections."""
        self.executor.shutdown(wait=wait)
        self.tracker.drain()
        self.engine.dispose()
