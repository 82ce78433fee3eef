# File: tests/conftest.py

import pytest
import os
import sys
import tempfile
import sqlalchemy
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Default to a throwaway SQLite file (set USE_SQLITE=false to run against Postgres)
os.environ.setdefault("USE_SQLITE", "true")
os.environ.setdefault("SQLITE_PATH", os.path.join(tempfile.mkdtemp(prefix="subcast-tests-"), "test.db"))

# 3. Import Settings (reads the environment above)
from subcast.core.config.settings import Settings, settings
from subcast.core.database.connection import build_engine, build_session_factory
from subcast.features.job_status.data.repository import SqlMediaFileRepository
from subcast.features.job_status.service.tracker import JobStatusTracker
from subcast.features.storage.data.local_store import LocalObjectStorage
from subcast.features.temp_files.data.scratch_dir import ScratchDirManager

# 4. Create Test Engine
TEST_ENGINE = build_engine(settings.DATABASE_URL)
TestingSessionLocal = build_session_factory(TEST_ENGINE)

TEST_BASE_URL = "http://test.local/media"


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and all tables are created.
    """
    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    # Import all models to ensure they are registered
    from subcast.core.database.base import Base
    from subcast.core.context import register_models
    register_models()

    # Create tables once
    Base.metadata.create_all(bind=TEST_ENGINE)

    yield

    TEST_ENGINE.dispose()


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(TEST_ENGINE.url)

        inspector = sqlalchemy.inspect(TEST_ENGINE)
        table_names = inspector.get_table_names()

        if table_names:
            if is_sqlite:
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield


@pytest.fixture(scope="function")
def db_session():
    """
    Provides a session for the test to use.
    """
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def test_settings(tmp_path):
    """
    Settings with every directory redirected into the test's tmp_path.
    """
    config = Settings()
    config.DATA_DIR = tmp_path / "data"
    config.ARTIFACTS_DIR = tmp_path / "artifacts"
    config.SCRATCH_DIR = tmp_path / "scratch"
    config.PUBLIC_BASE_URL = TEST_BASE_URL
    config.MAX_CONCURRENT_JOBS = 2
    return config


@pytest.fixture
def scratch(tmp_path):
    return ScratchDirManager(tmp_path / "scratch")


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(tmp_path / "artifacts", TEST_BASE_URL)


@pytest.fixture
def media_repo():
    return SqlMediaFileRepository(TestingSessionLocal)


@pytest.fixture
def tracker(media_repo):
    return JobStatusTracker(media_repo)
