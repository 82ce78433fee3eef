# File: subcast/core/config/settings.py

import os
import shutil
import tempfile
from pathlib import Path


class Settings:
    # --- Paths ---
    # subcast/core/config/settings.py -> subcast/core/config -> subcast/core -> subcast -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = Path(os.getenv("SUBCAST_DATA_DIR", str(BASE_DIR / "data")))
    ARTIFACTS_DIR: Path = Path(os.getenv("ARTIFACTS_DIR", str(DATA_DIR / "artifacts")))

    # Scratch space for codec input/output. Shared by all jobs.
    SCRATCH_DIR: Path = Path(os.getenv("FFMPEG_TEMP_DIR", str(Path(tempfile.gettempdir()) / "subcast")))

    # Prefix used to build public URLs for stored artifacts
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000/media")

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "subcast_db")

    @property
    def DATABASE_URL(self) -> str:
        # Only fallback to SQLite if explicitly requested.
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return f"sqlite:///{os.getenv('SQLITE_PATH', './subcast.db')}"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")

    # Wall-clock limits per codec invocation (seconds)
    PROBE_TIMEOUT_SECONDS: float = float(os.getenv("PROBE_TIMEOUT_SECONDS", "60"))
    CODEC_TIMEOUT_SECONDS: float = float(os.getenv("CODEC_TIMEOUT_SECONDS", "300"))
    BURN_TIMEOUT_SECONDS: float = float(os.getenv("BURN_TIMEOUT_SECONDS", str(30 * 60)))

    # Upper bound on captured stdout/stderr per invocation
    MAX_OUTPUT_BYTES: int = 50 * 1024 * 1024
    MAX_THUMBNAIL_OUTPUT_BYTES: int = 10 * 1024 * 1024
    MAX_BURN_OUTPUT_BYTES: int = 100 * 1024 * 1024

    # --- Processing ---
    MAX_CONCURRENT_JOBS: int = int(os.getenv("MAX_CONCURRENT_JOBS", "4"))
    MAX_FILE_SIZE_BYTES: int = 2 * 1024 * 1024 * 1024

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
