import logging
import subprocess
import threading
from typing import IO, List

from subcast.core.errors import TranscodeError

logger = logging.getLogger(__name__)

READ_CHUNK_BYTES = 64 * 1024


def _tail(text: str, lines: int = 5) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


class _OutputCollector:
    """
    Drains stdout and stderr on reader threads into one shared byte budget.
    The process is killed as soon as the budget is exceeded.
    """

    def __init__(self, process: subprocess.Popen, max_bytes: int):
        self.process = process
        self.max_bytes = max_bytes
        self.total = 0
        self.exceeded = False
        self.stdout = bytearray()
        self.stderr = bytearray()
        self._lock = threading.Lock()
        self._threads = [
            threading.Thread(target=self._pump, args=(process.stdout, self.stdout), daemon=True),
            threading.Thread(target=self._pump, args=(process.stderr, self.stderr), daemon=True),
        ]

    def start(self) -> None:
        for thread in self._threads:
            thread.start()

    def join(self, timeout: float = 5.0) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def _pump(self, pipe: IO[bytes], buffer: bytearray) -> None:
        with pipe:
            while True:
                chunk = pipe.read1(READ_CHUNK_BYTES)
                if not chunk:
                    break
                with self._lock:
                    if self.exceeded:
                        continue
                    self.total += len(chunk)
                    if self.total > self.max_bytes:
                        self.exceeded = True
                        self.process.kill()
                        continue
                    buffer.extend(chunk)


def run_tool(cmd: List[str], timeout: float, max_output_bytes: int, action: str) -> subprocess.CompletedProcess:
    """
    Runs an external tool with an explicit argument list (never through a shell).

    A non-zero exit, a missing executable, oversized output or a timeout all
    surface as TranscodeError. Callers that need another error type re-raise.
    """
    logger.info(f"Executing {action}: {' '.join(cmd)}")

    try:
        process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except OSError as e:
        logger.error(f"{action} could not be started: {e}")
        raise TranscodeError(f"{action} could not be started: {e}") from e

    collector = _OutputCollector(process, max_output_bytes)
    collector.start()

    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        process.kill()
        process.wait()
        collector.join()
        logger.error(f"{action} timed out after {timeout}s")
        raise TranscodeError(f"{action} timed out after {timeout}s") from e

    collector.join()
    stdout = bytes(collector.stdout)
    stderr_bytes = bytes(collector.stderr)
    stderr = stderr_bytes.decode(errors="replace")

    if collector.exceeded:
        logger.error(f"{action} exceeded output buffer of {max_output_bytes} bytes")
        raise TranscodeError(f"{action} produced more than {max_output_bytes} bytes of output", stderr=_tail(stderr))

    if returncode != 0:
        logger.error(f"{action} failed (exit {returncode}). STDERR: {_tail(stderr)}")
        raise TranscodeError(f"{action} failed with exit code {returncode}", stderr=stderr)

    return subprocess.CompletedProcess(cmd, returncode, stdout, stderr_bytes)
