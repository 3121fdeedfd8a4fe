"""Start the external worker and report its exit."""

import logging
import os
import shutil
import subprocess
import threading
from concurrent.futures import Future
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel

from ..errors import IOFailure

logger = logging.getLogger(__name__)


class LaunchState(str, Enum):
    NOT_STARTED = "NotStarted"
    RUNNING = "Running"
    COMPLETED = "Completed"
    START_FAILED = "StartFailed"


class CompletionEvent(BaseModel):
    """What the notification thread knows once the worker has exited."""

    returncode: Optional[int]
    cancelled: bool = False
    timed_out: bool = False


def resolve_executable(executable: str) -> str:
    """Find ``executable`` as a path or on PATH."""
    path = Path(executable)
    if path.parent != Path(".") or path.is_file():
        if not path.is_file():
            raise IOFailure(f"worker executable {executable} does not exist")
        if not os.access(path, os.X_OK):
            raise IOFailure(f"worker executable {executable} is not executable")
        return str(path.resolve())
    found = shutil.which(executable)
    if found is None:
        raise IOFailure(f"worker executable {executable} not found on PATH")
    return found


class LaunchHandle:
    """Owns the worker process for the duration of the run.

    ``on_complete`` fires exactly once, on the handle's notification thread,
    after the process has exited, whatever its exit code. ``future`` resolves
    with the same :class:`CompletionEvent` for callers that prefer to await.

    A ``detached`` worker outlives the calling process: it gets its own session
    and writes straight to the log file instead of through a pipe.
    """

    def __init__(
        self,
        command: List[str],
        on_complete: Optional[Callable[[CompletionEvent], None]] = None,
        log_path: Optional[Path] = None,
        timeout: Optional[float] = None,
        detached: bool = False,
    ):
        self.command = command
        self.on_complete = on_complete
        self.log_path = Path(log_path) if log_path else None
        self.timeout = timeout
        self.detached = detached
        self.state = LaunchState.NOT_STARTED
        self.future: Future = Future()
        self.process: Optional[subprocess.Popen] = None
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._tee: Optional[threading.Thread] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    def start(self) -> "LaunchHandle":
        if self.state is not LaunchState.NOT_STARTED:
            raise RuntimeError(f"worker already {self.state.value}")
        kwargs = {}
        log = None
        if self.log_path is not None:
            try:
                log = open(self.log_path, "w", encoding="utf-8")
            except OSError as e:
                self.state = LaunchState.START_FAILED
                raise IOFailure(f"cannot open worker log {self.log_path}: {e}") from e
            if self.detached:
                kwargs = dict(stdout=log, stderr=subprocess.STDOUT)
            else:
                kwargs = dict(
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    errors="replace",
                )
        if self.detached:
            kwargs["start_new_session"] = True
        logger.debug(f"Running command: {' '.join(self.command)}")
        try:
            self.process = subprocess.Popen(self.command, **kwargs)
        except OSError as e:
            self.state = LaunchState.START_FAILED
            if log is not None:
                log.close()
            logger.error(f"Failed to start {self.command[0]}: {e}")
            raise IOFailure(f"cannot start worker {self.command[0]}: {e}") from e

        self.state = LaunchState.RUNNING
        if log is not None and self.detached:
            # the child holds its own descriptor
            log.close()
        elif log is not None:
            self._tee = threading.Thread(
                target=self._tee_output, args=(log,), daemon=True
            )
            self._tee.start()
        self._thread = threading.Thread(
            target=self._notify, name=f"worker-{self.process.pid}", daemon=True
        )
        self._thread.start()
        return self

    def _tee_output(self, log):
        with log:
            for line in self.process.stdout:
                log.write(line)
                log.flush()
                logger.info(f"[worker] {line.rstrip()}")

    def _notify(self):
        timed_out = False
        try:
            self.process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.warning(f"Worker timed out after {self.timeout}s, terminating")
            self._terminate()
        if self._tee is not None:
            self._tee.join()
        with self._lock:
            self.state = LaunchState.COMPLETED
            cancelled = self._cancelled.is_set()
        event = CompletionEvent(
            returncode=self.process.returncode,
            cancelled=cancelled,
            timed_out=timed_out,
        )
        if self.on_complete is not None:
            try:
                self.on_complete(event)
            except Exception:
                logger.exception("Error on post process")
        self.future.set_result(event)

    def _terminate(self):
        self.process.terminate()
        try:
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()

    def cancel(self) -> bool:
        """Terminate a running worker; completion still fires once."""
        with self._lock:
            if self.state is not LaunchState.RUNNING:
                return False
            self._cancelled.set()
        logger.info(f"Cancelling worker {self.pid}")
        self._terminate()
        return True

    def wait(self, timeout: Optional[float] = None) -> CompletionEvent:
        """Block until the worker has exited and completion has fired."""
        return self.future.result(timeout=timeout)

    def done(self) -> bool:
        return self.future.done()


def launch(
    executable: str,
    arguments: Sequence[str],
    on_complete: Optional[Callable[[CompletionEvent], None]] = None,
    log_path=None,
    timeout: Optional[float] = None,
    detached: bool = False,
) -> LaunchHandle:
    """Start ``executable arguments...`` in the background and return at once.

    A missing or non-executable worker raises :class:`IOFailure` right here and
    ``on_complete`` is never called.
    """
    command = [resolve_executable(executable), *[str(a) for a in arguments]]
    handle = LaunchHandle(
        command, on_complete, log_path=log_path, timeout=timeout, detached=detached
    )
    handle.start()
    logger.info("Process started. Please wait...")
    return handle
