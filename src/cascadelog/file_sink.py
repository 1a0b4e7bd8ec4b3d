"""
Asynchronous rotating file sink.

Caller threads format a line immediately and offer it to a bounded queue; one
writer thread per sink drains the queue, rotates the file when the next line
would push it past the size limit, writes and flushes. Rotation gzips the full
file into `<name>.gz` (replacing any previous archive) and starts over with an
empty file, so at most one active file and one archive exist per name.

All file I/O, including the control operations (open, close, clear, delete),
runs on the writer thread. Control operations travel on the same queue as
commands; they are never dropped and do not count against the capacity.
"""

from __future__ import annotations

import gzip
import os
import queue
import shutil
import threading
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional

from .config.sinks import DropPolicy, FileSinkSettings
from .exceptions import CascadeLogError, SinkClosedError, SinkIOError
from .formatters import DEFAULT_LINE_FORMAT, DEFAULT_TIMESTAMP_FORMAT, LineFormatter
from .sinks import BaseSink

DEFAULT_FILE_NAME = "filelog.txt"
DEFAULT_SIZE_LIMIT = 10 * 1024
DEFAULT_QUEUE_CAPACITY = 20
ARCHIVE_SUFFIX = ".gz"


# =============================================================================
# Write Queue
# =============================================================================


class _Command:
    __slots__ = ("name", "action", "future")

    def __init__(self, name: str, action: Callable[[], Any]):
        self.name = name
        self.action = action
        self.future: Future = Future()


class WriteQueue(queue.Queue):
    """Many-producer, single-consumer queue that never blocks producers.

    Only rendered lines (str) count against `capacity`. When it is reached,
    `offer()` either refuses the new line (DropPolicy.NEWEST) or evicts the
    oldest pending line (DropPolicy.OLDEST).
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY, policy: DropPolicy = DropPolicy.NEWEST):
        super().__init__()
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.policy = DropPolicy(policy)
        self.dropped = 0
        self._lines = 0

    @property
    def pending_lines(self) -> int:
        with self.mutex:
            return self._lines

    def offer(self, line: str) -> bool:
        """Admit `line` without blocking. Returns False when it was dropped."""
        with self.mutex:
            if self._lines >= self.capacity:
                if self.policy is DropPolicy.NEWEST:
                    self.dropped += 1
                    return False
                self._evict_oldest_line()
            self._put(line)
            self.unfinished_tasks += 1
            self.not_empty.notify()
            return True

    def _evict_oldest_line(self) -> None:
        for index, item in enumerate(self.queue):
            if isinstance(item, str):
                del self.queue[index]
                self._lines -= 1
                self.unfinished_tasks -= 1
                self.dropped += 1
                return

    def _put(self, item: Any) -> None:
        if isinstance(item, str):
            self._lines += 1
        self.queue.append(item)

    def _get(self) -> Any:
        item = self.queue.popleft()
        if isinstance(item, str):
            self._lines -= 1
        return item


# =============================================================================
# Rotating File Sink
# =============================================================================


class RotatingFileSink(BaseSink):
    """Size-bounded, gzip-archiving log file written by a background thread.

    Args:
        directory: Directory of the log file (created on open)
        name: Log file name; the archive is `<name>.gz`
        size_limit: Rotation threshold in bytes
        capacity: Pending line capacity of the write queue
        drop_policy: Which line is lost when the queue is full
        line_format: Pattern with timestamp, level, tag and message fields
        command_timeout: Seconds a control operation waits for the writer
    """

    def __init__(
        self,
        directory: str | Path = "logs",
        name: str = DEFAULT_FILE_NAME,
        size_limit: int = DEFAULT_SIZE_LIMIT,
        *,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        drop_policy: DropPolicy = DropPolicy.NEWEST,
        line_format: str = DEFAULT_LINE_FORMAT,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        command_timeout: float = 5.0,
    ):
        self._directory = Path(directory)
        self._name = name
        self._size_limit = size_limit
        self._formatter = LineFormatter(line_format, timestamp_format)
        self._queue = WriteQueue(capacity, drop_policy)
        self._command_timeout = command_timeout

        self._thread: Optional[threading.Thread] = None
        self._thread_lock = threading.Lock()
        self._stopping = threading.Event()

        # Writer thread state
        self._handle: Optional[BinaryIO] = None
        self._path: Optional[Path] = None
        self._active_limit = size_limit
        self._size = 0
        self._warned_closed = False

    def __repr__(self) -> str:
        return f"RotatingFileSink({self.get_current_file()}, limit={self._size_limit})"

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_directory(self, directory: str | Path) -> None:
        """Directory used by the next `open_file()`."""
        self._directory = Path(directory)

    def set_line_format(self, pattern: str, timestamp_format: str | None = None) -> None:
        """Replace the line pattern; lines already queued keep their format."""
        self._formatter = LineFormatter(pattern, timestamp_format or self._formatter.timestamp_format)

    def get_current_file(self) -> Path:
        return self._directory / self._name

    @property
    def archive_path(self) -> Path:
        return self._directory / (self._name + ARCHIVE_SUFFIX)

    @property
    def size_limit(self) -> int:
        return self._size_limit

    @property
    def dropped(self) -> int:
        return self._queue.dropped

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def writer_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self, settings: FileSinkSettings | None = None) -> None:
        """Apply settings (when given) and open the file. Idempotent."""
        if settings is not None:
            self._directory = Path(settings.directory)
            self._formatter = LineFormatter(settings.line_format, settings.timestamp_format)
            with self._queue.mutex:
                self._queue.capacity = settings.queue_capacity
                self._queue.policy = settings.drop_policy
            self.open_file(settings.name, settings.size_limit)
        else:
            self.open_file()

    def open_file(self, name: str | None = None, size_limit: int | None = None) -> bool:
        """Open `<directory>/<name>` for append, rotating it first when over the limit."""
        if name is not None:
            self._name = name
        if size_limit is not None:
            self._size_limit = size_limit
        path, limit = self.get_current_file(), self._size_limit
        self._stopping.clear()
        return self._submit("open", lambda: self._open_file(path, limit))

    def close(self) -> bool:
        """Close the file. Lines logged afterwards are reported and dropped until reopened."""
        return self._submit("close", self._close_file)

    def clear(self) -> bool:
        """Delete the active file and start a fresh one. The archive is kept.

        Does nothing (besides reporting) while no file is open.
        """
        return self._submit("clear", self._clear_file)

    def delete(self) -> bool:
        """Close and delete the active file. Logging fails until reopened."""
        return self._submit("delete", self._delete_file)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every line queued before this call has been written."""
        return self._submit("flush", self._flush_file, timeout=timeout)

    def interrupt(self, timeout: float | None = None) -> None:
        """Stop the writer thread on its next wake-up."""
        self._stopping.set()
        thread = self._thread
        if thread is None:
            return
        self._queue.put(_Command("interrupt", lambda: None))
        if thread is not threading.current_thread():
            thread.join(timeout)

    def shutdown(self, timeout: float = 2.0) -> None:
        """Drain, close and stop the writer (registered at exit by configure_logging)."""
        if not self.writer_alive:
            return
        self.flush(timeout)
        self.close()
        self.interrupt(timeout)

    # -------------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------------

    def println(self, severity: int, tag: str, message: str) -> None:
        """Format now, enqueue without blocking; a full queue drops the line."""
        line = self._formatter.format(severity, tag, message)
        self._ensure_writer()
        self._queue.offer(line)

    def _ensure_writer(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        with self._thread_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            if self._stopping.is_set():
                return
            self._thread = threading.Thread(
                target=self._run,
                name=f"cascadelog-writer-{self._name}",
                daemon=True,
            )
            self._thread.start()

    def _submit(self, name: str, action: Callable[[], Any], timeout: float | None = None) -> bool:
        if self._thread is not None and threading.current_thread() is self._thread:
            action()
            return True
        self._ensure_writer()
        if not self.writer_alive:
            raise SinkClosedError(sink=self.name, operation=name)
        command = _Command(name, action)
        self._queue.put(command)
        try:
            command.future.result(timeout=self._command_timeout if timeout is None else timeout)
        except (FutureTimeoutError, CancelledError):
            return False
        return True

    # -------------------------------------------------------------------------
    # Writer thread
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if self._stopping.is_set():
                    if isinstance(item, _Command):
                        item.future.cancel()
                    return
                if isinstance(item, _Command):
                    self._execute(item)
                else:
                    self._write_line(item)
            except Exception as exc:
                # One bad line never terminates the writer.
                self._report(exc)
            finally:
                self._queue.task_done()

    def _execute(self, command: _Command) -> None:
        if not command.future.set_running_or_notify_cancel():
            return
        try:
            result = command.action()
        except Exception as exc:
            self._report(exc)
            command.future.set_result(None)
        else:
            command.future.set_result(result)

    def _write_line(self, line: str) -> None:
        if self._handle is None:
            if not self._warned_closed:
                self._warned_closed = True
                self._report_text(f"open() must be called before logging to {self.get_current_file()}")
            return

        data = (line + "\n").encode("utf-8", errors="replace")
        if self._size > 0 and self._size + len(data) > self._active_limit:
            self._rotate()
            if self._handle is None:
                return

        try:
            self._handle.write(data)
            self._handle.flush()
        except OSError as exc:
            raise SinkIOError(path=str(self._path), operation="write", reason=str(exc)) from exc
        self._size += len(data)

    def _open_handle(self, path: Path, truncate: bool = False) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(path, "wb" if truncate else "ab")
        except OSError as exc:
            raise SinkIOError(path=str(path), operation="open", reason=str(exc)) from exc
        self._handle = handle
        self._path = path
        self._size = os.fstat(handle.fileno()).st_size
        self._warned_closed = False

    def _close_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as exc:
            raise SinkIOError(path=str(self._path), operation="close", reason=str(exc)) from exc

    def _archive(self, path: Path) -> bool:
        archive = path.with_name(path.name + ARCHIVE_SUFFIX)
        try:
            with open(path, "rb") as source, gzip.open(archive, "wb") as target:
                shutil.copyfileobj(source, target)
        except OSError as exc:
            self._report(SinkIOError(path=str(archive), operation="archive", reason=str(exc)))
            return False
        return True

    def _rotate(self) -> None:
        path = self._path
        self._close_handle()
        # Keep appending to the old file when the archive could not be written.
        archived = self._archive(path)
        self._open_handle(path, truncate=archived)

    def _open_file(self, path: Path, limit: int) -> None:
        if self._handle is not None and self._path == path:
            self._active_limit = limit
            return
        self._close_handle()
        self._active_limit = limit
        self._open_handle(path)
        if self._size > limit:
            self._rotate()

    def _close_file(self) -> None:
        self._close_handle()

    def _clear_file(self) -> None:
        if self._handle is None:
            self._report_text(f"clear() ignored, {self.get_current_file()} is not open")
            return
        path = self._path
        self._close_handle()
        self._unlink(path)
        self._open_handle(path)

    def _delete_file(self) -> None:
        path = self._path or self.get_current_file()
        self._close_handle()
        self._unlink(path)
        self._path = None
        self._size = 0

    def _flush_file(self) -> None:
        if self._handle is not None:
            self._handle.flush()

    @staticmethod
    def _unlink(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise SinkIOError(path=str(path), operation="delete", reason=str(exc)) from exc

    # -------------------------------------------------------------------------
    # Error reporting (system sink only)
    # -------------------------------------------------------------------------

    def _report(self, exc: BaseException) -> None:
        if isinstance(exc, CascadeLogError):
            self._report_text(str(exc))
        else:
            self._report_text(f"{type(exc).__name__}: {exc}")

    def _report_text(self, text: str) -> None:
        from .loggers import diagnostics

        if diagnostics.sink is self:
            return
        diagnostics.tag_msg(self.name, text)
