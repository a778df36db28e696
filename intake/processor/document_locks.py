import threading
from collections.abc import Iterator
from contextlib import contextmanager

from intake.processor.exceptions import StageInProgressError


class DocumentLocks:
    """Per-document re-entrant locks, created on demand and dropped when unused."""

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}
        self._holders: dict[int, int] = {}

    @contextmanager
    def hold(self, document_id: int, *, wait: bool = False) -> Iterator[None]:
        """Hold the document's lock for the duration of the block.

        With ``wait`` the caller blocks until the lock is free.

        Raises:
            StageInProgressError: if the lock is not free within the timeout.
        """
        lock = self._checkout(document_id)
        try:
            timeout = -1 if wait else self._timeout_seconds
            if not lock.acquire(timeout=timeout):
                raise StageInProgressError(
                    f"Document {document_id} is busy with another stage"
                )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(document_id)

    def _checkout(self, document_id: int) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(document_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[document_id] = lock
            self._holders[document_id] = self._holders.get(document_id, 0) + 1
            return lock

    def _checkin(self, document_id: int) -> None:
        with self._guard:
            remaining = self._holders[document_id] - 1
            if remaining:
                self._holders[document_id] = remaining
            else:
                del self._holders[document_id]
                del self._locks[document_id]
