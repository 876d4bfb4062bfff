from __future__ import annotations

"""Shared scan state: the result collection and the progress event stream."""

import queue
import threading
from typing import Iterator, List

from .models import ValidationResult

PROGRESS_BUFFER = 100


class ResultStore:
    """Append-only result collection guarded by a single lock.

    Readers only ever get copies, so iterating a snapshot cannot race with
    workers that are still appending.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: List[ValidationResult] = []

    def append(self, result: ValidationResult) -> None:
        with self._lock:
            self._results.append(result)

    def snapshot(self) -> List[ValidationResult]:
        with self._lock:
            return list(self._results)

    def successful(self) -> List[ValidationResult]:
        return [r for r in self.snapshot() if r.ok]

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


class _Closed:
    pass


_CLOSED = _Closed()


class ProgressStream:
    """Bounded queue of human-readable progress messages.

    `emit` blocks while the buffer is full, so a stalled consumer stalls the
    producers. Iteration ends once `close` has been called and every earlier
    message was delivered.
    """

    def __init__(self, maxsize: int = PROGRESS_BUFFER) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._drained = threading.Event()

    def emit(self, message: str) -> None:
        self._queue.put(message)

    def close(self) -> None:
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[str]:
        while not self._drained.is_set():
            item = self._queue.get()
            if item is _CLOSED:
                self._drained.set()
                # wake any other consumer blocked on get()
                self._queue.put(_CLOSED)
                return
            yield str(item)
