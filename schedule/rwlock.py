"""Reader/Writer-Lock auf Basis von threading.Condition.

Beliebig viele Leser gleichzeitig, Schreiber exklusiv. Wartende Schreiber
haben Vorrang vor neu ankommenden Lesern.
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    # ─── Lesen ───

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read ohne acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    # ─── Schreiben ───

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write ohne acquire_write")
            self._writer = False
            self._cond.notify_all()

    # ─── Context-Manager ───

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Anzahl aktiver Leser (nur für Diagnose/Tests)."""
        with self._cond:
            return self._readers
