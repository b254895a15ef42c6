import threading
from collections.abc import Iterable
from concurrent.futures import Future
from dataclasses import replace

from certcard.extraction.models import FieldRecord, FieldUpdate
from certcard.logging.logger import Log


class FieldAccumulator:
    """Single-writer reducer for the FieldRecord of one document.

    Page passes hand in partial updates from any thread; each update is
    applied whole under a lock, in arrival order (last write wins, no torn
    writes). ``completed`` resolves once every expected page reported done.
    """

    def __init__(self, expected_pages: Iterable[int]) -> None:
        self._lock = threading.Lock()
        self._record = FieldRecord()
        self._pending = set(expected_pages)
        self._arrivals: list[int] = []
        self.completed: Future[FieldRecord] = Future()
        if not self._pending:
            self.completed.set_result(FieldRecord())

    def apply(self, page_number: int, update: FieldUpdate) -> None:
        written = update.written_fields()
        with self._lock:
            update.apply_to(self._record)
            self._arrivals.append(page_number)
        if written:
            Log.debug(f"Page {page_number} wrote fields: {sorted(written)}")

    def mark_page_done(self, page_number: int) -> None:
        with self._lock:
            self._pending.discard(page_number)
            finished = not self._pending and not self.completed.done()
            record = replace(self._record) if finished else None
        if record is not None:
            self.completed.set_result(record)

    def snapshot(self) -> FieldRecord:
        with self._lock:
            return replace(self._record)

    @property
    def arrivals(self) -> list[int]:
        """Page numbers in the order their updates were applied."""
        with self._lock:
            return list(self._arrivals)
