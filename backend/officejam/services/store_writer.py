"""Ordered write-behind for queue store operations"""
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Iterable
import logging

from officejam.errors import StoreError
from officejam.schemas import QueueEntry
from officejam.services.queue_store import QueueStore

logger = logging.getLogger(__name__)


class StoreWriter:
    """Applies store operations on one background thread, in submission order.

    Callers never wait for a write. A failed write is logged and abandoned;
    the in-memory queue stays authoritative.
    """

    def __init__(self, store: QueueStore):
        self.store = store
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="queue-store")

    def _submit(self, description: str, fn, *args) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(lambda f: self._report(description, f))
        return future

    @staticmethod
    def _report(description: str, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if isinstance(error, StoreError):
            logger.error(f"Store write abandoned ({description}): {error.message}")
        elif error is not None:
            logger.error(f"Unexpected error during store write ({description}): {error!r}")

    def save(self, entry: QueueEntry) -> Future:
        return self._submit(f"save {entry.id}", self.store.save, entry)

    def delete(self, entry_id: int) -> Future:
        return self._submit(f"delete {entry_id}", self.store.delete, entry_id)

    def delete_many(self, entry_ids: Iterable[int]) -> Future:
        ids = list(entry_ids)
        return self._submit(f"delete {ids}", self.store.delete_many, ids)

    def archive(self, entry: QueueEntry, played_at: datetime) -> Future:
        return self._submit(f"archive {entry.id}", self.store.archive, entry, played_at)

    def flush(self) -> None:
        """Block until every write submitted so far has been applied."""
        self._executor.submit(lambda: None).result()

    def close(self) -> None:
        self._executor.shutdown(wait=True)
