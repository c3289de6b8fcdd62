"""Queue engine: the authoritative shared queue and its playback state machine"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Optional
import enum
import logging
import threading
import time

from officejam.errors import NotFoundError, StoreError, ValidationError
from officejam.schemas import QueueEntry
from officejam.services.queue_store import QueueStore
from officejam.services.store_writer import StoreWriter

logger = logging.getLogger(__name__)


class EngineState(str, enum.Enum):
    """Playback state"""
    IDLE = "idle"
    PLAYING = "playing"


@dataclass(frozen=True)
class QueueChanged:
    queue: List[QueueEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ItemStarted:
    entry: QueueEntry


@dataclass(frozen=True)
class PlaybackStopped:
    pass


QueueEvent = QueueChanged | ItemStarted | PlaybackStopped
Listener = Callable[[QueueEvent], None]


class QueueEngine:
    """
    Owns the ordered queue and the current item.

    Every mutation runs under one lock, updates memory first, hands the
    matching store write to the writer without waiting, then notifies
    listeners synchronously in emission order.
    """

    def __init__(self, writer: Optional[StoreWriter] = None, clock: Callable[[], datetime] = datetime.utcnow):
        """
        Initialize queue engine

        Args:
            writer: Ordered store writer; None keeps the queue in memory only
            clock: Source of history timestamps
        """
        self.writer = writer
        self.clock = clock
        self._queue: List[QueueEntry] = []
        self._current: Optional[QueueEntry] = None
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._last_id = 0
        self._played_ids: set = set()  # ids already in history, never reused

    # Listeners

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: QueueEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Queue listener {listener!r} failed on {type(event).__name__}")

    # Reads

    @property
    def state(self) -> EngineState:
        return EngineState.PLAYING if self._current is not None else EngineState.IDLE

    @property
    def current(self) -> Optional[QueueEntry]:
        return self._current

    @property
    def lock(self) -> threading.RLock:
        """Serialization point; hold it to read several fields consistently."""
        return self._lock

    def snapshot(self) -> List[QueueEntry]:
        """Ordered copy of the queue."""
        with self._lock:
            return list(self._queue)

    def _ids_in_use(self) -> set:
        ids = {entry.id for entry in self._queue}
        if self._current is not None:
            ids.add(self._current.id)
        return ids

    def next_id(self) -> int:
        """
        Allocate an entry id for clients that did not send one.

        Ids are millisecond timestamps bumped past anything queued, playing
        or already in history.
        """
        with self._lock:
            taken = self._ids_in_use() | self._played_ids
            candidate = max(int(time.time() * 1000), self._last_id + 1, max(taken, default=0) + 1)
            self._last_id = candidate
            return candidate

    # Startup

    def restore(self, store: QueueStore) -> int:
        """
        Load the persisted queue and the ids already in history. A store
        failure leaves the queue empty.

        Returns:
            Number of entries restored
        """
        try:
            entries = store.load_all()
            played = store.history_ids()
        except StoreError as e:
            logger.error(f"Could not load persisted queue, starting empty: {e.message}")
            entries, played = [], []
        with self._lock:
            self._queue = list(entries)
            self._current = None
            self._played_ids = set(played)
        logger.info(f"Restored {len(entries)} queued entries from store")
        return len(entries)

    # Mutations

    def enqueue(self, entry: QueueEntry) -> QueueEntry:
        """
        Append an entry at the tail of the queue

        Args:
            entry: Entry with a derived media reference

        Returns:
            The queued entry

        Raises:
            ValidationError: empty media reference, or id already queued,
                playing or in history
        """
        with self._lock:
            if not entry.media_ref:
                raise ValidationError("Entry has no media reference")
            if entry.id in self._ids_in_use():
                raise ValidationError(f"Entry id {entry.id} is already queued")
            if entry.id in self._played_ids:
                raise ValidationError(f"Entry id {entry.id} was already played")

            self._queue.append(entry)
            self._last_id = max(self._last_id, entry.id)
            if self.writer:
                self.writer.save(entry)
            logger.info(f"Queued entry {entry.id} ({entry.media_ref}) at position {len(self._queue)}")
            self._emit(QueueChanged(self.snapshot()))
            return entry

    def advance(self) -> Optional[QueueEntry]:
        """
        Finish the current item and promote the queue head

        Returns:
            The new current item, or None when the queue was empty
        """
        with self._lock:
            finished = self._current
            if finished is not None:
                self._archive(finished)

            if not self._queue:
                self._current = None
                logger.info("Queue empty, playback stopped")
                self._emit(PlaybackStopped())
                return None

            head = self._queue.pop(0)
            self._current = head
            if self.writer:
                self.writer.delete(head.id)
            logger.info(f"Now playing entry {head.id} ({head.media_ref})")
            self._emit(QueueChanged(self.snapshot()))
            self._emit(ItemStarted(head))
            return head

    def _archive(self, entry: QueueEntry) -> None:
        self._played_ids.add(entry.id)
        if self.writer:
            self.writer.archive(entry, self.clock())
        logger.info(f"Entry {entry.id} finished")

    def remove(self, entry_id: int) -> QueueEntry:
        """
        Remove a pending entry from the queue

        Args:
            entry_id: Entry id

        Returns:
            The removed entry

        Raises:
            NotFoundError: id is not in the queue (the current item counts as absent)
        """
        with self._lock:
            index = self._index_of(entry_id)
            if index is None:
                raise NotFoundError(f"Entry {entry_id} is not in the queue")
            removed = self._queue.pop(index)
            if self.writer:
                self.writer.delete(entry_id)
            logger.info(f"Removed entry {entry_id} from queue")
            self._emit(QueueChanged(self.snapshot()))
            return removed

    def remove_many(self, entry_ids: Iterable[int]) -> List[int]:
        """
        Remove several entries in one batch, skipping ids that are not queued

        Args:
            entry_ids: Entry ids

        Returns:
            Ids actually removed, in request order
        """
        with self._lock:
            wanted = []
            for entry_id in entry_ids:
                if entry_id not in wanted:
                    wanted.append(entry_id)
            queued = {entry.id for entry in self._queue}
            removed = [entry_id for entry_id in wanted if entry_id in queued]
            if not removed:
                logger.debug(f"Batch remove matched nothing: {wanted}")
                return []

            gone = set(removed)
            self._queue = [entry for entry in self._queue if entry.id not in gone]
            if self.writer:
                self.writer.delete_many(removed)
            logger.info(f"Removed {len(removed)} entries from queue")
            self._emit(QueueChanged(self.snapshot()))
            return removed

    def _index_of(self, entry_id: int) -> Optional[int]:
        for index, entry in enumerate(self._queue):
            if entry.id == entry_id:
                return index
        return None
