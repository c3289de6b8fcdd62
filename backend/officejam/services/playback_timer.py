"""Cancellable "assume the item finished after N seconds" timer"""
import asyncio
import logging
from typing import Callable, Optional

from officejam.services.queue_engine import ItemStarted, PlaybackStopped, QueueEngine, QueueEvent

logger = logging.getLogger(__name__)


class PlaybackTimer:
    """
    Engine listener that advances the queue when an item has been current
    for ``seconds``. Any advance (manual or natural) reschedules or cancels
    the pending call before it can fire.
    """

    def __init__(self, engine: QueueEngine, seconds: float, on_expire: Callable[[], None],
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.engine = engine
        self.seconds = seconds
        self.on_expire = on_expire
        self.loop = loop or asyncio.get_running_loop()
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, event: QueueEvent) -> None:
        if isinstance(event, ItemStarted):
            self.schedule(event.entry.id)
        elif isinstance(event, PlaybackStopped):
            self.cancel()

    def schedule(self, entry_id: int) -> None:
        self.cancel()
        self._handle = self.loop.call_later(self.seconds, self._fire, entry_id)
        logger.debug(f"Auto-advance for entry {entry_id} in {self.seconds}s")

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, entry_id: int) -> None:
        self._handle = None
        current = self.engine.current
        if current is None or current.id != entry_id:
            return
        logger.info(f"Entry {entry_id} assumed finished after {self.seconds}s")
        self.on_expire()
