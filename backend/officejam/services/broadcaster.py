"""Fan-out of queue engine events to every connected session"""
import asyncio
import itertools
import logging
from typing import Any, Callable, List, Optional

from fastapi import WebSocket

from officejam.services.queue_engine import ItemStarted, PlaybackStopped, QueueChanged, QueueEvent

logger = logging.getLogger(__name__)

# Server -> client event names
QUEUE_UPDATE = "queue_update"
PLAY_VIDEO = "play_video"
VIDEO_PLAYING = "video_playing"
STOP_VIDEO = "stop_video"
ERROR = "error"

_session_ids = itertools.count(1)


class Session:
    """One connected client.

    Outbound messages go through a private queue drained by a single sender
    task, so each client receives messages in the order they were produced
    and a slow socket never stalls the engine.
    """

    def __init__(self, websocket: WebSocket):
        self.id = next(_session_ids)
        self.websocket = websocket
        self.closed = False
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None

    def start(self, on_dead: Callable[["Session"], None]) -> None:
        self._sender = asyncio.create_task(self._drain(on_dead))

    def send_nowait(self, event_type: str, data: Any = None) -> None:
        if self.closed:
            return
        self._outbox.put_nowait({"type": event_type, "data": data})

    async def _drain(self, on_dead: Callable[["Session"], None]) -> None:
        while True:
            message = await self._outbox.get()
            try:
                await self.websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping session {self.id}, send failed: {e!r}")
                self._outbox.task_done()
                self._abandon()
                on_dead(self)
                return
            self._outbox.task_done()

    def _abandon(self) -> None:
        self.closed = True
        while not self._outbox.empty():
            self._outbox.get_nowait()
            self._outbox.task_done()

    async def flush(self) -> None:
        """Wait until every queued message has been handed to the socket."""
        await self._outbox.join()

    async def close(self) -> None:
        self._abandon()
        if self._sender and not self._sender.done():
            self._sender.cancel()
            try:
                await self._sender
            except asyncio.CancelledError:
                pass

    def __repr__(self):
        return f"<Session(id={self.id}, closed={self.closed})>"


class Broadcaster:
    """Turns engine events into full-state messages for all sessions"""

    def __init__(self):
        self.sessions: List[Session] = []

    def add(self, session: Session) -> None:
        self.sessions.append(session)

    def discard(self, session: Session) -> None:
        if session in self.sessions:
            self.sessions.remove(session)

    def publish(self, event: QueueEvent) -> None:
        """Engine listener: every message carries complete state, never a diff."""
        if isinstance(event, QueueChanged):
            self.broadcast(QUEUE_UPDATE, [entry.to_wire() for entry in event.queue])
        elif isinstance(event, ItemStarted):
            self.broadcast(PLAY_VIDEO, event.entry.to_wire())
        elif isinstance(event, PlaybackStopped):
            self.broadcast(STOP_VIDEO)

    def broadcast(self, event_type: str, data: Any = None) -> None:
        for session in list(self.sessions):
            session.send_nowait(event_type, data)
        logger.debug(f"Broadcast {event_type} to {len(self.sessions)} sessions")
