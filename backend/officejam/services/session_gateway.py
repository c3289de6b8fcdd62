"""Session gateway: connection lifecycle and inbound command dispatch"""
import logging
from typing import Optional

from fastapi import WebSocket

from officejam.errors import NotFoundError, ValidationError
from officejam.schemas import QueueEntry
from officejam.services.broadcaster import Broadcaster, Session, ERROR, QUEUE_UPDATE, VIDEO_PLAYING
from officejam.services.commands import AddVideo, Advance, DeleteVideo, DeleteVideos, Command, parse_command
from officejam.services.queue_engine import QueueEngine

logger = logging.getLogger(__name__)


class SessionGateway:
    """Connects WebSocket clients to the queue engine"""

    def __init__(self, engine: QueueEngine, broadcaster: Broadcaster):
        """
        Initialize session gateway

        Args:
            engine: The single queue engine
            broadcaster: Broadcaster already listening to the engine
        """
        self.engine = engine
        self.broadcaster = broadcaster

    async def connect(self, websocket: WebSocket) -> Session:
        """
        Accept a client and replay the current state to it

        The session joins the broadcast list and receives its snapshot while
        holding the engine lock, so no mutation can slip in between.
        """
        await websocket.accept()
        session = Session(websocket)
        with self.engine.lock:
            self.broadcaster.add(session)
            session.send_nowait(QUEUE_UPDATE, [entry.to_wire() for entry in self.engine.snapshot()])
            current = self.engine.current
            if current is not None:
                session.send_nowait(VIDEO_PLAYING, current.to_wire())
        session.start(self.broadcaster.discard)
        logger.info(f"Session {session.id} connected ({len(self.broadcaster.sessions)} connected)")
        return session

    async def disconnect(self, session: Session) -> None:
        self.broadcaster.discard(session)
        await session.close()
        logger.info(f"Session {session.id} disconnected ({len(self.broadcaster.sessions)} connected)")

    def handle(self, session: Session, raw: str) -> None:
        """
        Apply one inbound frame. Rejections go back to the sender only.

        Args:
            session: Originating session
            raw: Frame text
        """
        try:
            self.dispatch(parse_command(raw))
        except (ValidationError, NotFoundError) as e:
            logger.warning(f"Rejected command from session {session.id}: {e.message}")
            session.send_nowait(ERROR, {"message": e.message})

    def dispatch(self, command: Command) -> None:
        if isinstance(command, AddVideo):
            self.engine.enqueue(self._build_entry(command))
        elif isinstance(command, DeleteVideo):
            self.engine.remove(command.entry_id)
        elif isinstance(command, DeleteVideos):
            self.engine.remove_many(command.entry_ids)
        elif isinstance(command, Advance):
            self.advance(command.reason)

    def advance(self, reason: str = "play_next") -> Optional[QueueEntry]:
        logger.info(f"Advancing queue ({reason})")
        return self.engine.advance()

    def _build_entry(self, command: AddVideo) -> QueueEntry:
        entry_id = command.entry_id if command.entry_id is not None else self.engine.next_id()
        return QueueEntry(
            id=entry_id,
            source_url=command.url,
            media_ref=command.media_ref,
            title=command.title or f"Video ({command.media_ref})",
            duration=command.duration or "Unknown",
        )
