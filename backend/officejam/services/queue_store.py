"""Persistent store for queue entries and play history"""
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from typing import Iterable, List
from datetime import datetime
import logging

from officejam.database import SessionLocal
from officejam.errors import StoreError
from officejam.models.queue_entry import QueueEntryRecord
from officejam.models.play_history import PlayHistory
from officejam.schemas import QueueEntry, HistoryRecord

logger = logging.getLogger(__name__)


def _to_entry(row: QueueEntryRecord) -> QueueEntry:
    return QueueEntry(
        id=row.id,
        source_url=row.source_url,
        media_ref=row.media_ref,
        title=row.title,
        duration=row.duration,
    )


def _to_history(row: PlayHistory) -> HistoryRecord:
    return HistoryRecord(
        id=row.id,
        source_url=row.source_url,
        media_ref=row.media_ref,
        title=row.title,
        duration=row.duration,
        played_at=row.played_at,
    )


class QueueStore:
    """Durable mirror of the queue plus the play history table.

    Every method opens its own session so the store can be driven from the
    background writer thread as well as from request handlers. SQLAlchemy
    failures are rolled back and re-raised as StoreError.
    """
    
    def __init__(self, session_factory: sessionmaker = SessionLocal):
        """
        Initialize queue store
        
        Args:
            session_factory: Session factory bound to the target database
        """
        self.session_factory = session_factory
    
    def _run(self, action: str, fn):
        db: Session = self.session_factory()
        try:
            result = fn(db)
            db.commit()
            return result
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Failed to {action}: {e}") from e
        finally:
            db.close()
    
    def save(self, entry: QueueEntry) -> None:
        """
        Insert or replace a queue entry

        New rows go to the tail (max position + 1); a replaced row keeps
        its place.
        
        Args:
            entry: Entry to persist
        """
        def op(db: Session):
            record = db.get(QueueEntryRecord, entry.id)
            if record is None:
                max_position = db.query(func.max(QueueEntryRecord.position)).scalar()
                record = QueueEntryRecord(id=entry.id, position=(max_position or 0) + 1)
                db.add(record)
            record.source_url = entry.source_url
            record.media_ref = entry.media_ref
            record.title = entry.title
            record.duration = entry.duration
        self._run(f"save entry {entry.id}", op)
        logger.debug(f"Saved queue entry {entry.id}")
    
    def delete(self, entry_id: int) -> bool:
        """
        Delete a queue entry
        
        Args:
            entry_id: Entry id
            
        Returns:
            True if a row was deleted, False if it was not stored
        """
        def op(db: Session):
            return db.query(QueueEntryRecord).filter(QueueEntryRecord.id == entry_id).delete() > 0
        return self._run(f"delete entry {entry_id}", op)
    
    def delete_many(self, entry_ids: Iterable[int]) -> int:
        """Delete several queue entries in one transaction; returns rows deleted."""
        ids = list(entry_ids)
        if not ids:
            return 0

        def op(db: Session):
            return db.query(QueueEntryRecord).filter(
                QueueEntryRecord.id.in_(ids)
            ).delete(synchronize_session=False)
        return self._run(f"delete entries {ids}", op)
    
    def load_all(self) -> List[QueueEntry]:
        """
        Load every stored queue entry
        
        Returns:
            Entries in the order they were queued
        """
        def op(db: Session):
            rows = db.query(QueueEntryRecord).order_by(
                QueueEntryRecord.position, QueueEntryRecord.id
            ).all()
            return [_to_entry(row) for row in rows]
        return self._run("load queue", op)
    
    def archive(self, entry: QueueEntry, played_at: datetime) -> None:
        """
        Record that an entry finished playing. History is append-only, so
        an id that was already archived fails instead of replacing the
        earlier record.

        Args:
            entry: Entry that was the current item
            played_at: When it finished

        Raises:
            StoreError: write failed, including a duplicate history id
        """
        def op(db: Session):
            db.add(PlayHistory(
                id=entry.id,
                source_url=entry.source_url,
                media_ref=entry.media_ref,
                title=entry.title,
                duration=entry.duration,
                played_at=played_at,
            ))
        self._run(f"archive entry {entry.id}", op)
        logger.debug(f"Archived entry {entry.id} to history")
    
    def list_history(self, limit: int = 500) -> List[HistoryRecord]:
        """Return play history, newest first."""
        def op(db: Session):
            rows = db.query(PlayHistory).order_by(
                PlayHistory.played_at.desc(), PlayHistory.id.desc()
            ).limit(limit).all()
            return [_to_history(row) for row in rows]
        return self._run("list history", op)
    
    def history_ids(self) -> List[int]:
        """Ids of every archived entry."""
        def op(db: Session):
            return [row.id for row in db.query(PlayHistory.id).all()]
        return self._run("list history ids", op)

    def delete_history(self, record_id: int) -> bool:
        """
        Delete one history record
        
        Args:
            record_id: History record id
            
        Returns:
            True if removed, False if not found
        """
        def op(db: Session):
            return db.query(PlayHistory).filter(PlayHistory.id == record_id).delete() > 0
        return self._run(f"delete history record {record_id}", op)
