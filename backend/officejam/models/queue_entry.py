"""Queue entry model"""
from sqlalchemy import Column, String, BigInteger, Integer

from officejam.database import Base


class QueueEntryRecord(Base):
    """Durable mirror of one pending queue entry.

    Client-sent ids carry no ordering guarantee, so the queue is rebuilt
    in ``position`` order.
    """
    
    __tablename__ = "queue_entries"
    
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    position = Column(Integer, nullable=False, index=True)  # Queue order
    source_url = Column(String, nullable=False)
    media_ref = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    duration = Column(String, nullable=False, default="Unknown")
    
    def __repr__(self):
        return f"<QueueEntryRecord(id={self.id}, position={self.position}, media_ref='{self.media_ref}')>"
