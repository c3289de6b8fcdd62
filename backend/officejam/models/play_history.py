"""Play history model"""
from sqlalchemy import Column, String, BigInteger, DateTime

from officejam.database import Base


class PlayHistory(Base):
    """Append-only record of an entry that finished playing"""
    
    __tablename__ = "play_history"
    
    id = Column(BigInteger, primary_key=True, autoincrement=False)  # Same id the entry had in the queue
    source_url = Column(String, nullable=False)
    media_ref = Column(String, nullable=False)
    title = Column(String, nullable=False, default="")
    duration = Column(String, nullable=False, default="Unknown")
    played_at = Column(DateTime, nullable=False, index=True)
    
    def __repr__(self):
        return f"<PlayHistory(id={self.id}, media_ref='{self.media_ref}', played_at={self.played_at})>"
