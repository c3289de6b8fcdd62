"""Database models"""
from officejam.models.queue_entry import QueueEntryRecord
from officejam.models.play_history import PlayHistory

__all__ = [
    "QueueEntryRecord",
    "PlayHistory",
]
