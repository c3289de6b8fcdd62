"""Pytest configuration for OfficeJam tests.

Points the application at a throwaway SQLite database before any officejam
module reads its settings.
"""

import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="officejam-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'app.db')}"
os.environ["YOUTUBE_API_KEY"] = ""
os.environ["AUTO_ADVANCE_SECONDS"] = "0"

import pytest
from sqlalchemy.orm import sessionmaker

from officejam.database import init_db, make_engine
from officejam.schemas import QueueEntry
from officejam.services.queue_store import QueueStore
from officejam.services.store_writer import StoreWriter

VIDEO_IDS = ["dQw4w9WgXcQ", "9bZkp7q19f0", "kJQP7kiw5Fk", "OPf0YbXqDm0", "JGwWNGJdvx8", "fJ9rUzIMcZQ"]


@pytest.fixture
def make_entry():
    """Build a QueueEntry whose reference is a real-looking video id."""
    def _make(entry_id: int, title: str = None) -> QueueEntry:
        video_id = VIDEO_IDS[entry_id % len(VIDEO_IDS)]
        return QueueEntry(
            id=entry_id,
            source_url=f"https://www.youtube.com/watch?v={video_id}",
            media_ref=video_id,
            title=title or f"Video {entry_id}",
        )
    return _make


@pytest.fixture
def store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'queue.db'}")
    init_db(bind=engine)
    yield QueueStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def writer(store):
    writer = StoreWriter(store)
    yield writer
    writer.close()


@pytest.fixture
def anyio_backend():
    """The application is built on asyncio; run async tests on it only."""
    return "asyncio"
