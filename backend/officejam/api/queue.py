"""Queue API endpoints"""
from fastapi import APIRouter, Depends
from typing import List, Optional
from pydantic import BaseModel

from officejam.api.deps import get_engine
from officejam.services.queue_engine import QueueEngine

router = APIRouter(prefix="/api/queue", tags=["queue"])


class QueueStateResponse(BaseModel):
    queue: List[dict]
    current: Optional[dict] = None
    state: str


@router.get("", response_model=QueueStateResponse)
def get_queue(engine: QueueEngine = Depends(get_engine)):
    """Current queue, current item and playback state (read-only)"""
    with engine.lock:
        queue = engine.snapshot()
        current = engine.current
        state = engine.state
    return {
        "queue": [entry.to_wire() for entry in queue],
        "current": current.to_wire() if current else None,
        "state": state.value,
    }
