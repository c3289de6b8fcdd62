"""Play history endpoints"""
from fastapi import APIRouter, Depends, HTTPException

from officejam.api.deps import get_store
from officejam.config import settings
from officejam.errors import StoreError
from officejam.services.queue_store import QueueStore

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("")
def get_history(store: QueueStore = Depends(get_store)):
    """Finished entries, newest first"""
    try:
        records = store.list_history(limit=settings.history_limit)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return [record.to_wire() for record in records]


@router.delete("/{record_id}")
def delete_history_record(record_id: int, store: QueueStore = Depends(get_store)):
    """Delete one history record"""
    try:
        removed = store.delete_history(record_id)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=e.message)
    if not removed:
        raise HTTPException(status_code=404, detail=f"History record '{record_id}' not found")
    return {"message": "History record deleted"}
