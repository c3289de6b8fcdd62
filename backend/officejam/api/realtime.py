"""Real-time queue channel"""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from officejam.services.session_gateway import SessionGateway

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def queue_websocket(websocket: WebSocket):
    """Full queue state on join, then commands in and events out."""
    gateway: SessionGateway = websocket.app.state.gateway
    session = await gateway.connect(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            gateway.handle(session, message)
    except WebSocketDisconnect:
        pass
    finally:
        await gateway.disconnect(session)
