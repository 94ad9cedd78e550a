"""WebSocket push channel for live schedule/staff refresh."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["events"])


@router.websocket("/ws")
async def push_channel(websocket: WebSocket):
    """Register the client until it disconnects; incoming messages are ignored."""
    notifier = websocket.app.state.notifier
    await notifier.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(websocket)
