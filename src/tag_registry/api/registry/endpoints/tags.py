"""WebSocket endpoint for live tag values."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from loguru import logger

router = APIRouter(prefix="/ws/registry", tags=["tags"])


@router.websocket("/tags")
async def websocket_endpoint(websocket: WebSocket):
    """Send tag values each time the client asks for an update."""
    service = getattr(websocket.app.state, "service", None)
    if service is None or not service.is_running:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    await websocket.accept()
    logger.info("WebSocket client connected")

    try:
        while True:
            await websocket.send_json({
                "type": "tag_update",
                "data": service.get_tag_values()
            })
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
