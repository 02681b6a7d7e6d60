"""WebSocket channel pushing conversation events to dashboards."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from support_desk.api.deps import DbSession, authenticate_token
from support_desk.core.exceptions import UnauthorizedError

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)

AUTH_FAILED_CLOSE_CODE = 4401


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket, db: DbSession):
    """Authenticate once with ``{"type": "auth", "token": ...}``, then receive events."""
    await websocket.accept()
    registry = websocket.app.state.notifier.registry

    try:
        first = await websocket.receive_json()
    except WebSocketDisconnect:
        return
    except ValueError:
        first = None

    token = first.get("token") if isinstance(first, dict) and first.get("type") == "auth" else None
    try:
        if not token:
            raise UnauthorizedError("Expected an auth message with a token")
        user = await authenticate_token(db, token)
        if user.organization_id is None:
            raise UnauthorizedError("User does not belong to an organization")
    except UnauthorizedError as e:
        await websocket.send_json({"type": "auth_error", "error": e.detail["message"]})
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE)
        return
    finally:
        # Release the connection; the socket may stay open for hours
        await db.close()

    registry.add(websocket, user.organization_id, user.id)
    await websocket.send_json({"type": "auth_success"})
    try:
        # Clients only listen; anything they send is ignored
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        registry.remove(websocket)
