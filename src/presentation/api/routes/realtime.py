"""WebSocket endpoint for live payment events."""

from typing import Annotated, Any, Dict

import structlog
from fastapi import APIRouter, Depends, WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from src.core.dependencies import get_room_hub
from src.core.metrics import websocket_sessions
from src.domain.interfaces import LiveSession, RoomHub
from src.presentation.schemas import JoinRoomMessage, PaymentReceivedMessage

logger = structlog.get_logger(__name__)

realtime_router = APIRouter()


class WebSocketSession(LiveSession):
    """LiveSession backed by a Starlette WebSocket."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_json(self, payload: Dict[str, Any]) -> None:
        """Send a server event; only payment_received messages leave the bridge."""
        message = PaymentReceivedMessage.model_validate(payload)
        await self._websocket.send_json(message.model_dump(mode="json"))


def parse_client_message(raw: str | bytes | None) -> JoinRoomMessage | None:
    """Validate an incoming frame; returns None for anything unrecognised."""
    if raw is None:
        return None
    try:
        return JoinRoomMessage.model_validate_json(raw)
    except ValidationError:
        return None


@realtime_router.websocket("/")
async def live_events(
    websocket: WebSocket,
    hub: Annotated[RoomHub, Depends(get_room_hub)],
) -> None:
    """
    One connection per running business app.

    The client sends ``{"type": "join_room", "shortcode": ...}`` and from
    then on receives ``payment_received`` events for that business.
    Frames that are not a valid join are ignored.
    """
    await websocket.accept()
    session = WebSocketSession(websocket)
    websocket_sessions.inc()
    log = logger.bind(client=str(websocket.client) if websocket.client else None)
    log.info("websocket_connected")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            join = parse_client_message(message.get("text") or message.get("bytes"))
            if join is None:
                log.debug("websocket_message_dropped")
                continue

            await hub.join(session, join.shortcode)
    finally:
        shortcode = await hub.leave(session)
        websocket_sessions.dec()
        log.info("websocket_disconnected", shortcode=shortcode)
