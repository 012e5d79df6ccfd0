"""FastAPI WebSocket adapter implementing ConnectionPort."""

import json
import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from termhold.application.ports import ConnectionClosed

logger = logging.getLogger(__name__)


class FastAPIWebSocketAdapter:
    """Adapts a FastAPI WebSocket to the ConnectionPort interface."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._closed = False

    async def send_output(self, data: bytes) -> None:
        await self._websocket.send_bytes(data)

    async def send_text(self, text: str) -> None:
        await self._websocket.send_text(text)

    async def send_message(self, message: dict[str, Any]) -> None:
        await self._websocket.send_text(json.dumps(message, separators=(",", ":")))

    async def receive(self) -> bytes | str:
        try:
            message = await self._websocket.receive()
        except WebSocketDisconnect as e:
            self._closed = True
            raise ConnectionClosed(e.code) from e
        except RuntimeError as e:
            # Starlette refuses to receive once the socket was closed locally
            self._closed = True
            raise ConnectionClosed() from e

        if message["type"] == "websocket.disconnect":
            self._closed = True
            raise ConnectionClosed(message.get("code"))

        if message.get("bytes") is not None:
            return message["bytes"]
        return message.get("text") or ""

    async def close(self, code: int = 1000) -> None:
        if self._closed:
            return
        self._closed = True
        if self._websocket.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self._websocket.close(code=code)
        except (RuntimeError, WebSocketDisconnect) as e:
            logger.debug("WebSocket already closed: %s", e)

    def is_connected(self) -> bool:
        return not self._closed and self._websocket.client_state == WebSocketState.CONNECTED
