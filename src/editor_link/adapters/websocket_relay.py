import asyncio
import logging
from collections.abc import AsyncIterator

import websockets
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, WebSocketException

from editor_link.domain.errors import TransportError

logger = logging.getLogger(__name__)


class WebsocketRelaySocket:
    def __init__(self, websocket) -> None:
        self._websocket = websocket

    async def send(self, frame: str) -> None:
        try:
            await self._websocket.send(frame)
        except WebSocketException as exc:
            raise TransportError(f"Relay write failed: {exc}") from exc

    async def frames(self) -> AsyncIterator[str | bytes]:
        try:
            async for frame in self._websocket:
                yield frame
        except ConnectionClosedOK:
            logger.debug("Relay closed the connection")
        except ConnectionClosedError as exc:
            raise TransportError(f"Relay connection lost: {exc}") from exc

    async def close(self) -> None:
        await self._websocket.close()


class WebsocketRelayTransport:
    def __init__(self, open_timeout_seconds: float = 10.0) -> None:
        self._open_timeout_seconds = open_timeout_seconds

    async def connect(self, url: str) -> WebsocketRelaySocket:
        logger.info("Connecting to relay at %s", url)
        try:
            websocket = await websockets.connect(url, open_timeout=self._open_timeout_seconds)
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        return WebsocketRelaySocket(websocket)
