"""WebSocket connection manager for dashboard live updates."""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket

from civicreports.core.events import EventBus

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active dashboard WebSocket connections."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("WS connected (total=%s)", self.total_connections)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info("WS disconnected (total=%s)", self.total_connections)

    async def broadcast(self, event: str, data: Any) -> None:
        """Send event to every connected client, dropping dead sockets."""
        payload = json.dumps({"event": event, "data": data}, default=str)
        dead: list[WebSocket] = []
        for ws in list(self._connections):
            try:
                await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self._connections.discard(ws)

    def bridge(self, bus: EventBus, loop: asyncio.AbstractEventLoop):
        """Forward bus events to connected clients on ``loop``.

        Publishers may run in worker threads, so broadcasts are handed to
        the loop thread-safely. Returns the unsubscribe function.
        """

        def _forward(event: str, data: Any) -> None:
            if not self._connections or loop.is_closed():
                return
            asyncio.run_coroutine_threadsafe(self.broadcast(event, data), loop)

        return bus.subscribe(_forward)

    @property
    def total_connections(self) -> int:
        return len(self._connections)


# Singleton instance used across the app
ws_manager = ConnectionManager()
