"""
WebSocket Client Event Handlers

Tracks connected clients and greets them. All handlers are registered
with the Socket.IO server in main.py.
"""

import time
from typing import Dict, Any

from .emitter import OffenceEventEmitter


class WebSocketHandlers:
    """Connection handlers for dashboard clients"""

    def __init__(self, sio, emitter: OffenceEventEmitter):
        """
        Initialize handlers

        Args:
            sio: Socket.IO AsyncServer instance
            emitter: Offence event emitter
        """
        self.sio = sio
        self.emitter = emitter

        # Track connected clients
        self._clients: Dict[str, Dict[str, Any]] = {}

        self.sio.on("connect", self.handle_connect)
        self.sio.on("disconnect", self.handle_disconnect)

    async def handle_connect(self, sid: str, environ: Dict, auth: Any = None):
        """
        Handle client connection

        Args:
            sid: Session ID
            environ: Connection environment
        """
        client_info = {
            "sid": sid,
            "connected_at": time.time(),
            "remote_addr": environ.get("REMOTE_ADDR", "unknown"),
        }

        self._clients[sid] = client_info

        print(f"[WS] Client connected: {sid} from {client_info['remote_addr']}")

        await self.emitter.emit_connection_success(sid)
        await self.emitter.emit_dashboard_update()

    async def handle_disconnect(self, sid: str, *args):
        """Handle client disconnection"""
        if sid in self._clients:
            client = self._clients.pop(sid)
            duration = time.time() - client["connected_at"]
            print(f"[WS] Client disconnected: {sid} (duration: {duration:.1f}s)")

    def get_client_count(self) -> int:
        return len(self._clients)
