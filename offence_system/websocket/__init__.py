"""
WebSocket Package

Real-time offence change notifications over Socket.IO.

Usage:
    from offence_system.websocket import OffenceEventEmitter, WebSocketHandlers

    emitter = OffenceEventEmitter(sio, services.admin_dashboard)
    handlers = WebSocketHandlers(sio, emitter)
    services.repository.subscribe(emitter.handle_repository_event)
"""

from .events import ServerEvent, OffenceEventData, OffencePaidData
from .emitter import OffenceEventEmitter
from .handlers import WebSocketHandlers

__all__ = [
    "ServerEvent",
    "OffenceEventData",
    "OffencePaidData",
    "OffenceEventEmitter",
    "WebSocketHandlers",
]
