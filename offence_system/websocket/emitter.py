"""
WebSocket Event Emitter

Pushes offence changes and refreshed admin statistics to connected
clients. The emitter subscribes to the OffenceRepository; repository
callbacks are synchronous, so emits are scheduled as tasks on the
running event loop (and skipped when there is none).
"""

import asyncio
import time
from typing import Any, Dict, Optional, Set

from offence_system.models.offence import Offence
from offence_system.offences.dashboard import AdminDashboard

from .events import (
    ServerEvent,
    REPOSITORY_EVENTS,
    OffenceEventData,
    OffencePaidData,
)


class OffenceEventEmitter:
    """
    Centralized WebSocket event emitter

    Handles:
    - Offence change broadcasts
    - Admin dashboard statistic broadcasts
    - Error counting (emit failures never reach the caller)
    """

    def __init__(self, sio, admin_dashboard: Optional[AdminDashboard] = None):
        """
        Initialize the WebSocket emitter

        Args:
            sio: Socket.IO AsyncServer instance
            admin_dashboard: Dashboard whose stats follow each change
        """
        self.sio = sio
        self.admin_dashboard = admin_dashboard

        # Statistics
        self._emit_count = 0
        self._error_count = 0
        self._skipped_count = 0
        self._last_emit_time = 0

        # Scheduled broadcasts still running
        self._tasks: Set[asyncio.Task] = set()

    # ============================================
    # Connection Events
    # ============================================

    async def emit_connection_success(self, sid: str):
        """Emit connection success to specific client"""
        await self._emit(
            ServerEvent.CONNECTION_SUCCESS.value,
            {
                "message": "Connected to FRSC Traffic Offence System",
                "timestamp": time.time(),
                "serverVersion": "1.0.0"
            },
            room=sid
        )

    # ============================================
    # Offence Events
    # ============================================

    async def emit_offence_event(self, event: ServerEvent, offence: Offence):
        """
        Emit an offence change

        Args:
            event: OFFENCE_CREATED / OFFENCE_UPDATED / OFFENCE_DELETED
            offence: Offence as it is after the change (or as it was, if deleted)
        """
        data = OffenceEventData(
            offenceId=offence.id,
            vehicleNumber=offence.vehicle_number,
            offenderName=offence.offender_name,
            offenceType=offence.offence_type.value,
            fineAmount=offence.fine_amount,
            paymentStatus=offence.payment_status.value,
            timestamp=time.time()
        )
        await self._emit(event.value, data.model_dump())

    async def emit_offence_paid(self, offence: Offence):
        """Emit a fine payment"""
        data = OffencePaidData(
            offenceId=offence.id,
            vehicleNumber=offence.vehicle_number,
            amount=offence.fine_amount,
            transactionId=offence.transaction_id,
            gatewayRef=offence.gateway_ref,
            paymentDate=offence.payment_date,
            timestamp=time.time()
        )
        await self._emit(ServerEvent.OFFENCE_PAID.value, data.model_dump())

    async def emit_dashboard_update(self):
        """Emit current admin statistics"""
        if not self.admin_dashboard:
            return
        await self._emit(
            ServerEvent.DASHBOARD_UPDATE.value,
            self.admin_dashboard.stats.model_dump(by_alias=True)
        )

    async def broadcast_change(self, event: str, offence: Offence):
        """Emit the offence event followed by refreshed statistics"""
        server_event = REPOSITORY_EVENTS.get(event)
        if server_event is None:
            return

        if server_event == ServerEvent.OFFENCE_PAID:
            await self.emit_offence_paid(offence)
        else:
            await self.emit_offence_event(server_event, offence)

        await self.emit_dashboard_update()

    def handle_repository_event(self, event: str, offence: Offence):
        """
        OffenceRepository listener

        Schedules broadcast_change on the running loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._skipped_count += 1
            return

        task = loop.create_task(self.broadcast_change(event, offence))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ============================================
    # Internal Methods
    # ============================================

    async def _emit(self, event: str, data: Any, room: str = None):
        """
        Internal emit with error handling and statistics

        Args:
            event: Event name
            data: Event data
            room: Optional room to emit to
        """
        try:
            if room:
                await self.sio.emit(event, data, room=room)
            else:
                await self.sio.emit(event, data)

            self._emit_count += 1
            self._last_emit_time = time.time()

        except Exception as e:
            self._error_count += 1
            print(f"[WS ERROR] Failed to emit {event}: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """Get emitter statistics"""
        return {
            "totalEmits": self._emit_count,
            "errorCount": self._error_count,
            "skippedCount": self._skipped_count,
            "lastEmitTime": self._last_emit_time,
            "pendingBroadcasts": len(self._tasks),
        }
