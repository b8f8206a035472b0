"""
WebSocket Event Type Definitions

Server → Client events pushed when the offence collection changes.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


# ============================================
# Event Name Constants
# ============================================

class ServerEvent(str, Enum):
    """Events emitted from server to client"""

    # Connection
    CONNECTION_SUCCESS = "connection:success"

    # Offence changes
    OFFENCE_CREATED = "offence:created"
    OFFENCE_UPDATED = "offence:updated"
    OFFENCE_DELETED = "offence:deleted"
    OFFENCE_PAID = "offence:paid"

    # Recomputed admin statistics
    DASHBOARD_UPDATE = "dashboard:update"


# Repository event -> WebSocket event
REPOSITORY_EVENTS = {
    "created": ServerEvent.OFFENCE_CREATED,
    "updated": ServerEvent.OFFENCE_UPDATED,
    "deleted": ServerEvent.OFFENCE_DELETED,
    "paid": ServerEvent.OFFENCE_PAID,
}


# ============================================
# Event Payloads
# ============================================

class OffenceEventData(BaseModel):
    """Data for offence:created / offence:updated / offence:deleted"""
    offenceId: str
    vehicleNumber: str
    offenderName: str
    offenceType: str
    fineAmount: float
    paymentStatus: str
    timestamp: float


class OffencePaidData(BaseModel):
    """Data for offence:paid"""
    offenceId: str
    vehicleNumber: str
    amount: float
    transactionId: Optional[str] = None
    gatewayRef: Optional[str] = None
    paymentDate: Optional[str] = None
    timestamp: float
