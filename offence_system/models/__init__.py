"""
Pydantic Models Package

All data models for the FRSC Traffic Offence System.
Import from here for convenience.
"""

# Offence models
from .offence import (
    OffenceType,
    PaymentStatus,
    Offence,
    OffenceCreate,
    OffenceUpdate,
)

# Session models
from .session import (
    UserRole,
    Identity,
    AdminLoginRequest,
    UserLoginRequest,
)

# Payment models
from .payment import (
    CardPaymentRequest,
    PaymentResponse,
    ReceiptResponse,
)

# Dashboard models
from .dashboard import (
    AdminDashboardStats,
    UserDashboardStats,
    UserDashboardResponse,
)


__all__ = [
    # Offence
    "OffenceType",
    "PaymentStatus",
    "Offence",
    "OffenceCreate",
    "OffenceUpdate",

    # Session
    "UserRole",
    "Identity",
    "AdminLoginRequest",
    "UserLoginRequest",

    # Payment
    "CardPaymentRequest",
    "PaymentResponse",
    "ReceiptResponse",

    # Dashboard
    "AdminDashboardStats",
    "UserDashboardStats",
    "UserDashboardResponse",
]
