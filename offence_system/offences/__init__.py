"""
Offence Record-Keeping (FRSC)

Components:
- SessionStore: logged-in admin / vehicle-owner identity
- OffenceRepository: offence records, ids, persistence, change events
- SimulatedPaymentGateway / PaymentService: fake card payments
- AdminDashboard / UserDashboard: derived statistics

Usage:
    from offence_system.offences import build_services

    services = build_services(get_config())
    services.session.login_user("NAS-456-CD")
    services.repository.find_by_vehicle("NAS-456-CD")
"""

# Session
from .session_store import SessionStore

# Offence repository
from .offence_repository import (
    SEED_OFFENCES,
    OffenceRepository,
)

# Payments
from .payment_gateway import (
    CardDetails,
    PaymentReceipt,
    PaymentError,
    PaymentValidationError,
    OffenceNotFoundError,
    OffenceAlreadyPaidError,
    PaymentInProgressError,
    PaymentGateway,
    SimulatedPaymentGateway,
    PaymentService,
    validate_card,
    build_receipt,
)

# Dashboards
from .dashboard import (
    AdminDashboard,
    UserDashboard,
    compute_admin_stats,
    compute_user_stats,
    search_offences,
    filter_by_status,
)

# Wiring
from .services import OffenceServices, build_services


__all__ = [
    # Session
    "SessionStore",

    # Offence repository
    "SEED_OFFENCES",
    "OffenceRepository",

    # Payments
    "CardDetails",
    "PaymentReceipt",
    "PaymentError",
    "PaymentValidationError",
    "OffenceNotFoundError",
    "OffenceAlreadyPaidError",
    "PaymentInProgressError",
    "PaymentGateway",
    "SimulatedPaymentGateway",
    "PaymentService",
    "validate_card",
    "build_receipt",

    # Dashboards
    "AdminDashboard",
    "UserDashboard",
    "compute_admin_stats",
    "compute_user_stats",
    "search_offences",
    "filter_by_status",

    # Wiring
    "OffenceServices",
    "build_services",
]
