"""
API Routes Package

This module exports all FastAPI routers for the FRSC Traffic Offence System.
"""

from .auth_routes import router as auth_router
from .offence_routes import router as offence_router
from .payment_routes import router as payment_router
from .dashboard_routes import router as dashboard_router

__all__ = [
    "auth_router",
    "offence_router",
    "payment_router",
    "dashboard_router",
]
