"""
FRSC Traffic Offence Record System
Main FastAPI Application Entry Point

This is the main entry point for the backend server.
It initializes FastAPI, Socket.IO, the key-value store and all services.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*',
    logger=False,
    engineio_logger=False,
    ping_interval=25,
    ping_timeout=60
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events - startup and shutdown"""
    # Startup
    print("=" * 60)
    print("[STARTUP] FRSC Traffic Offence Record System")
    print("=" * 60)

    # Initialize database
    from offence_system.database.database import init_db
    init_db()

    # Initialize configuration
    from offence_system.config import get_config
    cfg = get_config()
    print("[OK] Configuration loaded")

    # Build services (session, repository, payments, dashboards)
    from offence_system.offences import build_services
    services = build_services(cfg)
    app.state.services = services
    print("[OK] Services initialized")

    # Initialize WebSocket emitter and handlers
    from offence_system.websocket import OffenceEventEmitter, WebSocketHandlers

    ws_emitter = OffenceEventEmitter(sio, services.admin_dashboard)
    ws_handlers = WebSocketHandlers(sio, ws_emitter)
    unsubscribe = services.repository.subscribe(ws_emitter.handle_repository_event)

    app.state.ws_emitter = ws_emitter
    app.state.ws_handlers = ws_handlers

    print("[OK] WebSocket emitter and handlers initialized")

    print("=" * 60)
    print("[SERVER] Ready at http://localhost:8000")
    print("[DOCS] API docs at http://localhost:8000/docs")
    print("[WS] WebSocket ready for connections")
    print("=" * 60)

    yield

    # Shutdown
    print("[SHUTDOWN] Shutting down...")

    unsubscribe()
    services.admin_dashboard.close()

    print("[SHUTDOWN] Complete")


# Create FastAPI application
app = FastAPI(
    title="FRSC Traffic Offence System API",
    description="Federal Road Safety Commission - Lafia Command offence records and fine payment",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Include API Routers
# ============================================

from offence_system.api import (  # noqa: E402
    auth_router,
    offence_router,
    payment_router,
    dashboard_router,
)

# Auth routes: /api/auth/admin/login, /api/auth/user/login, /api/auth/logout, /api/auth/me
app.include_router(auth_router)

# Offence routes: /api/offences, /api/offences/{id}, /api/offences/vehicle/{vehicleNumber}
app.include_router(offence_router)

# Payment routes: /api/payments/{id}, /api/payments/{id}/receipt
app.include_router(payment_router)

# Dashboard routes: /api/dashboard/admin, /api/dashboard/user
app.include_router(dashboard_router)


# ============================================
# Root Endpoints
# ============================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint - API information"""
    return {
        "name": "FRSC Traffic Offence Record System",
        "version": "1.0.0",
        "status": "operational",
        "documentation": "/docs",
        "websocket": "ws://localhost:8000",
        "endpoints": {
            "auth": "/api/auth/*",
            "offences": "/api/offences",
            "payments": "/api/payments/*",
            "dashboard": "/api/dashboard/*"
        }
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint"""
    services = getattr(app.state, "services", None)
    handlers = getattr(app.state, "ws_handlers", None)

    return {
        "status": "healthy" if services else "starting",
        "timestamp": time.time(),
        "storage": {
            "keys": services.store.keys() if services else [],
            "offences": services.repository.count() if services else 0
        },
        "websocket": {
            "connected_clients": handlers.get_client_count() if handlers else 0,
            "status": "ready" if handlers else "not_initialized"
        }
    }


@app.get("/ws/stats", tags=["websocket"])
async def websocket_stats():
    """Get WebSocket statistics"""
    emitter = getattr(app.state, "ws_emitter", None)
    handlers = getattr(app.state, "ws_handlers", None)

    return {
        "emitter": emitter.get_stats() if emitter else None,
        "clients": {
            "count": handlers.get_client_count() if handlers else 0
        },
        "timestamp": time.time()
    }


# ============================================
# Create Socket.IO ASGI app
# ============================================

sio_app = socketio.ASGIApp(sio, app)


# ============================================
# WebSocket Event Reference (handled by WebSocketHandlers)
# ============================================
#
# Server → Client Events:
#   - connection:success : Connection established
#   - offence:created    : Offence recorded
#   - offence:updated    : Offence edited
#   - offence:deleted    : Offence removed
#   - offence:paid       : Fine paid through the gateway
#   - dashboard:update   : Recomputed admin statistics


# ============================================
# Entry Point
# ============================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "offence_system.main:sio_app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
