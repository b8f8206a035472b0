"""
Auth Routes - Login tabs and session endpoints

Endpoints:
- POST /api/auth/admin/login - Admin login (static credential pair)
- POST /api/auth/user/login - Vehicle-owner login (vehicle number)
- POST /api/auth/logout - Clear session
- GET /api/auth/me - Current identity
"""

from fastapi import APIRouter, Depends, HTTPException

from offence_system.models.session import Identity, AdminLoginRequest, UserLoginRequest
from offence_system.offences.services import OffenceServices

from .dependencies import get_services, get_current_identity

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/admin/login", response_model=Identity)
async def admin_login(
    body: AdminLoginRequest,
    services: OffenceServices = Depends(get_services)
):
    """Log in as administrator"""
    if not services.session.login_admin(body.email, body.password):
        raise HTTPException(status_code=401, detail="Invalid admin credentials")
    return services.session.current_user()


@router.post("/user/login", response_model=Identity)
async def user_login(
    body: UserLoginRequest,
    services: OffenceServices = Depends(get_services)
):
    """Log in as vehicle owner; the vehicle number is the identity"""
    if not services.session.login_user(body.vehicle_number):
        raise HTTPException(status_code=400, detail="Please enter a vehicle number")
    return services.session.current_user()


@router.post("/logout")
async def logout(services: OffenceServices = Depends(get_services)):
    """Clear the persisted identity"""
    services.session.logout()
    return {"status": "logged_out"}


@router.get("/me", response_model=Identity)
async def me(identity: Identity = Depends(get_current_identity)):
    """Current identity (401 when logged out)"""
    return identity
