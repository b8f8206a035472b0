"""
Route Dependencies

Services are built once in the application lifespan and stored on
`app.state.services`; handlers receive them through these dependencies.
Tests swap them with `app.dependency_overrides[get_services]`.
"""

from fastapi import Depends, HTTPException, Request, status

from offence_system.models.session import Identity, UserRole
from offence_system.offences.services import OffenceServices


def get_services(request: Request) -> OffenceServices:
    """Services wired at start-up"""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Services not initialized"
        )
    return services


def get_current_identity(services: OffenceServices = Depends(get_services)) -> Identity:
    """Logged-in identity from the session store"""
    identity = services.session.current_user()
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return identity


def require_role(role: UserRole):
    """Only let the given role through"""
    def role_checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions"
            )
        return identity
    return role_checker


require_admin = require_role(UserRole.ADMIN)
require_vehicle_owner = require_role(UserRole.USER)
