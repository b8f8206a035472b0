"""
Offence Routes - Admin record management

Endpoints:
- GET /api/offences - All offences (optional ?search=)
- POST /api/offences - Record an offence
- GET /api/offences/vehicle/{vehicleNumber} - Offences for a vehicle
- GET /api/offences/{id} - Specific offence
- PATCH /api/offences/{id} - Edit an offence
- DELETE /api/offences/{id} - Delete an offence

All endpoints require an admin session.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from offence_system.models.offence import Offence, OffenceCreate, OffenceUpdate
from offence_system.offences.dashboard import search_offences
from offence_system.offences.services import OffenceServices

from .dependencies import get_services, require_admin

router = APIRouter(
    prefix="/api/offences",
    tags=["offences"],
    dependencies=[Depends(require_admin)]
)


@router.get("", response_model=List[Offence])
async def list_offences(
    search: Optional[str] = Query(None, description="Match id, offender name or vehicle number"),
    services: OffenceServices = Depends(get_services)
):
    """
    Get all offences

    Returns offences in insertion order, optionally narrowed by a
    case-insensitive search term.
    """
    return search_offences(services.repository.list_offences(), search)


@router.post("", response_model=Offence, status_code=201)
async def create_offence(
    body: OffenceCreate,
    services: OffenceServices = Depends(get_services)
):
    """Record a new offence (status Pending)"""
    return services.repository.create_offence(body)


@router.get("/vehicle/{vehicle_number}", response_model=List[Offence])
async def get_vehicle_offences(
    vehicle_number: str,
    services: OffenceServices = Depends(get_services)
):
    """Get all offences for a vehicle (case-insensitive)"""
    return services.repository.find_by_vehicle(vehicle_number)


@router.get("/{offence_id}", response_model=Offence)
async def get_offence(
    offence_id: str,
    services: OffenceServices = Depends(get_services)
):
    """Get specific offence by ID"""
    offence = services.repository.get_offence(offence_id)
    if not offence:
        raise HTTPException(status_code=404, detail="Offence not found")
    return offence


@router.patch("/{offence_id}", response_model=Offence)
async def update_offence(
    offence_id: str,
    body: OffenceUpdate,
    services: OffenceServices = Depends(get_services)
):
    """
    Edit an offence

    Only supplied fields change. Payment status cannot be edited here;
    fines are marked paid through the payment endpoint.
    """
    offence = services.repository.update_offence(offence_id, body)
    if not offence:
        raise HTTPException(status_code=404, detail="Offence not found")
    return offence


@router.delete("/{offence_id}")
async def delete_offence(
    offence_id: str,
    services: OffenceServices = Depends(get_services)
):
    """Delete an offence"""
    if not services.repository.delete_offence(offence_id):
        raise HTTPException(status_code=404, detail="Offence not found")
    return {"status": "deleted", "offenceId": offence_id}
