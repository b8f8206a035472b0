"""
Dashboard Models

Stat-card values for the admin and vehicle-owner dashboards.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .offence import Offence


class AdminDashboardStats(BaseModel):
    """Statistics over the whole offence collection"""
    total_offences: int
    total_fines: float
    paid_fines: float
    pending_fines: float
    paid_count: int
    pending_count: int
    most_common_offence: Optional[str] = None
    offences_by_type: Dict[str, int] = {}
    repeat_offenders: List[str] = []

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "totalOffences": 3,
                "totalFines": 45000.0,
                "paidFines": 5000.0,
                "pendingFines": 40000.0,
                "paidCount": 1,
                "pendingCount": 2,
                "mostCommonOffence": "Speeding",
                "offencesByType": {"Speeding": 1, "Seatbelt Violation": 1, "Dangerous Driving": 1},
                "repeatOffenders": []
            }
        }


class UserDashboardStats(BaseModel):
    """Statistics over one vehicle's offences"""
    vehicle_number: str
    total_offences: int
    total_fines: float
    paid_amount: float
    pending_amount: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserDashboardResponse(BaseModel):
    """Vehicle-owner dashboard: stat cards and the filtered offence list"""
    stats: UserDashboardStats
    status_filter: str
    offences: List[Offence]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
