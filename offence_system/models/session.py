"""
Session Models

The logged-in identity kept in the `frsc_user` slot and the
login payloads of the two login tabs.
"""

from enum import Enum

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Identity(BaseModel):
    """
    Logged-in identity

    For vehicle owners `email` carries the vehicle number.
    """
    email: str
    role: UserRole

    class Config:
        json_schema_extra = {
            "example": {"email": "admin@frsc.gov.ng", "role": "admin"}
        }


class AdminLoginRequest(BaseModel):
    email: str
    password: str


class UserLoginRequest(BaseModel):
    vehicle_number: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {"vehicleNumber": "NAS-456-CD"}
        }
