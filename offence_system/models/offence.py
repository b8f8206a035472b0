"""
Offence Models

The offence record persisted in the `frsc_offences` slot, plus the
create/update payloads used by the admin screens.

Attributes are snake_case in Python and camelCase on the wire
(`offenderName`, `vehicleNumber`, ...), matching the stored JSON.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field
from pydantic.alias_generators import to_camel


class OffenceType(str, Enum):
    """Offence types recorded by the command"""
    SPEEDING = "Speeding"
    SEATBELT_VIOLATION = "Seatbelt Violation"
    DANGEROUS_DRIVING = "Dangerous Driving"
    OVERLOADING = "Overloading"
    DRIVING_WITHOUT_LICENSE = "Driving Without License"
    PHONE_USE_WHILE_DRIVING = "Phone Use While Driving"
    TRAFFIC_LIGHT_VIOLATION = "Traffic Light Violation"
    WRONG_WAY_DRIVING = "Wrong Way Driving"
    DRUNK_DRIVING = "Drunk Driving"
    EXPIRED_DOCUMENTS = "Expired Documents"


class PaymentStatus(str, Enum):
    """Fine payment status (Pending -> Paid only)"""
    PENDING = "Pending"
    PAID = "Paid"


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _normalize_vehicle_number(value: str) -> str:
    return _require_text(value).upper()


def _check_date_time(value: str) -> str:
    value = _require_text(value)
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ValueError("must be an ISO date-time such as 2025-01-10T14:30")
    return value


RequiredText = Annotated[str, AfterValidator(_require_text)]
VehicleNumber = Annotated[str, AfterValidator(_normalize_vehicle_number)]
LocalDateTime = Annotated[str, AfterValidator(_check_date_time)]


class Offence(BaseModel):
    """
    Recorded traffic offence

    Payment metadata is only present once the fine is paid.
    """
    id: str
    offender_name: str
    vehicle_number: str
    offence_type: OffenceType
    location: str
    date_time: str                        # Local ISO timestamp, e.g. 2025-01-10T14:30:00
    fine_amount: float = Field(ge=0, allow_inf_nan=False)
    payment_status: PaymentStatus = PaymentStatus.PENDING

    # Payment metadata
    transaction_id: Optional[str] = None
    gateway_ref: Optional[str] = None
    payment_date: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "OFF001",
                "offenderName": "Adewale Johnson",
                "vehicleNumber": "LAG-123-AB",
                "offenceType": "Speeding",
                "location": "Lafia-Makurdi Road",
                "dateTime": "2025-01-10T14:30:00",
                "fineAmount": 15000,
                "paymentStatus": "Pending"
            }
        }

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def to_storage(self) -> dict:
        """camelCase dict as stored in the offence slot"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class OffenceCreate(BaseModel):
    """Fields an administrator supplies when recording an offence"""
    offender_name: RequiredText
    vehicle_number: VehicleNumber
    offence_type: OffenceType
    location: RequiredText
    date_time: LocalDateTime
    fine_amount: float = Field(ge=0, allow_inf_nan=False)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "offenderName": "Musa Ibrahim",
                "vehicleNumber": "nas-901-gh",
                "offenceType": "Overloading",
                "location": "Akwanga Road",
                "dateTime": "2025-02-01T08:00",
                "fineAmount": 10000
            }
        }


class OffenceUpdate(BaseModel):
    """
    Partial update of an offence

    Only editable fields are accepted; id, payment status and
    payment metadata are ignored if supplied.
    """
    offender_name: Optional[RequiredText] = None
    vehicle_number: Optional[VehicleNumber] = None
    offence_type: Optional[OffenceType] = None
    location: Optional[RequiredText] = None
    date_time: Optional[LocalDateTime] = None
    fine_amount: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {"fineAmount": 20000}
        }

    def changes(self) -> dict:
        """Explicitly supplied, non-null fields (snake_case)"""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
