"""
Payment Models

Request/response bodies for the simulated payment gateway
and the printable receipt.
"""

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CardPaymentRequest(BaseModel):
    """
    Card-shaped input from the payment dialog

    Shape checks happen in the gateway so each failure
    can report its own message.
    """
    cardholder_name: str = ""
    card_number: str = ""
    expiry: str = ""
    cvv: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "cardholderName": "Fatima Mohammed",
                "cardNumber": "4111 1111 1111 1111",
                "expiry": "08/27",
                "cvv": "123"
            }
        }


class PaymentResponse(BaseModel):
    """Gateway result"""
    status: str
    offence_id: str
    transaction_id: str
    gateway_ref: str
    payment_date: str
    amount: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReceiptResponse(BaseModel):
    """Official payment receipt data"""
    receipt_number: str
    gateway_ref: Optional[str] = None
    payment_date: Optional[str] = None
    authority: str
    command: str

    offence_id: str
    offender_name: str
    vehicle_number: str
    offence_type: str
    location: str
    offence_date_time: str

    payment_status: str
    amount_paid: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True
