"""
Payment Routes - Simulated fine payment and receipts

Endpoints:
- POST /api/payments/{id} - Pay a fine with card details (simulated)
- GET /api/payments/{id}/receipt - Receipt for a paid fine

Vehicle owners can only pay and view their own offences.
"""

from fastapi import APIRouter, Depends, HTTPException

from offence_system.models.offence import Offence
from offence_system.models.payment import CardPaymentRequest, PaymentResponse, ReceiptResponse
from offence_system.models.session import Identity
from offence_system.offences.payment_gateway import (
    CardDetails,
    OffenceAlreadyPaidError,
    OffenceNotFoundError,
    PaymentInProgressError,
    PaymentValidationError,
    build_receipt,
)
from offence_system.offences.services import OffenceServices

from .dependencies import get_services, require_vehicle_owner

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _owned_offence(services: OffenceServices, offence_id: str, identity: Identity) -> Offence:
    """Offence belonging to the logged-in vehicle, or 404"""
    offence = services.repository.get_offence(offence_id)
    if not offence or offence.vehicle_number.lower() != identity.email.strip().lower():
        raise HTTPException(status_code=404, detail="Offence not found")
    return offence


@router.post("/{offence_id}", response_model=PaymentResponse)
async def pay_offence(
    offence_id: str,
    body: CardPaymentRequest,
    identity: Identity = Depends(require_vehicle_owner),
    services: OffenceServices = Depends(get_services)
):
    """
    Pay a fine (demo only)

    Validates the card shape, waits for the simulated gateway and
    marks the offence paid. No card is charged.
    """
    _owned_offence(services, offence_id, identity)

    card = CardDetails(
        cardholder_name=body.cardholder_name,
        card_number=body.card_number,
        expiry=body.expiry,
        cvv=body.cvv,
    )

    try:
        receipt = await services.payments.pay(offence_id, card)
    except PaymentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OffenceNotFoundError:
        raise HTTPException(status_code=404, detail="Offence not found")
    except (OffenceAlreadyPaidError, PaymentInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return PaymentResponse(
        status="Paid",
        offence_id=offence_id,
        transaction_id=receipt.transaction_id,
        gateway_ref=receipt.gateway_ref,
        payment_date=receipt.payment_date,
        amount=receipt.amount,
    )


@router.get("/{offence_id}/receipt", response_model=ReceiptResponse)
async def get_receipt(
    offence_id: str,
    identity: Identity = Depends(require_vehicle_owner),
    services: OffenceServices = Depends(get_services)
):
    """Official payment receipt for a paid fine"""
    offence = _owned_offence(services, offence_id, identity)

    receipt = build_receipt(offence)
    if receipt is None:
        raise HTTPException(status_code=404, detail="No receipt: fine not paid")

    return ReceiptResponse(**receipt)
