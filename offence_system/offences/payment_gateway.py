"""
Simulated Payment Gateway

No card is ever processed: any input that passes the shape checks is
"charged" after a fixed delay that imitates network latency, and the
gateway answers with a transaction id and a gateway reference.

Components:
- validate_card: shape checks with one message per failure
- PaymentGateway: injectable interface (charge(card) -> PaymentReceipt)
- SimulatedPaymentGateway: delay + random TXN/REF identifiers
- PaymentService: pays an offence and records it in the repository
"""

import asyncio
import random
import re
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Set, Tuple

from offence_system.models.offence import Offence
from offence_system.offences.offence_repository import OffenceRepository


# Validation messages, in the order the checks run
MSG_CARDHOLDER = "Please enter cardholder name"
MSG_CARD_NUMBER = "Card number must be 16 digits"
MSG_EXPIRY = "Expiry date must be in MM/YY format"
MSG_CVV = "CVV must be 3 digits"

# Matched with fullmatch; ASCII digits only
_CARD_NUMBER_PATTERN = re.compile(r"[0-9]{16}")
_EXPIRY_PATTERN = re.compile(r"[0-9]{2}/[0-9]{2}")
_CVV_PATTERN = re.compile(r"[0-9]{3}")
_BASE36 = string.digits + string.ascii_uppercase


class PaymentError(Exception):
    """Base class for payment failures shown to the payer"""


class PaymentValidationError(PaymentError):
    """Card input failed a shape check"""


class OffenceNotFoundError(PaymentError):
    """No offence with that id"""


class OffenceAlreadyPaidError(PaymentError):
    """The fine has already been paid"""


class PaymentInProgressError(PaymentError):
    """A payment for this offence is still being processed"""


@dataclass
class CardDetails:
    """Card-shaped payment input"""
    cardholder_name: str
    card_number: str
    expiry: str
    cvv: str

    @property
    def digits(self) -> str:
        """Card number without spaces"""
        return re.sub(r"\s", "", self.card_number or "")

    @property
    def last_four(self) -> str:
        return self.digits[-4:]


@dataclass
class PaymentReceipt:
    """Gateway answer for a successful charge"""
    transaction_id: str
    gateway_ref: str
    payment_date: str
    amount: float = 0.0
    offence_id: Optional[str] = None
    card_last_four: Optional[str] = field(default=None, repr=False)


def validate_card(
    cardholder_name: str,
    card_number: str,
    expiry: str,
    cvv: str,
) -> Tuple[bool, Optional[str]]:
    """
    Check the shape of card input

    Stops at the first failing rule. The expiry check is format only:
    "13/25" is accepted.

    Returns:
        (valid, error_message)
    """
    if not (cardholder_name or "").strip():
        return False, MSG_CARDHOLDER

    digits = re.sub(r"\s", "", card_number or "")
    if not _CARD_NUMBER_PATTERN.fullmatch(digits):
        return False, MSG_CARD_NUMBER

    if not _EXPIRY_PATTERN.fullmatch(expiry or ""):
        return False, MSG_EXPIRY

    if not _CVV_PATTERN.fullmatch(cvv or ""):
        return False, MSG_CVV

    return True, None


class PaymentGateway(ABC):
    """Payment provider interface"""

    @abstractmethod
    async def charge(self, card: CardDetails, amount: float = 0.0) -> PaymentReceipt:
        """
        Charge a card

        Raises:
            PaymentValidationError: card input failed a shape check
        """


class SimulatedPaymentGateway(PaymentGateway):
    """
    Fake gateway: waits, then succeeds

    Args:
        processing_delay: Seconds to wait before answering
        transaction_prefix: Prefix of transaction ids (TXN-123456)
        reference_prefix: Prefix of gateway references (REF-A1B2C3)
        rng: Random source (inject a seeded Random for repeatable ids)
    """

    def __init__(
        self,
        processing_delay: float = 2.5,
        transaction_prefix: str = "TXN",
        reference_prefix: str = "REF",
        rng: Optional[random.Random] = None,
    ):
        self.processing_delay = processing_delay
        self.transaction_prefix = transaction_prefix
        self.reference_prefix = reference_prefix
        self.rng = rng or random.Random()

        self.total_charges = 0

    def generate_transaction_id(self) -> str:
        return f"{self.transaction_prefix}-{self.rng.randint(100000, 999999)}"

    def generate_gateway_ref(self) -> str:
        suffix = "".join(self.rng.choice(_BASE36) for _ in range(6))
        return f"{self.reference_prefix}-{suffix}"

    async def charge(self, card: CardDetails, amount: float = 0.0) -> PaymentReceipt:
        valid, error = validate_card(card.cardholder_name, card.card_number, card.expiry, card.cvv)
        if not valid:
            raise PaymentValidationError(error)

        # Emulated network latency
        if self.processing_delay > 0:
            await asyncio.sleep(self.processing_delay)

        self.total_charges += 1

        return PaymentReceipt(
            transaction_id=self.generate_transaction_id(),
            gateway_ref=self.generate_gateway_ref(),
            payment_date=datetime.now(timezone.utc).isoformat(),
            amount=amount,
            card_last_four=card.last_four,
        )


class PaymentService:
    """
    Pay an offence's fine through the gateway

    Responsibilities:
    - Refuse unknown or already-paid offences
    - Refuse a second submission while one is in flight
    - Charge the gateway, then mark the offence paid
    """

    def __init__(self, repository: OffenceRepository, gateway: PaymentGateway):
        self.repository = repository
        self.gateway = gateway

        # Offences with a charge in flight
        self._in_flight: Set[str] = set()

    def is_processing(self, offence_id: str) -> bool:
        return offence_id in self._in_flight

    async def pay(self, offence_id: str, card: CardDetails) -> PaymentReceipt:
        """
        Pay the fine of an offence

        Returns:
            PaymentReceipt with transaction id, gateway ref and payment date

        Raises:
            OffenceNotFoundError, OffenceAlreadyPaidError,
            PaymentInProgressError, PaymentValidationError
        """
        offence = self.repository.get_offence(offence_id)
        if offence is None:
            raise OffenceNotFoundError("Offence not found")

        if offence.is_paid:
            raise OffenceAlreadyPaidError("Fine already paid")

        if offence_id in self._in_flight:
            raise PaymentInProgressError("Payment already in progress")

        self._in_flight.add(offence_id)
        try:
            receipt = await self.gateway.charge(card, amount=offence.fine_amount)
        except PaymentValidationError as e:
            print(f"[PAYMENT] Rejected for {offence_id}: {e}")
            raise
        finally:
            self._in_flight.discard(offence_id)

        # The offence may have been deleted while the charge was in flight
        paid = self.repository.mark_paid(
            offence_id,
            transaction_id=receipt.transaction_id,
            gateway_ref=receipt.gateway_ref,
            payment_date=receipt.payment_date,
        )
        if paid is None:
            print(f"[PAYMENT] Offence {offence_id} removed during payment ({receipt.transaction_id})")
            raise OffenceNotFoundError("Offence not found")

        receipt.offence_id = paid.id
        receipt.amount = paid.fine_amount

        print(f"[PAYMENT] Payment successful: {offence_id} {receipt.transaction_id} / {receipt.gateway_ref}")
        return receipt


def build_receipt(offence: Offence) -> Optional[dict]:
    """
    Printable receipt data for a paid offence

    Returns:
        Receipt fields (snake_case), or None if the fine is unpaid
    """
    if not offence.is_paid:
        return None

    return {
        "receipt_number": offence.transaction_id or offence.id,
        "gateway_ref": offence.gateway_ref,
        "payment_date": offence.payment_date,
        "authority": "Federal Road Safety Commission",
        "command": "Lafia Command, Nasarawa State",
        "offence_id": offence.id,
        "offender_name": offence.offender_name,
        "vehicle_number": offence.vehicle_number,
        "offence_type": offence.offence_type.value,
        "location": offence.location,
        "offence_date_time": offence.date_time,
        "payment_status": offence.payment_status.value,
        "amount_paid": offence.fine_amount,
    }
