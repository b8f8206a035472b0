"""
Tests for the Simulated Payment Gateway

Tests card shape validation, the simulated gateway's identifiers,
the payment service and receipt data.
"""

import asyncio
import random
import re

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from offence_system.database.database import Base, init_db
from offence_system.database.kv_store import KeyValueStore
from offence_system.models.offence import PaymentStatus
from offence_system.offences.offence_repository import OffenceRepository
from offence_system.offences.payment_gateway import (
    MSG_CARDHOLDER,
    MSG_CARD_NUMBER,
    MSG_CVV,
    MSG_EXPIRY,
    CardDetails,
    OffenceAlreadyPaidError,
    OffenceNotFoundError,
    PaymentGateway,
    PaymentInProgressError,
    PaymentReceipt,
    PaymentService,
    PaymentValidationError,
    SimulatedPaymentGateway,
    build_receipt,
    validate_card,
)


# ============================================
# Fixtures
# ============================================

class FixedGateway(PaymentGateway):
    """Deterministic gateway double: same identifiers every charge"""

    def __init__(self):
        self.charges = []

    async def charge(self, card, amount=0.0):
        valid, error = validate_card(card.cardholder_name, card.card_number, card.expiry, card.cvv)
        if not valid:
            raise PaymentValidationError(error)
        self.charges.append(amount)
        return PaymentReceipt(
            transaction_id="TXN-000001",
            gateway_ref="REF-FIXED1",
            payment_date="2025-01-12T10:00:00+00:00",
            amount=amount,
        )


@pytest.fixture
def repository():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)
    yield OffenceRepository(KeyValueStore(sessionmaker(autocommit=False, autoflush=False, bind=engine)))
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    """Instant gateway with repeatable identifiers"""
    return SimulatedPaymentGateway(processing_delay=0, rng=random.Random(42))


@pytest.fixture
def payments(repository, gateway):
    return PaymentService(repository, gateway)


@pytest.fixture
def card():
    return CardDetails(
        cardholder_name="Adewale Johnson",
        card_number="4111 1111 1111 1111",
        expiry="08/27",
        cvv="123",
    )


# ============================================
# Card Validation
# ============================================

class TestValidateCard:
    """Test card shape checks"""

    def test_valid_card(self):
        assert validate_card("Adewale Johnson", "4111111111111111", "08/27", "123") == (True, None)

    def test_spaces_in_card_number_allowed(self):
        valid, _ = validate_card("A", "4111 1111 1111 1111", "08/27", "123")
        assert valid is True

    def test_missing_cardholder(self):
        assert validate_card("  ", "4111111111111111", "08/27", "123") == (False, MSG_CARDHOLDER)

    @pytest.mark.parametrize("number", ["411111111111111", "41111111111111112", "4111-1111-1111-1111", "abcd111111111111", ""])
    def test_bad_card_number(self, number):
        assert validate_card("A", number, "08/27", "123") == (False, MSG_CARD_NUMBER)

    @pytest.mark.parametrize("expiry", ["8/27", "0827", "08/2027", ""])
    def test_bad_expiry(self, expiry):
        assert validate_card("A", "4111111111111111", expiry, "123") == (False, MSG_EXPIRY)

    def test_expiry_is_format_only(self):
        assert validate_card("A", "4111111111111111", "13/25", "123") == (True, None)

    @pytest.mark.parametrize("cvv", ["12", "1234", "abc", ""])
    def test_bad_cvv(self, cvv):
        assert validate_card("A", "4111111111111111", "08/27", cvv) == (False, MSG_CVV)

    def test_first_failure_reported(self):
        assert validate_card("", "1", "x", "y") == (False, MSG_CARDHOLDER)
        assert validate_card("A", "1", "x", "y") == (False, MSG_CARD_NUMBER)

    def test_trailing_newline_rejected(self):
        assert validate_card("A", "4111111111111111", "08/27\n", "123") == (False, MSG_EXPIRY)
        assert validate_card("A", "4111111111111111", "08/27", "123\n") == (False, MSG_CVV)

    def test_non_ascii_digits_rejected(self):
        arabic_indic = "\u0664" * 16
        assert validate_card("A", arabic_indic, "08/27", "123") == (False, MSG_CARD_NUMBER)
        assert validate_card("A", "4111111111111111", "\u0660\u0668/27", "123") == (False, MSG_EXPIRY)
        assert validate_card("A", "4111111111111111", "08/27", "\u0661\u0662\u0663") == (False, MSG_CVV)


# ============================================
# Simulated Gateway
# ============================================

class TestSimulatedGateway:
    """Test the fake gateway"""

    @pytest.mark.asyncio
    async def test_charge_returns_identifiers(self, gateway, card):
        receipt = await gateway.charge(card, amount=15000)

        assert re.match(r"^TXN-\d{6}$", receipt.transaction_id)
        assert re.match(r"^REF-[0-9A-Z]{6}$", receipt.gateway_ref)
        assert receipt.payment_date
        assert receipt.amount == 15000
        assert receipt.card_last_four == "1111"
        assert gateway.total_charges == 1

    @pytest.mark.asyncio
    async def test_invalid_card_rejected_without_charge(self, gateway, card):
        card.cvv = "12"

        with pytest.raises(PaymentValidationError) as exc:
            await gateway.charge(card)

        assert str(exc.value) == MSG_CVV
        assert gateway.total_charges == 0

    def test_seeded_rng_is_repeatable(self):
        a = SimulatedPaymentGateway(rng=random.Random(7))
        b = SimulatedPaymentGateway(rng=random.Random(7))

        assert a.generate_transaction_id() == b.generate_transaction_id()
        assert a.generate_gateway_ref() == b.generate_gateway_ref()

    def test_custom_prefixes(self):
        gw = SimulatedPaymentGateway(transaction_prefix="PAY", reference_prefix="GW")

        assert gw.generate_transaction_id().startswith("PAY-")
        assert gw.generate_gateway_ref().startswith("GW-")

    @pytest.mark.asyncio
    async def test_card_number_not_in_receipt(self, gateway, card):
        receipt = await gateway.charge(card)
        assert "4111 1111 1111 1111" not in repr(receipt)


# ============================================
# Payment Service
# ============================================

class TestPaymentService:
    """Test paying offences"""

    @pytest.mark.asyncio
    async def test_pay_marks_offence_paid(self, payments, repository, card):
        receipt = await payments.pay("OFF001", card)

        offence = repository.get_offence("OFF001")
        assert offence.payment_status == PaymentStatus.PAID
        assert offence.transaction_id == receipt.transaction_id
        assert offence.gateway_ref == receipt.gateway_ref
        assert offence.payment_date == receipt.payment_date
        assert receipt.offence_id == "OFF001"
        assert receipt.amount == 15000

    @pytest.mark.asyncio
    async def test_unknown_offence(self, payments, card):
        with pytest.raises(OffenceNotFoundError):
            await payments.pay("OFF999", card)

    @pytest.mark.asyncio
    async def test_already_paid(self, payments, card):
        with pytest.raises(OffenceAlreadyPaidError):
            await payments.pay("OFF002", card)

    @pytest.mark.asyncio
    async def test_invalid_card_leaves_offence_pending(self, payments, repository, card):
        card.expiry = "0827"

        with pytest.raises(PaymentValidationError) as exc:
            await payments.pay("OFF001", card)

        assert str(exc.value) == MSG_EXPIRY
        assert repository.get_offence("OFF001").payment_status == PaymentStatus.PENDING
        assert payments.is_processing("OFF001") is False

    @pytest.mark.asyncio
    async def test_double_submission_refused(self, repository, card):
        payments = PaymentService(repository, SimulatedPaymentGateway(processing_delay=0.05))

        results = await asyncio.gather(
            payments.pay("OFF003", card),
            payments.pay("OFF003", card),
            return_exceptions=True
        )

        assert results[0].offence_id == "OFF003"
        assert isinstance(results[1], PaymentInProgressError)
        assert payments.is_processing("OFF003") is False

        with pytest.raises(OffenceAlreadyPaidError):
            await payments.pay("OFF003", card)

    @pytest.mark.asyncio
    async def test_offence_deleted_during_charge(self, repository, card):
        """Deleting the offence while the gateway is busy fails the payment"""
        payments = PaymentService(repository, SimulatedPaymentGateway(processing_delay=0.05))

        task = asyncio.ensure_future(payments.pay("OFF001", card))
        await asyncio.sleep(0.01)
        repository.delete_offence("OFF001")

        with pytest.raises(OffenceNotFoundError):
            await task

        assert repository.get_offence("OFF001") is None
        assert payments.is_processing("OFF001") is False

    @pytest.mark.asyncio
    async def test_receipt_amount_follows_fine_edited_during_charge(self, repository, card):
        payments = PaymentService(repository, SimulatedPaymentGateway(processing_delay=0.05))

        task = asyncio.ensure_future(payments.pay("OFF001", card))
        await asyncio.sleep(0.01)
        repository.update_offence("OFF001", {"fineAmount": 18000})

        receipt = await task
        assert receipt.amount == 18000

    @pytest.mark.asyncio
    async def test_paid_event_emitted(self, payments, repository, card):
        events = []
        repository.subscribe(lambda event, offence: events.append((event, offence.id)))

        await payments.pay("OFF001", card)
        assert events == [("paid", "OFF001")]


# ============================================
# Receipt
# ============================================

class TestReceipt:
    """Test receipt data"""

    def test_unpaid_has_no_receipt(self, repository):
        assert build_receipt(repository.get_offence("OFF001")) is None

    @pytest.mark.asyncio
    async def test_receipt_fields(self, payments, repository, card):
        result = await payments.pay("OFF001", card)

        receipt = build_receipt(repository.get_offence("OFF001"))

        assert receipt["receipt_number"] == result.transaction_id
        assert receipt["gateway_ref"] == result.gateway_ref
        assert receipt["authority"] == "Federal Road Safety Commission"
        assert receipt["command"] == "Lafia Command, Nasarawa State"
        assert receipt["offender_name"] == "Adewale Johnson"
        assert receipt["amount_paid"] == 15000
        assert receipt["payment_status"] == "Paid"

    def test_seed_paid_offence_uses_id_as_receipt_number(self, repository):
        """OFF002 is seeded as Paid without a transaction id"""
        receipt = build_receipt(repository.get_offence("OFF002"))
        assert receipt["receipt_number"] == "OFF002"


class TestInjectedGateway:
    """Test the payment service against a deterministic gateway"""

    @pytest.mark.asyncio
    async def test_fixed_identifiers_recorded(self, repository, card):
        gateway = FixedGateway()
        payments = PaymentService(repository, gateway)

        await payments.pay("OFF003", card)

        offence = repository.get_offence("OFF003")
        assert offence.transaction_id == "TXN-000001"
        assert offence.gateway_ref == "REF-FIXED1"
        assert offence.payment_date == "2025-01-12T10:00:00+00:00"
        assert gateway.charges == [25000]

    @pytest.mark.asyncio
    async def test_rejected_card_never_reaches_repository(self, repository, card):
        events = []
        repository.subscribe(lambda event, offence: events.append(event))
        card.cardholder_name = ""

        with pytest.raises(PaymentValidationError):
            await PaymentService(repository, FixedGateway()).pay("OFF003", card)

        assert events == []
