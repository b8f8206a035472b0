"""
Service Wiring

Builds the application's service objects once, at start-up, and hands
them out by reference. Routes reach them through FastAPI dependencies
(`app.state.services`), never through module globals.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from offence_system.config import ConfigManager
from offence_system.database.database import SessionLocal
from offence_system.database.kv_store import KeyValueStore

from .session_store import SessionStore
from .offence_repository import OffenceRepository
from .payment_gateway import PaymentGateway, PaymentService, SimulatedPaymentGateway
from .dashboard import AdminDashboard


@dataclass
class OffenceServices:
    """Everything a request handler may need"""
    store: KeyValueStore
    session: SessionStore
    repository: OffenceRepository
    gateway: PaymentGateway
    payments: PaymentService
    admin_dashboard: AdminDashboard


def build_services(
    config: ConfigManager,
    session_factory: Callable[[], Session] = SessionLocal,
    gateway: Optional[PaymentGateway] = None,
) -> OffenceServices:
    """
    Construct and wire all services

    Args:
        config: Loaded configuration
        session_factory: SQLAlchemy session factory for the key-value store
        gateway: Payment gateway (default: SimulatedPaymentGateway from config)
    """
    auth_cfg = config.get_auth_config()
    storage_cfg = config.get_storage_config()
    offence_cfg = config.get_offence_config()
    payment_cfg = config.get_payment_config()

    store = KeyValueStore(session_factory)

    session = SessionStore(
        store,
        admin_email=auth_cfg['adminEmail'],
        admin_password=str(auth_cfg['adminPassword']),
        storage_key=storage_cfg['userKey'],
    )

    repository = OffenceRepository(
        store,
        storage_key=storage_cfg['offencesKey'],
        id_prefix=offence_cfg['idPrefix'],
        id_padding=int(offence_cfg['idPadding']),
        seed_on_empty=bool(storage_cfg['seedOnEmpty']),
    )

    if gateway is None:
        gateway = SimulatedPaymentGateway(
            processing_delay=float(payment_cfg['processingDelay']),
            transaction_prefix=payment_cfg['transactionPrefix'],
            reference_prefix=payment_cfg['referencePrefix'],
        )

    return OffenceServices(
        store=store,
        session=session,
        repository=repository,
        gateway=gateway,
        payments=PaymentService(repository, gateway),
        admin_dashboard=AdminDashboard(repository),
    )
