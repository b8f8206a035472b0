"""
Offence Repository

Owns the ordered list of offence records:
- Generates OFF-prefixed identifiers
- Creates, updates, deletes and queries offences
- Marks fines as paid
- Persists the whole collection to the `frsc_offences` slot after every change
- Notifies subscribers (dashboards, WebSocket emitter) of each change
"""

import json
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from offence_system.database.kv_store import KeyValueStore
from offence_system.models.offence import (
    Offence,
    OffenceCreate,
    OffenceUpdate,
    OffenceType,
    PaymentStatus,
)


# Listener signature: listener(event, offence)
OffenceListener = Callable[[str, Offence], None]

_OFFENCE_LIST = TypeAdapter(List[Offence])


# Installed when no collection is stored
SEED_OFFENCES: List[Offence] = [
    Offence(
        id="OFF001",
        offender_name="Adewale Johnson",
        vehicle_number="LAG-123-AB",
        offence_type=OffenceType.SPEEDING,
        location="Lafia-Makurdi Road",
        date_time="2025-01-10T14:30:00",
        fine_amount=15000,
        payment_status=PaymentStatus.PENDING,
    ),
    Offence(
        id="OFF002",
        offender_name="Fatima Mohammed",
        vehicle_number="NAS-456-CD",
        offence_type=OffenceType.SEATBELT_VIOLATION,
        location="Lafia Central Market",
        date_time="2025-01-11T09:15:00",
        fine_amount=5000,
        payment_status=PaymentStatus.PAID,
    ),
    Offence(
        id="OFF003",
        offender_name="Chukwudi Okafor",
        vehicle_number="LAG-789-EF",
        offence_type=OffenceType.DANGEROUS_DRIVING,
        location="Shabu Junction",
        date_time="2025-01-11T16:45:00",
        fine_amount=25000,
        payment_status=PaymentStatus.PENDING,
    ),
]


class OffenceRepository:
    """
    Repository of traffic offence records

    Every mutator rewrites the full collection in the key-value store;
    there are no partial writes. Readers get copies, so the only way
    to change a record is through the methods below.

    Events passed to subscribers: created, updated, deleted, paid.
    """

    EVENT_CREATED = "created"
    EVENT_UPDATED = "updated"
    EVENT_DELETED = "deleted"
    EVENT_PAID = "paid"

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = "frsc_offences",
        id_prefix: str = "OFF",
        id_padding: int = 3,
        seed_on_empty: bool = True,
    ):
        """
        Initialize the repository and load the stored collection

        Args:
            store: Key-value store holding the collection
            storage_key: Slot name for the serialized list
            id_prefix: Prefix of generated ids
            id_padding: Zero-padding width of the sequence number
            seed_on_empty: Install the sample records when the slot is empty
        """
        self.store = store
        self.storage_key = storage_key
        self.id_prefix = id_prefix
        self.id_padding = id_padding
        self.seed_on_empty = seed_on_empty

        self._offences: List[Offence] = []
        self._listeners: List[OffenceListener] = []

        self._load()

        print(f"[OK] Offence repository initialized ({len(self._offences)} offences loaded)")

    # ============================================
    # Persistence
    # ============================================

    def _load(self):
        """Load the collection, installing seed data when none is stored"""
        raw = self.store.get_item(self.storage_key)

        if raw is not None:
            try:
                self._offences = _OFFENCE_LIST.validate_json(raw)
                return
            except ValidationError as e:
                print(f"[WARN] Stored offences unreadable, reinstalling seed data: {e.error_count()} error(s)")

        seeded = [o.model_copy() for o in SEED_OFFENCES] if self.seed_on_empty else []
        self._commit(seeded)
        print(f"[STORE] Installed {len(self._offences)} seed offences")

    def _commit(self, offences: List[Offence]):
        """
        Persist a new collection, then make it current

        If the write fails the in-memory list is left as it was.
        """
        payload = json.dumps([o.to_storage() for o in offences])
        self.store.set_item(self.storage_key, payload)
        self._offences = offences

    # ============================================
    # Subscriptions
    # ============================================

    def subscribe(self, listener: OffenceListener) -> Callable[[], None]:
        """
        Register a change listener

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, offence: Offence):
        for listener in list(self._listeners):
            try:
                listener(event, offence.model_copy())
            except Exception as e:
                print(f"[WARN] Offence listener failed on '{event}': {e}")

    # ============================================
    # Queries
    # ============================================

    def list_offences(self) -> List[Offence]:
        """All offences in insertion order (copies)"""
        return [o.model_copy() for o in self._offences]

    def get_offence(self, offence_id: str) -> Optional[Offence]:
        """Get offence by ID"""
        index = self._index_of(offence_id)
        return self._offences[index].model_copy() if index is not None else None

    def find_by_vehicle(self, vehicle_number: str) -> List[Offence]:
        """All offences for a vehicle (case-insensitive exact match)"""
        wanted = (vehicle_number or "").strip().lower()
        return [
            o.model_copy() for o in self._offences
            if o.vehicle_number.lower() == wanted
        ]

    def count(self) -> int:
        return len(self._offences)

    def _index_of(self, offence_id: str) -> Optional[int]:
        for index, offence in enumerate(self._offences):
            if offence.id == offence_id:
                return index
        return None

    def _replaced(self, index: int, offence: Offence) -> List[Offence]:
        offences = list(self._offences)
        offences[index] = offence
        return offences

    # ============================================
    # Mutations
    # ============================================

    def _next_id(self) -> str:
        """
        Next id from the collection size: OFF + pad(count + 1)

        Numbers already taken (possible after a deletion) are skipped.
        """
        taken = {o.id for o in self._offences}
        sequence = len(self._offences) + 1
        candidate = f"{self.id_prefix}{sequence:0{self.id_padding}d}"

        while candidate in taken:
            sequence += 1
            candidate = f"{self.id_prefix}{sequence:0{self.id_padding}d}"

        return candidate

    def create_offence(self, fields: Union[OffenceCreate, Dict]) -> Offence:
        """
        Record a new offence

        Args:
            fields: OffenceCreate or a dict with its fields (snake_case or camelCase)

        Returns:
            The stored offence, status Pending

        Raises:
            pydantic.ValidationError: invalid fields (nothing is stored)
        """
        data = fields if isinstance(fields, OffenceCreate) else OffenceCreate.model_validate(fields)

        offence = Offence(
            id=self._next_id(),
            payment_status=PaymentStatus.PENDING,
            **data.model_dump(),
        )

        self._commit(self._offences + [offence])

        print(f"[OFFENCE] Recorded: {offence.id} {offence.vehicle_number} ({offence.offence_type.value}, N{offence.fine_amount:,.0f})")

        self._notify(self.EVENT_CREATED, offence)
        return offence.model_copy()

    def update_offence(self, offence_id: str, fields: Union[OffenceUpdate, Dict]) -> Optional[Offence]:
        """
        Merge editable fields into an offence

        Args:
            offence_id: Offence ID
            fields: OffenceUpdate or a dict of fields to change

        Returns:
            Updated offence, or None if the id is unknown

        Raises:
            pydantic.ValidationError: invalid fields (nothing is changed)
        """
        data = fields if isinstance(fields, OffenceUpdate) else OffenceUpdate.model_validate(fields)

        index = self._index_of(offence_id)
        if index is None:
            return None

        updated = self._offences[index].model_copy(update=data.changes())
        self._commit(self._replaced(index, updated))

        print(f"[OFFENCE] Updated: {offence_id}")

        self._notify(self.EVENT_UPDATED, updated)
        return updated.model_copy()

    def delete_offence(self, offence_id: str) -> bool:
        """
        Remove an offence

        Returns:
            True if a record was removed, False if the id is unknown
        """
        index = self._index_of(offence_id)
        if index is None:
            return False

        removed = self._offences[index]
        self._commit(self._offences[:index] + self._offences[index + 1:])

        print(f"[OFFENCE] Deleted: {offence_id}")

        self._notify(self.EVENT_DELETED, removed)
        return True

    def mark_paid(
        self,
        offence_id: str,
        transaction_id: str,
        gateway_ref: str,
        payment_date: Optional[str] = None,
    ) -> Optional[Offence]:
        """
        Mark an offence's fine as paid

        Status only ever moves to Paid. Marking an already-paid offence
        again replaces its payment metadata.

        Args:
            offence_id: Offence ID
            transaction_id: Gateway transaction ID (TXN-xxxxxx)
            gateway_ref: Gateway reference (REF-xxxxxx)
            payment_date: ISO timestamp (default: now, UTC)

        Returns:
            Paid offence, or None if the id is unknown
        """
        index = self._index_of(offence_id)
        if index is None:
            return None

        paid = self._offences[index].model_copy(update={
            "payment_status": PaymentStatus.PAID,
            "transaction_id": transaction_id,
            "gateway_ref": gateway_ref,
            "payment_date": payment_date or datetime.now(timezone.utc).isoformat(),
        })
        self._commit(self._replaced(index, paid))

        print(f"[PAYMENT] Offence paid: {offence_id} ({transaction_id})")

        self._notify(self.EVENT_PAID, paid)
        return paid.model_copy()
