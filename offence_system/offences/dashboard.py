"""
Dashboard Aggregation

Pure functions over a list of offences, plus two small views:
- AdminDashboard: whole-collection statistics, refreshed on every change
- UserDashboard: one vehicle's offences and amounts

Nothing here mutates offences.
"""

from typing import Dict, List, Optional

from offence_system.models.dashboard import AdminDashboardStats, UserDashboardStats
from offence_system.models.offence import Offence, PaymentStatus
from offence_system.offences.offence_repository import OffenceRepository


STATUS_FILTERS = ("all", PaymentStatus.PAID.value, PaymentStatus.PENDING.value)


def total_fines(offences: List[Offence]) -> float:
    return sum(o.fine_amount for o in offences)


def paid_fines(offences: List[Offence]) -> float:
    return sum(o.fine_amount for o in offences if o.payment_status == PaymentStatus.PAID)


def pending_fines(offences: List[Offence]) -> float:
    """Total minus paid"""
    return total_fines(offences) - paid_fines(offences)


def offence_type_counts(offences: List[Offence]) -> Dict[str, int]:
    """Occurrences per offence type, in first-seen order"""
    counts: Dict[str, int] = {}
    for o in offences:
        counts[o.offence_type.value] = counts.get(o.offence_type.value, 0) + 1
    return counts


def most_common_offence_type(offences: List[Offence]) -> Optional[str]:
    """
    Offence type with the highest count

    Ties go to the type encountered first. None for an empty list.
    """
    counts = offence_type_counts(offences)
    if not counts:
        return None
    # max() keeps the first of equal keys
    return max(counts, key=counts.get)


def repeat_offenders(offences: List[Offence]) -> List[str]:
    """Vehicle numbers with more than one offence, in first-seen order"""
    counts: Dict[str, int] = {}
    for o in offences:
        counts[o.vehicle_number] = counts.get(o.vehicle_number, 0) + 1
    return [vehicle for vehicle, count in counts.items() if count > 1]


def search_offences(offences: List[Offence], term: Optional[str]) -> List[Offence]:
    """
    Admin search

    Case-insensitive substring match on id, offender name and
    vehicle number. An empty term matches everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(offences)

    return [
        o for o in offences
        if needle in o.id.lower()
        or needle in o.offender_name.lower()
        or needle in o.vehicle_number.lower()
    ]


def filter_by_status(offences: List[Offence], status: str = "all") -> List[Offence]:
    """
    Filter by payment status

    Args:
        status: "all", "Paid" or "Pending"
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status}")

    if status == "all":
        return list(offences)
    return [o for o in offences if o.payment_status.value == status]


def compute_admin_stats(offences: List[Offence]) -> AdminDashboardStats:
    """Stat cards for the admin dashboard"""
    paid = paid_fines(offences)
    total = total_fines(offences)
    paid_count = len([o for o in offences if o.payment_status == PaymentStatus.PAID])

    return AdminDashboardStats(
        total_offences=len(offences),
        total_fines=total,
        paid_fines=paid,
        pending_fines=pending_fines(offences),
        paid_count=paid_count,
        pending_count=len(offences) - paid_count,
        most_common_offence=most_common_offence_type(offences),
        offences_by_type=offence_type_counts(offences),
        repeat_offenders=repeat_offenders(offences),
    )


def compute_user_stats(vehicle_number: str, offences: List[Offence]) -> UserDashboardStats:
    """Stat cards for a vehicle owner"""
    paid = paid_fines(offences)
    total = total_fines(offences)

    return UserDashboardStats(
        vehicle_number=vehicle_number,
        total_offences=len(offences),
        total_fines=total,
        paid_amount=paid,
        pending_amount=pending_fines(offences),
    )


class AdminDashboard:
    """
    Admin dashboard view

    Subscribes to the repository and recomputes its statistics
    whenever an offence is created, updated, deleted or paid.
    """

    def __init__(self, repository: OffenceRepository):
        self.repository = repository
        self.refresh_count = 0

        self._stats = compute_admin_stats(repository.list_offences())
        self._unsubscribe = repository.subscribe(self._on_change)

    def _on_change(self, event: str, offence: Offence):
        self.refresh()

    def refresh(self) -> AdminDashboardStats:
        self._stats = compute_admin_stats(self.repository.list_offences())
        self.refresh_count += 1
        return self._stats

    @property
    def stats(self) -> AdminDashboardStats:
        return self._stats

    def search(self, term: Optional[str] = None) -> List[Offence]:
        return search_offences(self.repository.list_offences(), term)

    def close(self):
        """Stop listening to repository changes"""
        self._unsubscribe()


class UserDashboard:
    """
    Vehicle-owner dashboard view

    Reads the repository on every call, so it is always current.
    """

    def __init__(self, repository: OffenceRepository, vehicle_number: str):
        self.repository = repository
        self.vehicle_number = vehicle_number

    def offences(self, status: str = "all") -> List[Offence]:
        return filter_by_status(self.repository.find_by_vehicle(self.vehicle_number), status)

    @property
    def stats(self) -> UserDashboardStats:
        return compute_user_stats(
            self.vehicle_number,
            self.repository.find_by_vehicle(self.vehicle_number),
        )
