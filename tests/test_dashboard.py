"""
Tests for Dashboard Aggregation

Totals, most common offence type, repeat offenders, admin search,
the vehicle-owner status filter and live refresh of admin stats.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from offence_system.database.database import Base, init_db
from offence_system.database.kv_store import KeyValueStore
from offence_system.models.offence import Offence
from offence_system.offences.dashboard import (
    AdminDashboard,
    UserDashboard,
    compute_admin_stats,
    compute_user_stats,
    filter_by_status,
    most_common_offence_type,
    pending_fines,
    repeat_offenders,
    search_offences,
    total_fines,
    paid_fines,
)
from offence_system.offences.offence_repository import OffenceRepository, SEED_OFFENCES


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


def make_offence(offence_id, vehicle, offence_type="Speeding", fine=1000, status="Pending"):
    return Offence(
        id=offence_id,
        offender_name="Test Driver",
        vehicle_number=vehicle,
        offence_type=offence_type,
        location="Lafia",
        date_time="2025-01-01T00:00",
        fine_amount=fine,
        payment_status=status,
    )


# ============================================
# Aggregates
# ============================================

class TestAggregates:
    """Test aggregate functions over the seed data"""

    def test_totals(self):
        assert total_fines(SEED_OFFENCES) == 45000
        assert paid_fines(SEED_OFFENCES) == 5000
        assert pending_fines(SEED_OFFENCES) == 40000

    def test_empty_totals(self):
        assert total_fines([]) == 0
        assert pending_fines([]) == 0

    def test_most_common_tie_goes_to_first_seen(self):
        """All seed types occur once; Speeding is encountered first"""
        assert most_common_offence_type(SEED_OFFENCES) == "Speeding"

    def test_most_common_by_count(self):
        offences = [
            make_offence("OFF001", "A", "Speeding"),
            make_offence("OFF002", "B", "Overloading"),
            make_offence("OFF003", "C", "Overloading"),
        ]
        assert most_common_offence_type(offences) == "Overloading"

    def test_most_common_empty(self):
        assert most_common_offence_type([]) is None

    def test_repeat_offenders(self):
        offences = [
            make_offence("OFF001", "LAG-1"),
            make_offence("OFF002", "NAS-2"),
            make_offence("OFF003", "LAG-1"),
            make_offence("OFF004", "ABJ-3"),
            make_offence("OFF005", "NAS-2"),
        ]
        assert repeat_offenders(offences) == ["LAG-1", "NAS-2"]

    def test_no_repeat_offenders_in_seed(self):
        assert repeat_offenders(SEED_OFFENCES) == []

    def test_admin_stats(self):
        stats = compute_admin_stats(SEED_OFFENCES)

        assert stats.total_offences == 3
        assert stats.total_fines == 45000
        assert stats.paid_count == 1
        assert stats.pending_count == 2
        assert stats.most_common_offence == "Speeding"
        assert stats.offences_by_type == {
            "Speeding": 1,
            "Seatbelt Violation": 1,
            "Dangerous Driving": 1,
        }

    def test_pending_figures_use_helper(self):
        paid_one = [make_offence("OFF001", "A", fine=3000, status="Paid"), make_offence("OFF002", "A", fine=7000)]

        assert compute_admin_stats(paid_one).pending_fines == pending_fines(paid_one) == 7000
        assert compute_user_stats("A", paid_one).pending_amount == pending_fines(paid_one)

    def test_admin_stats_empty(self):
        stats = compute_admin_stats([])
        assert stats.total_offences == 0
        assert stats.most_common_offence is None


# ============================================
# Search & Filter
# ============================================

class TestSearchAndFilter:
    """Test admin search and status filter"""

    def test_search_vehicle_prefix(self):
        assert [o.id for o in search_offences(SEED_OFFENCES, "LAG")] == ["OFF001", "OFF003"]

    def test_search_case_insensitive_name(self):
        assert [o.id for o in search_offences(SEED_OFFENCES, "fatima")] == ["OFF002"]

    def test_search_by_id(self):
        assert [o.id for o in search_offences(SEED_OFFENCES, "off003")] == ["OFF003"]

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_empty_search_returns_all(self, term):
        assert len(search_offences(SEED_OFFENCES, term)) == 3

    def test_search_no_match(self):
        assert search_offences(SEED_OFFENCES, "KAN-") == []

    def test_filter_paid(self):
        assert [o.id for o in filter_by_status(SEED_OFFENCES, "Paid")] == ["OFF002"]

    def test_filter_pending(self):
        assert [o.id for o in filter_by_status(SEED_OFFENCES, "Pending")] == ["OFF001", "OFF003"]

    def test_filter_all(self):
        assert len(filter_by_status(SEED_OFFENCES, "all")) == 3

    def test_filter_unknown_status(self):
        with pytest.raises(ValueError):
            filter_by_status(SEED_OFFENCES, "Overdue")


# ============================================
# Dashboard Views
# ============================================

class TestAdminDashboard:
    """Test live admin statistics"""

    def test_refreshes_on_create(self, repository):
        dashboard = AdminDashboard(repository)

        repository.create_offence({
            "offenderName": "Musa Ibrahim",
            "vehicleNumber": "LAG-123-AB",
            "offenceType": "Speeding",
            "location": "Akwanga Road",
            "dateTime": "2025-02-01T08:00",
            "fineAmount": 10000,
        })

        assert dashboard.stats.total_offences == 4
        assert dashboard.stats.total_fines == 55000
        assert dashboard.stats.repeat_offenders == ["LAG-123-AB"]
        assert dashboard.refresh_count == 1

    def test_refreshes_on_payment(self, repository):
        dashboard = AdminDashboard(repository)

        repository.mark_paid("OFF001", "TXN-123456", "REF-ABCDEF")

        assert dashboard.stats.paid_fines == 20000
        assert dashboard.stats.pending_fines == 25000

    def test_close_stops_refresh(self, repository):
        dashboard = AdminDashboard(repository)
        dashboard.close()

        repository.delete_offence("OFF001")

        assert dashboard.stats.total_offences == 3
        assert dashboard.refresh().total_offences == 2

    def test_search(self, repository):
        assert [o.id for o in AdminDashboard(repository).search("LAG")] == ["OFF001", "OFF003"]


class TestUserDashboard:
    """Test the vehicle-owner view"""

    def test_own_offences_only(self, repository):
        dashboard = UserDashboard(repository, "NAS-456-CD")

        offences = dashboard.offences()
        assert [o.id for o in offences] == ["OFF002"]
        assert offences[0].payment_status.value == "Paid"

    def test_stats(self, repository):
        stats = UserDashboard(repository, "nas-456-cd").stats

        assert stats.total_offences == 1
        assert stats.total_fines == 5000
        assert stats.paid_amount == 5000
        assert stats.pending_amount == 0

    def test_status_filter(self, repository):
        dashboard = UserDashboard(repository, "NAS-456-CD")

        assert dashboard.offences("Pending") == []
        assert len(dashboard.offences("Paid")) == 1

    def test_unknown_vehicle(self, repository):
        dashboard = UserDashboard(repository, "KAN-000-ZZ")

        assert dashboard.offences() == []
        assert dashboard.stats.total_fines == 0
