"""
Tests for the charging session service (derivation and lifecycle).
"""

from datetime import datetime, timedelta, timezone

import pytest

from exceptions import ValidationError
from services import charging_service
from utils.error_codes import ErrorCode
from utils.time_utils import format_datetime_iso

from factories import ProfileFactory


class TestDeriveEnergyAndCost:
    def test_kwh_and_home_cost(self):
        derived = charging_service.derive_energy_and_cost(
            {"start_percent": 20, "end_percent": 80},
            {"battery_capacity": 75.0, "home_rate": 30},
            is_home_charge=True,
        )
        assert derived["kwh"] == 45.0
        assert derived["cost"] == 1350

    def test_supplied_values_win(self):
        derived = charging_service.derive_energy_and_cost(
            {"start_percent": 20, "end_percent": 80, "kwh": 40.0, "cost": 999},
            {"battery_capacity": 75.0, "home_rate": 30},
            is_home_charge=True,
        )
        assert derived["kwh"] == 40.0
        assert derived["cost"] == 999

    def test_cost_only_for_home_charge(self):
        derived = charging_service.derive_energy_and_cost(
            {"start_percent": 20, "end_percent": 80},
            {"battery_capacity": 75.0, "home_rate": 30},
        )
        assert derived["kwh"] == 45.0
        assert "cost" not in derived

    def test_no_capacity_no_kwh(self):
        derived = charging_service.derive_energy_and_cost(
            {"start_percent": 20, "end_percent": 80},
            {"battery_capacity": None, "home_rate": 30},
            is_home_charge=True,
        )
        assert "kwh" not in derived
        assert "cost" not in derived


class TestAddSession:
    def test_manual_entry_is_completed(self, store):
        ProfileFactory.create(store)

        session = charging_service.add_session(
            store, {"start_percent": 20, "end_percent": 80}, is_home_charge=True
        )

        assert session["status"] == "completed"
        assert session["kwh"] == 45.0
        assert session["cost"] == 1350
        assert session["currency"] == "JPY"
        assert session["charge_type"] == "standard"

    def test_currency_defaults_to_profile(self, store):
        ProfileFactory.create(store, currency="EUR")

        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 50, "cost": 12})

        assert session["currency"] == "EUR"

    def test_without_profile(self, store):
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80, "cost": 500})

        assert session["kwh"] is None
        assert session["currency"] == "JPY"

    def test_without_end_percent_is_active(self, store):
        session = charging_service.add_session(store, {"start_percent": 20})
        assert session["status"] == "active"


class TestActiveSessionLifecycle:
    def test_start_then_complete(self, store):
        ProfileFactory.create(store)

        started = charging_service.start_session(store, {"start_percent": 30, "charge_type": "level2"})
        assert started["status"] == "active"
        assert started["cost"] is None
        assert started["end_percent"] is None

        completed = charging_service.complete_session(
            store, started["id"], {"end_percent": 90}, is_home_charge=True
        )

        assert completed["status"] == "completed"
        assert completed["end_percent"] == 90
        assert completed["kwh"] == 45.0
        assert completed["cost"] == 1350

    def test_second_start_rejected(self, store):
        charging_service.start_session(store, {"start_percent": 30})

        with pytest.raises(ValidationError) as exc_info:
            charging_service.start_session(store, {"start_percent": 40})
        assert exc_info.value.error_code == ErrorCode.E403_SESSION_ALREADY_ACTIVE

    def test_complete_requires_active(self, store):
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})

        with pytest.raises(ValidationError) as exc_info:
            charging_service.complete_session(store, session["id"], {"end_percent": 90})
        assert exc_info.value.error_code == ErrorCode.E401_SESSION_NOT_ACTIVE

    def test_complete_requires_end_percent(self, store):
        started = charging_service.start_session(store, {"start_percent": 30})

        with pytest.raises(ValidationError) as exc_info:
            charging_service.complete_session(store, started["id"], {})
        assert exc_info.value.field == "end_percent"

    def test_complete_rejects_lower_end(self, store):
        started = charging_service.start_session(store, {"start_percent": 30})

        with pytest.raises(ValidationError):
            charging_service.complete_session(store, started["id"], {"end_percent": 10})

    def test_active_session_elapsed(self, store):
        started_at = datetime.now(timezone.utc) - timedelta(hours=1, minutes=2, seconds=5)
        charging_service.start_session(store, {"start_percent": 30, "charged_at": format_datetime_iso(started_at)})

        active = charging_service.get_active_session(store)

        assert active["session"]["status"] == "active"
        assert active["elapsed"].startswith("01:02:")
        assert active["elapsed_seconds"] >= 3725

    def test_no_active_session(self, store):
        charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})
        assert charging_service.get_active_session(store) is None

    def test_missing_status_counts_as_completed(self):
        assert charging_service.is_active({"status": None}) is False


class TestEditSession:
    def test_percent_change_recomputes_kwh(self, store):
        ProfileFactory.create(store)
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})

        edited = charging_service.edit_session(store, session["id"], {"end_percent": 60})

        assert edited["kwh"] == 30.0

    def test_explicit_kwh_kept(self, store):
        ProfileFactory.create(store)
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})

        edited = charging_service.edit_session(store, session["id"], {"end_percent": 60, "kwh": 33.3})

        assert edited["kwh"] == 33.3

    def test_home_charge_recomputes_cost(self, store):
        ProfileFactory.create(store)
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80, "cost": 100})

        edited = charging_service.edit_session(store, session["id"], {"end_percent": 60}, is_home_charge=True)

        assert edited["cost"] == 900

    def test_end_below_start_rejected(self, store):
        session = charging_service.add_session(store, {"start_percent": 50, "end_percent": 80})

        with pytest.raises(ValidationError):
            charging_service.edit_session(store, session["id"], {"end_percent": 40})

    def test_delete(self, store):
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})

        charging_service.delete_session(store, session["id"])

        assert store.list_sessions() == []

    def test_cleared_timestamp_keeps_original(self, store):
        session = charging_service.add_session(
            store, {"start_percent": 20, "end_percent": 80, "charged_at": "2026-10-01T10:00:00.000Z"}
        )

        edited = charging_service.edit_session(store, session["id"], {"charged_at": None, "cost": 600})

        assert edited["charged_at"] == "2026-10-01T10:00:00.000Z"
        assert edited["cost"] == 600

    def test_reopen_rejected_while_another_active(self, store):
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})
        charging_service.start_session(store, {"start_percent": 30})

        with pytest.raises(ValidationError) as exc_info:
            charging_service.edit_session(store, session["id"], {"status": "active"})
        assert exc_info.value.error_code == ErrorCode.E403_SESSION_ALREADY_ACTIVE

    def test_reopen_allowed_when_nothing_active(self, store):
        session = charging_service.add_session(store, {"start_percent": 20, "end_percent": 80})

        edited = charging_service.edit_session(store, session["id"], {"status": "active"})

        assert edited["status"] == "active"
