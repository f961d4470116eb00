"""
Behaviour shared by both DataStore implementations.

Every test here runs once against the local store and once against the
remote store.
"""

import pytest

from exceptions import RecordNotFoundError

from factories import ExpenseFactory, ProfileFactory, SessionFactory


class TestSessionCrud:
    def test_add_then_get(self, store):
        session = SessionFactory.create(store, cost=1234)
        fetched = store.get_session(session["id"])

        assert fetched["cost"] == 1234
        assert fetched["start_percent"] == 20
        assert fetched["end_percent"] == 80

    def test_delete_removes_exactly_that_record(self, store):
        sessions = SessionFactory.create_batch(store, 3)
        before = {s["id"]: s for s in store.list_sessions()}

        store.delete_session(sessions[1]["id"])

        after = {s["id"]: s for s in store.list_sessions()}
        assert set(after) == set(before) - {sessions[1]["id"]}
        for session_id, record in after.items():
            assert record == before[session_id]

    def test_delete_missing_raises(self, store):
        with pytest.raises(RecordNotFoundError):
            store.delete_session("00000000-0000-0000-0000-000000000000")

    def test_update_missing_raises(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_session("00000000-0000-0000-0000-000000000000", {"cost": 1})

    def test_same_record_shape(self, store):
        session = SessionFactory.create(store)
        assert set(session) == {
            "id",
            "cost",
            "start_percent",
            "end_percent",
            "charged_at",
            "kwh",
            "charge_type",
            "odometer",
            "currency",
            "status",
            "user_id",
        }


class TestExpenseCrud:
    def test_delete_removes_exactly_that_record(self, store):
        expenses = ExpenseFactory.create_batch(store, 3)

        store.delete_expense(expenses[0]["id"])

        remaining = [e["id"] for e in store.list_expenses()]
        assert sorted(remaining) == sorted(e["id"] for e in expenses[1:])

    def test_update(self, store):
        expense = ExpenseFactory.create(store)
        updated = store.update_expense(expense["id"], {"title": "Brake pads", "amount": 12000})

        assert updated["title"] == "Brake pads"
        assert store.get_expense(expense["id"])["amount"] == 12000


class TestProfile:
    def test_round_trip(self, store):
        ProfileFactory.create(store)

        assert store.get_profile() == {"battery_capacity": 75.0, "home_rate": 30, "currency": "JPY"}
