"""
Tests for guest-mode persistence (LocalStorage and LocalDataStore).
"""

import json

import pytest

from exceptions import LocalStorageError, RecordNotFoundError
from services.local_storage import (
    BATTERY_CAPACITY_KEY,
    CURRENCY_KEY,
    EXPENSES_KEY,
    HOME_RATE_KEY,
    SESSIONS_KEY,
    LocalDataStore,
    LocalStorage,
)


def read_raw(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class TestLocalStorage:
    """String key-value storage on a JSON file."""

    def test_missing_file_is_empty(self, local_storage):
        assert local_storage.get_item("anything") is None
        assert local_storage.keys() == []

    def test_set_and_get(self, local_storage):
        local_storage.set_item("evc_currency", "USD")
        assert local_storage.get_item("evc_currency") == "USD"

    def test_values_stored_as_strings(self, local_storage):
        local_storage.set_item(BATTERY_CAPACITY_KEY, 75.0)
        assert local_storage.get_item(BATTERY_CAPACITY_KEY) == "75.0"

    def test_persisted_across_instances(self, local_storage, local_storage_path):
        local_storage.set_item("k", "v")
        assert LocalStorage(local_storage_path).get_item("k") == "v"

    def test_remove_item(self, local_storage):
        local_storage.set_item("k", "v")
        local_storage.remove_item("k")
        assert local_storage.get_item("k") is None

    def test_corrupt_file_raises(self, local_storage, local_storage_path):
        with open(local_storage_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        with pytest.raises(LocalStorageError):
            local_storage.get_item("k")

    def test_non_object_file_raises(self, local_storage, local_storage_path):
        with open(local_storage_path, "w", encoding="utf-8") as f:
            json.dump(["a", "b"], f)

        with pytest.raises(LocalStorageError):
            local_storage.keys()

    def test_no_temp_files_left_behind(self, local_storage, tmp_path):
        local_storage.set_item("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["local_storage.json"]


class TestLocalDataStoreSessions:
    def test_add_sets_id_date_and_null_owner(self, local_store):
        session = local_store.add_session({"start_percent": 20, "end_percent": 80, "cost": 500})

        assert session["id"]
        assert session["user_id"] is None
        assert session["charged_at"].endswith("Z")
        assert session["kwh"] is None

    def test_stored_as_browser_json_blob(self, local_store, local_storage_path):
        session = local_store.add_session({"start_percent": 20})

        raw = read_raw(local_storage_path)
        assert isinstance(raw[SESSIONS_KEY], str)
        assert json.loads(raw[SESSIONS_KEY])[0]["id"] == session["id"]

    def test_new_records_prepended(self, local_store, local_storage):
        first = local_store.add_session({"start_percent": 10, "charged_at": "2026-01-01T00:00:00.000Z"})
        second = local_store.add_session({"start_percent": 20, "charged_at": "2025-01-01T00:00:00.000Z"})

        stored = json.loads(local_storage.get_item(SESSIONS_KEY))
        assert [s["id"] for s in stored] == [second["id"], first["id"]]

    def test_list_newest_first(self, local_store):
        older = local_store.add_session({"start_percent": 10, "charged_at": "2026-01-01T00:00:00.000Z"})
        newer = local_store.add_session({"start_percent": 20, "charged_at": "2026-05-01T00:00:00.000Z"})
        oldest = local_store.add_session({"start_percent": 30, "charged_at": "2025-05-01T00:00:00.000Z"})

        assert [s["id"] for s in local_store.list_sessions()] == [newer["id"], older["id"], oldest["id"]]

    def test_get_missing(self, local_store):
        with pytest.raises(RecordNotFoundError):
            local_store.get_session("nope")

    def test_update_merges(self, local_store):
        session = local_store.add_session({"start_percent": 20, "cost": 500})

        updated = local_store.update_session(session["id"], {"cost": 700, "user_id": "intruder"})

        assert updated["cost"] == 700
        assert updated["start_percent"] == 20
        assert updated["user_id"] is None
        assert local_store.get_session(session["id"])["cost"] == 700

    def test_update_missing(self, local_store):
        with pytest.raises(RecordNotFoundError):
            local_store.update_session("nope", {"cost": 1})

    def test_unknown_stored_fields_preserved(self, local_store, local_storage):
        local_storage.set_item(
            SESSIONS_KEY,
            json.dumps([{"id": "legacy", "start_percent": 10, "charged_at": "2025-01-01T00:00:00.000Z", "note": "x"}]),
        )

        updated = local_store.update_session("legacy", {"cost": 100})

        assert updated["note"] == "x"

    def test_corrupt_blob_raises(self, local_store, local_storage):
        local_storage.set_item(SESSIONS_KEY, "{oops")

        with pytest.raises(LocalStorageError):
            local_store.list_sessions()


class TestLocalDataStoreExpenses:
    def test_crud(self, local_store, local_storage):
        expense = local_store.add_expense({"title": "Tires", "amount": 40000, "category": "maintenance"})
        assert local_store.get_expense(expense["id"])["title"] == "Tires"
        assert json.loads(local_storage.get_item(EXPENSES_KEY))[0]["id"] == expense["id"]

        local_store.update_expense(expense["id"], {"amount": 42000})
        assert local_store.get_expense(expense["id"])["amount"] == 42000

        local_store.delete_expense(expense["id"])
        assert local_store.list_expenses() == []

    def test_delete_missing(self, local_store):
        with pytest.raises(RecordNotFoundError):
            local_store.delete_expense("nope")


class TestLocalDataStoreProfile:
    def test_no_profile(self, local_store):
        assert local_store.get_profile() is None

    def test_save_uses_plain_string_keys(self, local_store, local_storage):
        local_store.save_profile({"battery_capacity": 75.0, "home_rate": 30, "currency": "USD"})

        assert local_storage.get_item(BATTERY_CAPACITY_KEY) == "75.0"
        assert local_storage.get_item(HOME_RATE_KEY) == "30"
        assert local_storage.get_item(CURRENCY_KEY) == "USD"
        assert local_store.get_profile() == {"battery_capacity": 75.0, "home_rate": 30.0, "currency": "USD"}

    def test_partial_save_keeps_other_keys(self, local_store):
        local_store.save_profile({"battery_capacity": 75.0, "home_rate": 30})
        local_store.save_profile({"home_rate": 25})

        assert local_store.get_profile()["battery_capacity"] == 75.0
        assert local_store.get_profile()["home_rate"] == 25.0

    def test_clearing_a_setting(self, local_store):
        local_store.save_profile({"battery_capacity": 75.0})
        local_store.save_profile({"battery_capacity": None})

        assert local_store.get_profile()["battery_capacity"] is None

    def test_mode(self, local_storage):
        store = LocalDataStore(local_storage)
        assert store.mode == "guest"
        assert store.owner_id is None
