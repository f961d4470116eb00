"""
Guest-mode persistence for EVC Track.

``LocalStorage`` mirrors the browser local storage API (string keys mapped to
string values) on top of a JSON file, so data exported from a browser can be
dropped in as-is and vice versa. ``LocalDataStore`` implements the
``DataStore`` interface on top of it using the same fixed keys and record
shapes as the browser client.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from typing import Any, Dict, List, Optional

from exceptions import LocalStorageError, RecordNotFoundError
from services.persistence import (
    EXPENSE_FIELDS,
    SESSION_FIELDS,
    DataStore,
    only_fields,
)
from utils.time_utils import format_datetime_iso, parse_datetime, utc_now

logger = logging.getLogger(__name__)

SESSIONS_KEY = "ev_charging_sessions"
EXPENSES_KEY = "ev_vehicle_expenses"
BATTERY_CAPACITY_KEY = "evc_battery_capacity"
HOME_RATE_KEY = "evc_home_rate"
CURRENCY_KEY = "evc_currency"


class LocalStorage:
    """String key-value storage persisted to a JSON file."""

    def __init__(self, path: str):
        self.path = path
        self.lock = threading.RLock()

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise LocalStorageError(f"Could not read local storage: {e}", path=self.path)
        if not isinstance(data, dict):
            raise LocalStorageError("Local storage is not a key-value object", path=self.path)
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".local_storage.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise LocalStorageError(f"Could not write local storage: {e}", path=self.path)

    def get_item(self, key: str) -> Optional[str]:
        with self.lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self.lock:
            data = self._read_all()
            data[key] = str(value)
            self._write_all(data)

    def remove_item(self, key: str) -> None:
        with self.lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)

    def keys(self) -> List[str]:
        with self.lock:
            return list(self._read_all().keys())


def _newest_first(records: List[dict], date_field: str) -> List[dict]:
    floor = parse_datetime("1970-01-01")
    return sorted(
        records,
        key=lambda r: parse_datetime(r.get(date_field), default=floor),
        reverse=True,
    )


def _parse_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric local setting: {raw!r}")
        return None


class LocalDataStore(DataStore):
    """DataStore backed by LocalStorage. Records are owned by the device (user_id is null)."""

    mode = "guest"
    owner_id = None

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    # Record lists

    def _load(self, key: str) -> List[dict]:
        raw = self.storage.get_item(key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError as e:
            raise LocalStorageError(f"Stored value is not valid JSON: {e}", key=key)
        if not isinstance(records, list):
            raise LocalStorageError("Stored value is not a list", key=key)
        return records

    def _save(self, key: str, records: List[dict]) -> None:
        self.storage.set_item(key, json.dumps(records, ensure_ascii=False))

    def _get(self, key: str, record_id: str, entity: str) -> dict:
        for record in self._load(key):
            if record.get("id") == record_id:
                return record
        raise RecordNotFoundError(entity, record_id)

    def _add(self, key: str, record: dict) -> dict:
        with self.storage.lock:
            records = self._load(key)
            records.insert(0, record)
            self._save(key, records)
        return record

    def _update(self, key: str, record_id: str, updates: dict, entity: str) -> dict:
        with self.storage.lock:
            records = self._load(key)
            for index, record in enumerate(records):
                if record.get("id") == record_id:
                    records[index] = {**record, **updates}
                    self._save(key, records)
                    return records[index]
        raise RecordNotFoundError(entity, record_id)

    def _delete(self, key: str, record_id: str, entity: str) -> None:
        with self.storage.lock:
            records = self._load(key)
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                raise RecordNotFoundError(entity, record_id)
            self._save(key, remaining)

    # Charging sessions

    def list_sessions(self) -> List[Dict[str, Any]]:
        return _newest_first(self._load(SESSIONS_KEY), "charged_at")

    def get_session(self, session_id: str) -> Dict[str, Any]:
        return self._get(SESSIONS_KEY, session_id, "Charging session")

    def add_session(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        record = {field: None for field in SESSION_FIELDS}
        record.update(only_fields(fields, SESSION_FIELDS))
        record["id"] = str(uuid.uuid4())
        record["charged_at"] = record.get("charged_at") or format_datetime_iso(utc_now())
        record["user_id"] = None
        return self._add(SESSIONS_KEY, record)

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._update(SESSIONS_KEY, session_id, only_fields(updates, SESSION_FIELDS), "Charging session")

    def delete_session(self, session_id: str) -> None:
        self._delete(SESSIONS_KEY, session_id, "Charging session")

    # Vehicle expenses

    def list_expenses(self) -> List[Dict[str, Any]]:
        return _newest_first(self._load(EXPENSES_KEY), "expense_date")

    def get_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._get(EXPENSES_KEY, expense_id, "Expense")

    def add_expense(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        record = {field: None for field in EXPENSE_FIELDS}
        record.update(only_fields(fields, EXPENSE_FIELDS))
        record["id"] = str(uuid.uuid4())
        record["expense_date"] = record.get("expense_date") or format_datetime_iso(utc_now())
        record["user_id"] = None
        return self._add(EXPENSES_KEY, record)

    def update_expense(self, expense_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._update(EXPENSES_KEY, expense_id, only_fields(updates, EXPENSE_FIELDS), "Expense")

    def delete_expense(self, expense_id: str) -> None:
        self._delete(EXPENSES_KEY, expense_id, "Expense")

    # Profile

    def get_profile(self) -> Optional[Dict[str, Any]]:
        with self.storage.lock:
            battery = self.storage.get_item(BATTERY_CAPACITY_KEY)
            rate = self.storage.get_item(HOME_RATE_KEY)
            currency = self.storage.get_item(CURRENCY_KEY)

        if battery is None and rate is None and currency is None:
            return None

        return {
            "battery_capacity": _parse_float(battery),
            "home_rate": _parse_float(rate),
            "currency": currency or None,
        }

    def save_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        keys = {
            "battery_capacity": BATTERY_CAPACITY_KEY,
            "home_rate": HOME_RATE_KEY,
            "currency": CURRENCY_KEY,
        }
        with self.storage.lock:
            for field, key in keys.items():
                if field in fields:
                    value = fields[field]
                    self.storage.set_item(key, "" if value is None else str(value))
            return self.get_profile() or {field: None for field in keys}
