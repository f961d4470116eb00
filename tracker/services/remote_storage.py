"""
Authenticated-mode persistence for EVC Track.

Every query is scoped to the owner id handed over by the auth proxy. A failed
statement is rolled back and surfaced as StoreError carrying the driver's
message; nothing is retried.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from exceptions import RecordNotFoundError, StoreError
from models import ChargingSession, Profile, VehicleExpense
from services.persistence import (
    EXPENSE_FIELDS,
    PROFILE_FIELDS,
    SESSION_FIELDS,
    DataStore,
    only_fields,
)
from utils.time_utils import parse_datetime, utc_now

logger = logging.getLogger(__name__)

DATE_FIELDS = ("charged_at", "expense_date")


def _to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert ISO timestamp strings to datetimes for the date columns."""
    values = dict(fields)
    for name in DATE_FIELDS:
        if values.get(name) is not None:
            values[name] = parse_datetime(values[name])
    return values


def _parse_id(record_id: str, entity: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(record_id))
    except ValueError:
        raise RecordNotFoundError(entity, record_id)


class RemoteDataStore(DataStore):
    """DataStore backed by the relational database, scoped to one owner."""

    mode = "authenticated"

    def __init__(self, db, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error(f"Remote store {operation} failed for owner {self.owner_id}: {message}")
            raise StoreError(message, operation=operation)

    def _owned(self, model):
        return self.db.query(model).filter(model.user_id == self.owner_id)

    def _get_row(self, model, record_id: str, entity: str):
        row = self._owned(model).filter(model.id == _parse_id(record_id, entity)).first()
        if row is None:
            raise RecordNotFoundError(entity, record_id)
        return row

    def _insert(self, model, fields: Dict[str, Any], operation: str) -> Dict[str, Any]:
        with self._guard(operation):
            row = model(user_id=self.owner_id, **_to_columns(fields))
            self.db.add(row)
            self.db.commit()
            return row.to_dict()

    def _update(self, model, record_id: str, updates: Dict[str, Any], entity: str, operation: str):
        with self._guard(operation):
            row = self._get_row(model, record_id, entity)
            for field, value in _to_columns(updates).items():
                setattr(row, field, value)
            self.db.commit()
            return row.to_dict()

    def _delete(self, model, record_id: str, entity: str, operation: str) -> None:
        with self._guard(operation):
            row = self._get_row(model, record_id, entity)
            self.db.delete(row)
            self.db.commit()

    # Charging sessions

    def list_sessions(self) -> List[Dict[str, Any]]:
        with self._guard("select_sessions"):
            rows = self._owned(ChargingSession).order_by(desc(ChargingSession.charged_at)).all()
            return [r.to_dict() for r in rows]

    def get_session(self, session_id: str) -> Dict[str, Any]:
        with self._guard("select_session"):
            return self._get_row(ChargingSession, session_id, "Charging session").to_dict()

    def add_session(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = only_fields(fields, SESSION_FIELDS)
        values["charged_at"] = values.get("charged_at") or utc_now()
        return self._insert(ChargingSession, values, "insert_session")

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._update(
            ChargingSession, session_id, only_fields(updates, SESSION_FIELDS), "Charging session", "update_session"
        )

    def delete_session(self, session_id: str) -> None:
        self._delete(ChargingSession, session_id, "Charging session", "delete_session")

    # Vehicle expenses

    def list_expenses(self) -> List[Dict[str, Any]]:
        with self._guard("select_expenses"):
            rows = self._owned(VehicleExpense).order_by(desc(VehicleExpense.expense_date)).all()
            return [r.to_dict() for r in rows]

    def get_expense(self, expense_id: str) -> Dict[str, Any]:
        with self._guard("select_expense"):
            return self._get_row(VehicleExpense, expense_id, "Expense").to_dict()

    def add_expense(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = only_fields(fields, EXPENSE_FIELDS)
        values["expense_date"] = values.get("expense_date") or utc_now()
        return self._insert(VehicleExpense, values, "insert_expense")

    def update_expense(self, expense_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._update(
            VehicleExpense, expense_id, only_fields(updates, EXPENSE_FIELDS), "Expense", "update_expense"
        )

    def delete_expense(self, expense_id: str) -> None:
        self._delete(VehicleExpense, expense_id, "Expense", "delete_expense")

    # Profile

    def get_profile(self) -> Optional[Dict[str, Any]]:
        with self._guard("select_profile"):
            profile = self.db.get(Profile, self.owner_id)
            return profile.to_dict() if profile else None

    def save_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._guard("upsert_profile"):
            profile = self.db.get(Profile, self.owner_id)
            if profile is None:
                profile = Profile(user_id=self.owner_id)
                self.db.add(profile)
            for field, value in only_fields(fields, PROFILE_FIELDS).items():
                setattr(profile, field, value)
            self.db.commit()
            return profile.to_dict()
