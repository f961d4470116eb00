"""
Vehicle expense service for EVC Track.

Maintenance, repair, insurance, tax and other costs of owning the car.
"""

import logging
from typing import Any, Dict, List

from calculations.constants import DEFAULT_EXPENSE_CATEGORY
from services.persistence import DataStore
from services.profile_service import preferred_currency

logger = logging.getLogger(__name__)


def list_expenses(store: DataStore) -> List[Dict[str, Any]]:
    return store.list_expenses()


def add_expense(store: DataStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(fields)
    if not values.get("category"):
        values["category"] = DEFAULT_EXPENSE_CATEGORY
    if not values.get("currency"):
        values["currency"] = preferred_currency(store)
    if values.get("expense_date") is None:
        values.pop("expense_date", None)

    expense = store.add_expense(values)
    logger.info(f"Added {store.mode} expense {expense['id']} ({expense['category']})")
    return expense


def update_expense(store: DataStore, expense_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(updates)
    if "expense_date" in values and values["expense_date"] is None:
        # The date is required on stored records; clearing it keeps the old one
        del values["expense_date"]
    return store.update_expense(expense_id, values)


def delete_expense(store: DataStore, expense_id: str) -> None:
    store.delete_expense(expense_id)
    logger.info(f"Deleted {store.mode} expense {expense_id}")

