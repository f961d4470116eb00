"""
Persistence interface for EVC Track.

One ``DataStore`` interface, two implementations:

- ``LocalDataStore`` (guest mode): key-value JSON storage on this device
- ``RemoteDataStore`` (authenticated mode): relational store scoped by owner

Both take and return plain dicts with the same field names, so the services
above them never branch on which one they were given. The store is chosen
once per request in ``services.app_state``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

SESSION_FIELDS = (
    "cost",
    "start_percent",
    "end_percent",
    "charged_at",
    "kwh",
    "charge_type",
    "odometer",
    "currency",
    "status",
)

EXPENSE_FIELDS = (
    "title",
    "amount",
    "expense_date",
    "category",
    "description",
    "odometer",
    "location",
    "currency",
)

PROFILE_FIELDS = ("battery_capacity", "home_rate", "currency")


class DataStore(ABC):
    """CRUD for sessions, expenses and the owner's profile."""

    mode: str = "guest"
    owner_id: Optional[str] = None

    # Charging sessions

    @abstractmethod
    def list_sessions(self) -> List[Dict[str, Any]]:
        """All sessions, newest ``charged_at`` first."""

    @abstractmethod
    def get_session(self, session_id: str) -> Dict[str, Any]:
        """Raises RecordNotFoundError when absent."""

    @abstractmethod
    def add_session(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update_session(self, session_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        pass

    # Vehicle expenses

    @abstractmethod
    def list_expenses(self) -> List[Dict[str, Any]]:
        """All expenses, newest ``expense_date`` first."""

    @abstractmethod
    def get_expense(self, expense_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def add_expense(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update_expense(self, expense_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def delete_expense(self, expense_id: str) -> None:
        pass

    # Profile

    @abstractmethod
    def get_profile(self) -> Optional[Dict[str, Any]]:
        """The saved profile, or None when nothing has been saved yet."""

    @abstractmethod
    def save_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Upsert the given profile fields and return the full profile."""


def only_fields(data: Dict[str, Any], allowed) -> Dict[str, Any]:
    """Drop keys that are not record fields (id, user_id, flags)."""
    return {k: v for k, v in data.items() if k in allowed}
