"""
Charging session service for EVC Track.

Handles the session lifecycle (manual entry, start, completion, edit) and
fills in derived values from the owner's profile before anything is saved:

- ``kwh`` from the battery percent delta and the battery capacity
- ``cost`` from ``kwh`` and the home rate, for home charges
"""

import logging
from typing import Any, Dict, Optional

from calculations import energy_from_percent, home_charge_cost
from calculations.constants import DEFAULT_CHARGE_TYPE, STATUS_ACTIVE, STATUS_COMPLETED
from exceptions import ValidationError
from services.persistence import DataStore
from services.profile_service import get_settings
from utils.error_codes import ErrorCode
from utils.time_utils import format_elapsed, parse_datetime, utc_now
from utils.validation import check_percent_order

logger = logging.getLogger(__name__)


def derive_energy_and_cost(
    fields: Dict[str, Any],
    settings: Dict[str, Any],
    is_home_charge: bool = False,
) -> Dict[str, Any]:
    """
    Fill ``kwh`` and ``cost`` that were not supplied.

    ``kwh`` comes from the percent delta when a battery capacity is set;
    ``cost`` is only derived for home charges. Supplied values always win.

    Example:
        >>> derive_energy_and_cost(
        ...     {"start_percent": 20, "end_percent": 80},
        ...     {"battery_capacity": 75.0, "home_rate": 30},
        ...     is_home_charge=True,
        ... )
        {'start_percent': 20, 'end_percent': 80, 'kwh': 45.0, 'cost': 1350.0}
    """
    derived = dict(fields)

    if derived.get("kwh") is None:
        kwh = energy_from_percent(
            derived.get("start_percent"),
            derived.get("end_percent"),
            settings.get("battery_capacity"),
        )
        if kwh is not None:
            derived["kwh"] = kwh

    if is_home_charge and derived.get("cost") is None:
        cost = home_charge_cost(derived.get("kwh"), settings.get("home_rate"))
        if cost is not None:
            derived["cost"] = cost

    return derived


def is_active(session: Dict[str, Any]) -> bool:
    # Records without a status predate active sessions and count as completed
    return session.get("status") == STATUS_ACTIVE


def add_session(store: DataStore, fields: Dict[str, Any], is_home_charge: bool = False) -> Dict[str, Any]:
    """Record a single-shot (manual) session."""
    settings = get_settings(store)
    values = derive_energy_and_cost(fields, settings, is_home_charge)

    if not values.get("currency"):
        values["currency"] = settings["currency"]
    if not values.get("charge_type"):
        values["charge_type"] = DEFAULT_CHARGE_TYPE
    if not values.get("status"):
        values["status"] = STATUS_COMPLETED if values.get("end_percent") is not None else STATUS_ACTIVE
    if values.get("charged_at") is None:
        values.pop("charged_at", None)

    session = store.add_session(values)
    logger.info(f"Added {store.mode} charging session {session['id']}")
    return session


def ensure_no_other_active(store: DataStore, session_id: Optional[str] = None) -> None:
    """Only one session may be active at a time."""
    active = find_active_session(store)
    if active is not None and active["id"] != session_id:
        raise ValidationError(
            "A charging session is already active",
            field="status",
            value=active["id"],
            error_code=ErrorCode.E403_SESSION_ALREADY_ACTIVE,
        )


def start_session(store: DataStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Open an active session; cost and end percent stay empty until completion."""
    ensure_no_other_active(store)

    settings = get_settings(store)
    values = {
        "start_percent": fields["start_percent"],
        "charge_type": fields.get("charge_type") or DEFAULT_CHARGE_TYPE,
        "odometer": fields.get("odometer"),
        "currency": fields.get("currency") or settings["currency"],
        "cost": None,
        "end_percent": None,
        "kwh": None,
        "status": STATUS_ACTIVE,
    }
    if fields.get("charged_at"):
        values["charged_at"] = fields["charged_at"]

    session = store.add_session(values)
    logger.info(f"Started {store.mode} charging session {session['id']} at {session['start_percent']}%")
    return session


def complete_session(
    store: DataStore,
    session_id: str,
    fields: Dict[str, Any],
    is_home_charge: bool = False,
) -> Dict[str, Any]:
    """Close an active session with its end percent and (optionally) cost."""
    session = store.get_session(session_id)
    if not is_active(session):
        raise ValidationError(
            "Charging session is not active",
            field="status",
            value=session.get("status") or STATUS_COMPLETED,
            error_code=ErrorCode.E401_SESSION_NOT_ACTIVE,
        )

    if fields.get("end_percent") is None:
        raise ValidationError(
            "end_percent is required",
            field="end_percent",
            error_code=ErrorCode.E002_MISSING_REQUIRED_FIELD,
        )

    check_percent_order(session["start_percent"], fields["end_percent"])

    updates = {k: v for k, v in fields.items() if k in ("end_percent", "cost", "kwh", "odometer")}
    merged = derive_energy_and_cost({**session, **updates}, get_settings(store), is_home_charge)
    updates["kwh"] = merged.get("kwh")
    updates["cost"] = merged.get("cost")
    updates["status"] = STATUS_COMPLETED

    return store.update_session(session_id, updates)


def edit_session(
    store: DataStore,
    session_id: str,
    updates: Dict[str, Any],
    is_home_charge: bool = False,
) -> Dict[str, Any]:
    """
    Apply a partial edit.

    When either percent changes and ``kwh`` was not part of the edit, ``kwh``
    is recomputed from the new delta (and cleared if it no longer derives).
    """
    session = store.get_session(session_id)
    values = dict(updates)
    if "charged_at" in values and values["charged_at"] is None:
        # The timestamp is required on stored records; clearing it keeps the old one
        del values["charged_at"]

    merged = {**session, **values}
    check_percent_order(merged.get("start_percent"), merged.get("end_percent"))

    if values.get("status") == STATUS_ACTIVE and not is_active(session):
        ensure_no_other_active(store, session_id)

    percents_changed = any(
        field in updates and updates[field] != session.get(field) for field in ("start_percent", "end_percent")
    )
    settings = get_settings(store)
    if percents_changed and "kwh" not in values:
        merged["kwh"] = None
        values["kwh"] = derive_energy_and_cost(merged, settings).get("kwh")
        merged["kwh"] = values["kwh"]

    if is_home_charge and "cost" not in values:
        merged["cost"] = None
        cost = derive_energy_and_cost(merged, settings, is_home_charge=True).get("cost")
        if cost is not None:
            values["cost"] = cost

    if "end_percent" in updates and updates["end_percent"] is not None and is_active(session):
        values.setdefault("status", STATUS_COMPLETED)

    return store.update_session(session_id, values)


def delete_session(store: DataStore, session_id: str) -> None:
    store.delete_session(session_id)
    logger.info(f"Deleted {store.mode} charging session {session_id}")


def find_active_session(store: DataStore) -> Optional[Dict[str, Any]]:
    """Most recently started active session, if any."""
    for session in store.list_sessions():
        if is_active(session):
            return session
    return None


def get_active_session(store: DataStore) -> Optional[Dict[str, Any]]:
    """Active session with its elapsed time, or None."""
    session = find_active_session(store)
    if session is None:
        return None

    started = parse_datetime(session.get("charged_at"))
    elapsed_seconds = (utc_now() - started).total_seconds() if started else 0
    return {
        "session": session,
        "elapsed_seconds": max(int(elapsed_seconds), 0),
        "elapsed": format_elapsed(elapsed_seconds),
    }
