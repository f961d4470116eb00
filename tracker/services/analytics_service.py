"""
Analytics service for EVC Track.

Assembles monthly, yearly, per-type, trend, summary and ROI views from
whatever the current store returns. All arithmetic lives in
``calculations``; this module only picks the records and parameters.
"""

import logging
from typing import Any, Dict, List, Optional

from calculations import (
    cost_by_charge_type,
    cost_trend,
    distance_from_odometers,
    estimate_roi,
    monthly_buckets,
    total_cost,
    total_energy,
    totals_by_currency,
    yearly_totals,
)
from calculations.constants import STATUS_ACTIVE, TREND_MONTHS
from exceptions import ValidationError
from services.persistence import DataStore
from services.profile_service import preferred_currency
from utils.error_codes import ErrorCode
from utils.time_utils import utc_now

logger = logging.getLogger(__name__)

KINDS = {
    "charging": {"date_field": "charged_at", "amount_field": "cost"},
    "expenses": {"date_field": "expense_date", "amount_field": "amount"},
}


def _records(store: DataStore, kind: str) -> List[Dict[str, Any]]:
    if kind not in KINDS:
        raise ValidationError(
            f"kind must be one of: {', '.join(KINDS)}",
            field="kind",
            value=kind,
            error_code=ErrorCode.E005_INVALID_CHOICE,
        )
    if kind == "expenses":
        return store.list_expenses()
    return store.list_sessions()


def monthly(store: DataStore, kind: str = "charging", include_records: bool = False) -> List[dict]:
    return monthly_buckets(
        _records(store, kind),
        default_currency=preferred_currency(store),
        include_records=include_records,
        **KINDS[kind],
    )


def yearly(store: DataStore, kind: str = "charging", year: Optional[int] = None) -> dict:
    return yearly_totals(
        _records(store, kind),
        year or utc_now().year,
        default_currency=preferred_currency(store),
        **KINDS[kind],
    )


def by_type(store: DataStore) -> dict:
    return cost_by_charge_type(store.list_sessions(), default_currency=preferred_currency(store))


def trend(store: DataStore, months: Optional[int] = None) -> List[dict]:
    return cost_trend(
        store.list_sessions(),
        months or TREND_MONTHS,
        default_currency=preferred_currency(store),
    )


def summary(store: DataStore) -> dict:
    """
    Lifetime charging summary.

    Averages are per currency: the total for a currency divided by the number
    of sessions recorded in it.
    """
    sessions = store.list_sessions()
    currency = preferred_currency(store)

    totals = totals_by_currency(sessions, default_currency=currency)
    counts: Dict[str, int] = {}
    for session in sessions:
        key = session.get("currency") or currency
        counts[key] = counts.get(key, 0) + 1

    average = {key: round(amount / counts[key], 2) for key, amount in totals.items() if counts.get(key)}

    return {
        "total_sessions": len(sessions),
        "active_sessions": sum(1 for s in sessions if s.get("status") == STATUS_ACTIVE),
        "totals": totals,
        "average_cost": average,
        "total_kwh": round(total_energy(s.get("kwh") for s in sessions), 2),
        "currency": currency,
    }


def roi(
    store: DataStore,
    gas_price: Optional[float],
    gas_efficiency: Optional[float],
    ev_efficiency: Optional[float],
    annual_distance: Optional[float],
) -> dict:
    """
    EV-vs-gasoline estimate from the recorded sessions.

    Only sessions in the preferred currency count, since the gas price is
    given in that currency.
    """
    currency = preferred_currency(store)
    sessions = [s for s in store.list_sessions() if (s.get("currency") or currency) == currency]

    ev_cost = total_cost(s.get("cost") for s in sessions)
    kwh = total_energy(s.get("kwh") for s in sessions)
    distance = distance_from_odometers(s.get("odometer") for s in sessions)

    estimate = estimate_roi(
        gas_price,
        gas_efficiency,
        ev_efficiency,
        annual_distance,
        ev_cost,
        kwh,
        total_distance=distance,
    )

    return {
        "currency": currency,
        "inputs": {
            "gas_price": gas_price,
            "gas_efficiency": gas_efficiency,
            "ev_efficiency": ev_efficiency,
            "annual_distance": annual_distance,
        },
        "recorded": {
            "sessions": len(sessions),
            "total_cost": round(ev_cost, 2),
            "total_kwh": round(kwh, 2),
            "total_distance": distance,
        },
        "estimate": estimate,
    }
