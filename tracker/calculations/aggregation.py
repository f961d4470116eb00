"""
Aggregation Calculations

Groups sessions and expenses into calendar buckets. Totals are kept per
currency; amounts in different currencies are never added together.
"""

from collections import OrderedDict, defaultdict
from typing import Dict, Iterable, List, Optional

from utils.time_utils import month_key, month_label, parse_datetime

from .constants import DEFAULT_CURRENCY, FAST_CHARGE_TYPES


def _add(totals: Dict[str, float], currency: str, amount: Optional[float]) -> None:
    totals[currency] = round(totals.get(currency, 0.0) + (amount or 0.0), 2)


def totals_by_currency(
    records: Iterable[dict],
    amount_field: str = "cost",
    default_currency: str = DEFAULT_CURRENCY,
) -> Dict[str, float]:
    """
    Sum an amount field per currency.

    Examples:
        >>> totals_by_currency([{"cost": 500}, {"cost": 700, "currency": "USD"}])
        {'JPY': 500.0, 'USD': 700.0}
    """
    totals: Dict[str, float] = {}
    for record in records:
        _add(totals, record.get("currency") or default_currency, record.get(amount_field))
    return totals


def monthly_buckets(
    records: Iterable[dict],
    date_field: str = "charged_at",
    amount_field: str = "cost",
    default_currency: str = DEFAULT_CURRENCY,
    include_records: bool = False,
) -> List[dict]:
    """
    Bucket records by calendar month (``YYYY-MM``), newest month first.

    Each bucket carries per-currency totals and a record count. Records whose
    date cannot be parsed are skipped.

    Examples:
        >>> buckets = monthly_buckets([
        ...     {"charged_at": "2026-10-01T10:00:00.000Z", "cost": 500},
        ...     {"charged_at": "2026-10-20T10:00:00.000Z", "cost": 700},
        ... ])
        >>> buckets[0]["totals"]
        {'JPY': 1200.0}
    """
    grouped: Dict[str, List[dict]] = defaultdict(list)
    for record in records:
        dt = parse_datetime(record.get(date_field))
        if dt is None:
            continue
        grouped[month_key(dt)].append(record)

    buckets = []
    for key in sorted(grouped, reverse=True):
        month_records = sorted(
            grouped[key],
            key=lambda r: parse_datetime(r.get(date_field)),
            reverse=True,
        )
        bucket = {
            "month": key,
            "label": month_label(key),
            "count": len(month_records),
            "totals": totals_by_currency(month_records, amount_field, default_currency),
        }
        if include_records:
            bucket["records"] = month_records
        buckets.append(bucket)

    return buckets


def yearly_totals(
    records: Iterable[dict],
    year: int,
    date_field: str = "charged_at",
    amount_field: str = "cost",
    default_currency: str = DEFAULT_CURRENCY,
) -> dict:
    """Per-currency totals for a single calendar year."""
    in_year = []
    for record in records:
        dt = parse_datetime(record.get(date_field))
        if dt is not None and dt.year == year:
            in_year.append(record)

    return {
        "year": year,
        "count": len(in_year),
        "totals": totals_by_currency(in_year, amount_field, default_currency),
    }


def cost_by_charge_type(
    sessions: Iterable[dict],
    default_currency: str = DEFAULT_CURRENCY,
) -> dict:
    """
    Split charging cost between fast and standard charging.

    Fast covers the DC connector types; everything else, including sessions
    without a type, counts as standard. Per-type detail is also returned.
    """
    speed = OrderedDict([("fast", {}), ("standard", {})])
    by_type: Dict[str, dict] = {}

    for session in sessions:
        ctype = session.get("charge_type")
        currency = session.get("currency") or default_currency
        cost = session.get("cost")

        group = "fast" if ctype in FAST_CHARGE_TYPES else "standard"
        _add(speed[group], currency, cost)

        entry = by_type.setdefault(ctype or "unknown", {"count": 0, "totals": {}, "kwh": 0.0})
        entry["count"] += 1
        entry["kwh"] = round(entry["kwh"] + (session.get("kwh") or 0.0), 2)
        _add(entry["totals"], currency, cost)

    return {"by_speed": dict(speed), "by_type": by_type}


def cost_trend(
    sessions: Iterable[dict],
    months: int,
    default_currency: str = DEFAULT_CURRENCY,
) -> List[dict]:
    """
    The most recent ``months`` monthly buckets, oldest first, for charting.
    """
    buckets = monthly_buckets(sessions, default_currency=default_currency)
    recent = buckets[:months]
    return [
        {"month": b["month"], "label": b["label"], "totals": b["totals"]}
        for b in reversed(recent)
    ]
