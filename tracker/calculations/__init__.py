"""
EVC Track Calculation Module

Derived metrics for charging sessions and expenses: energy from battery
percentages, home charging cost, calendar aggregation and the EV-vs-gas ROI
estimate.

Usage:
    from calculations import energy_from_percent, home_charge_cost
    from calculations.constants import CHARGE_TYPES
"""

# Energy
from .energy import (
    energy_from_percent,
    percent_delta,
    total_energy,
)

# Financial
from .financial import (
    distance_from_odometers,
    estimate_roi,
    ev_cost_per_distance,
    home_charge_cost,
    total_cost,
)

# Aggregation
from .aggregation import (
    cost_by_charge_type,
    cost_trend,
    monthly_buckets,
    totals_by_currency,
    yearly_totals,
)

# Constants (re-export for convenience)
from .constants import (
    CHARGE_TYPES,
    DEFAULT_CURRENCY,
    EXPENSE_CATEGORIES,
    FAST_CHARGE_TYPES,
    MAX_PERCENT,
    MIN_PERCENT,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    SUPPORTED_CURRENCIES,
)

__all__ = [
    # Energy
    "energy_from_percent",
    "percent_delta",
    "total_energy",
    # Financial
    "home_charge_cost",
    "total_cost",
    "distance_from_odometers",
    "ev_cost_per_distance",
    "estimate_roi",
    # Aggregation
    "totals_by_currency",
    "monthly_buckets",
    "yearly_totals",
    "cost_by_charge_type",
    "cost_trend",
    # Constants
    "CHARGE_TYPES",
    "FAST_CHARGE_TYPES",
    "EXPENSE_CATEGORIES",
    "SUPPORTED_CURRENCIES",
    "DEFAULT_CURRENCY",
    "MIN_PERCENT",
    "MAX_PERCENT",
    "STATUS_ACTIVE",
    "STATUS_COMPLETED",
]
