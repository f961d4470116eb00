"""
Energy Calculations

Derives charged energy from the battery percentage delta of a session.
"""

from typing import Iterable, Optional


def percent_delta(start_percent: Optional[float], end_percent: Optional[float]) -> Optional[float]:
    """
    Percentage points gained during a session.

    Examples:
        >>> percent_delta(20, 80)
        60
        >>> percent_delta(20, None) is None
        True
    """
    if start_percent is None or end_percent is None:
        return None
    return end_percent - start_percent


def energy_from_percent(
    start_percent: Optional[float],
    end_percent: Optional[float],
    battery_capacity_kwh: Optional[float],
) -> Optional[float]:
    """
    Convert a battery percentage delta to kWh charged.

    Only computed when the session actually gained charge and the battery
    capacity is known.

    Args:
        start_percent: Battery level at plug-in (0-100)
        end_percent: Battery level at unplug (0-100)
        battery_capacity_kwh: Usable battery capacity in kWh

    Returns:
        Energy added in kWh (rounded to 2 decimals), or None

    Examples:
        >>> energy_from_percent(20, 80, 75.0)
        45.0
        >>> energy_from_percent(80, 20, 75.0) is None
        True
    """
    delta = percent_delta(start_percent, end_percent)
    if delta is None or delta <= 0:
        return None

    if not battery_capacity_kwh or battery_capacity_kwh <= 0:
        return None

    return round(delta / 100.0 * battery_capacity_kwh, 2)


def total_energy(kwh_values: Iterable[Optional[float]]) -> float:
    """Sum of kWh values, treating missing values as zero."""
    return sum(k or 0.0 for k in kwh_values)
