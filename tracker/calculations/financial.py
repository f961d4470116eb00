"""
Financial Calculations

Handles cost calculations for charging and the EV-vs-gas comparison:
- Home charging cost from the configured rate
- Cost per distance from recorded sessions
- Annual ROI estimate against a gasoline vehicle
"""

from typing import Iterable, Optional


def home_charge_cost(
    kwh_added: Optional[float],
    home_rate: Optional[float],
) -> Optional[float]:
    """
    Calculate the cost of a home charging session.

    Args:
        kwh_added: Energy added to battery (kWh)
        home_rate: Home electricity rate (currency per kWh)

    Returns:
        Total charging cost, or None if either input is missing or not positive

    Examples:
        >>> home_charge_cost(45.0, 30)
        1350.0
        >>> home_charge_cost(10.0, 0.12)
        1.2
    """
    if kwh_added is None or kwh_added <= 0:
        return None

    if home_rate is None or home_rate <= 0:
        return None

    return round(kwh_added * home_rate, 2)


def total_cost(costs: Iterable[Optional[float]]) -> float:
    """Sum of costs, treating missing costs (active sessions) as zero."""
    return sum(c or 0.0 for c in costs)


def distance_from_odometers(readings: Iterable[Optional[float]]) -> Optional[float]:
    """
    Distance covered between the lowest and highest odometer readings.

    Returns None with fewer than two readings.

    Examples:
        >>> distance_from_odometers([10500, None, 10000, 11200])
        1200
        >>> distance_from_odometers([10000]) is None
        True
    """
    values = sorted(r for r in readings if r)
    if len(values) < 2:
        return None
    return values[-1] - values[0]


def ev_cost_per_distance(
    total_ev_cost: float,
    total_kwh: float,
    ev_efficiency: float,
    total_distance: Optional[float] = None,
) -> Optional[float]:
    """
    Cost of driving one distance unit on electricity.

    Uses actual cost per distance when odometer data covers a distance,
    otherwise cost per kWh divided by the EV efficiency (distance per kWh).

    Examples:
        >>> ev_cost_per_distance(1200, 0, 4, total_distance=600)
        2.0
        >>> ev_cost_per_distance(1200, 40, 4)
        7.5
    """
    if not total_ev_cost or total_ev_cost <= 0:
        return None

    if total_distance and total_distance > 0:
        return total_ev_cost / total_distance

    if total_kwh and total_kwh > 0 and ev_efficiency:
        cost_per_kwh = total_ev_cost / total_kwh
        return cost_per_kwh / ev_efficiency

    return None


def estimate_roi(
    gas_price: Optional[float],
    gas_efficiency: Optional[float],
    ev_efficiency: Optional[float],
    annual_distance: Optional[float],
    total_ev_cost: float,
    total_kwh: float,
    total_distance: Optional[float] = None,
) -> Optional[dict]:
    """
    Estimate annual savings of driving electric instead of gasoline.

    Args:
        gas_price: Fuel price per gallon/litre
        gas_efficiency: Gas vehicle distance per gallon/litre
        ev_efficiency: EV distance per kWh
        annual_distance: Distance driven per year
        total_ev_cost: Sum of recorded charging costs
        total_kwh: Sum of recorded charged energy
        total_distance: Distance covered by recorded odometer readings, if any

    Returns:
        Dictionary with annual costs and savings, or None when any input is
        missing or zero, or when recorded sessions carry no usable cost data

    Examples:
        >>> result = estimate_roi(150, 30, 4, 12000, 1200, 40)
        >>> result['annual_gas_cost']
        60000.0
        >>> result['annual_ev_cost']
        90000.0
    """
    if not gas_price or not gas_efficiency or not ev_efficiency or not annual_distance:
        return None

    annual_gas_cost = (annual_distance / gas_efficiency) * gas_price

    cost_per_distance = ev_cost_per_distance(
        total_ev_cost, total_kwh, ev_efficiency, total_distance=total_distance
    )
    if cost_per_distance is None:
        return None

    annual_ev_cost = cost_per_distance * annual_distance
    annual_savings = annual_gas_cost - annual_ev_cost

    return {
        "annual_gas_cost": round(annual_gas_cost, 2),
        "annual_ev_cost": round(annual_ev_cost, 2),
        "annual_savings": round(annual_savings, 2),
        "savings_percent": round((annual_savings / annual_gas_cost) * 100, 1),
        "ev_cost_per_distance": round(cost_per_distance, 4),
        "basis": "odometer" if total_distance and total_distance > 0 else "energy",
    }
