"""
Profile (settings) service for EVC Track.

A missing profile is not an error: callers get the defaults.
"""

import logging
from typing import Any, Dict

from calculations.constants import DEFAULT_CURRENCY
from services.persistence import DataStore

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = {
    "battery_capacity": None,
    "home_rate": None,
    "currency": DEFAULT_CURRENCY,
}


def get_settings(store: DataStore) -> Dict[str, Any]:
    """Saved profile merged over the defaults."""
    settings = dict(DEFAULT_PROFILE)
    profile = store.get_profile()
    if profile:
        for field in DEFAULT_PROFILE:
            if profile.get(field) is not None:
                settings[field] = profile[field]
    return settings


def preferred_currency(store: DataStore) -> str:
    return get_settings(store)["currency"]


def save_settings(store: DataStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Upsert validated settings and return the effective settings."""
    store.save_profile(fields)
    logger.info(f"Saved {store.mode} profile fields: {sorted(fields)}")
    return get_settings(store)
