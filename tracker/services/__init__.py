"""
Services module for EVC Track business logic.

This module contains the persistence adapter and the services that
encapsulate business logic separate from the Flask route handlers.
"""

from services.app_state import AppState, get_state
from services.local_storage import LocalDataStore, LocalStorage
from services.persistence import DataStore
from services.remote_storage import RemoteDataStore

__all__ = [
    # Persistence
    'DataStore',
    'LocalStorage',
    'LocalDataStore',
    'RemoteDataStore',
    # Request state
    'AppState',
    'get_state',
]
