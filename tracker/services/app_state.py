"""
Per-request application state.

The identity asserted by the auth proxy decides which store a request talks
to. ``build_state`` runs once per request (``before_request``) and the result
lives on ``flask.g``; nothing about the current user is kept at module level.
"""

import logging
from typing import Optional

from flask import current_app, g, request

from database import get_db
from services.local_storage import LocalDataStore
from services.persistence import DataStore
from services.remote_storage import RemoteDataStore
from utils.auth_utils import resolve_identity

logger = logging.getLogger(__name__)

LOCAL_STORAGE_KEY = "evc_local_storage"


class AppState:
    """Identity and the store selected for it."""

    def __init__(self, identity: Optional[str], store: DataStore):
        self.identity = identity
        self.store = store

    @property
    def mode(self) -> str:
        return self.store.mode

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def __repr__(self):
        return f"<AppState mode={self.mode} identity={self.identity!r}>"


def select_store(identity: Optional[str]) -> DataStore:
    """Remote store for a signed-in owner, the local store for a guest."""
    if identity:
        return RemoteDataStore(get_db(), identity)
    return LocalDataStore(current_app.extensions[LOCAL_STORAGE_KEY])


def build_state() -> AppState:
    identity = resolve_identity(request.headers, current_app.config)
    state = AppState(identity, select_store(identity))
    g.state = state
    return state


def get_state() -> AppState:
    """The state for the current request, built on first use."""
    state = g.get("state")
    if state is None:
        state = build_state()
    return state
