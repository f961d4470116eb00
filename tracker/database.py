"""
Database session management for EVC Track.

The engine and session factory belong to the Flask app (``app.extensions``)
rather than to this module, so each app instance, including every test app,
gets its own remote store connection.
"""

import logging
import time

from flask import current_app, g
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import scoped_session, sessionmaker

from models import Base, get_engine

logger = logging.getLogger(__name__)

EXTENSION_KEY = "evc_db"

# Add slow query logging (queries >500ms)
SLOW_QUERY_THRESHOLD_MS = 500


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Record query start time."""
    conn.info.setdefault("query_start_time", []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log slow queries."""
    total_time = time.time() - conn.info["query_start_time"].pop(-1)
    duration_ms = total_time * 1000

    if duration_ms > SLOW_QUERY_THRESHOLD_MS:
        truncated_query = statement[:200] + "..." if len(statement) > 200 else statement
        logger.warning(
            f"Slow query detected: {duration_ms:.2f}ms - {truncated_query}", extra={"duration_ms": duration_ms}
        )


def get_db():
    """
    Get database session for the current request.

    Uses Flask's application context to store the session,
    ensuring proper cleanup at the end of each request.
    """
    if "db" not in g:
        g.db = current_app.extensions[EXTENSION_KEY]["session_factory"]()
    return g.db


def close_db(exception=None):
    """
    Close database session at end of request.

    Call this in teardown_appcontext.
    """
    db = g.pop("db", None)
    if db is not None:
        current_app.extensions[EXTENSION_KEY]["session_factory"].remove()


def init_app(app):
    """
    Initialize database with Flask app.

    Creates the engine, makes sure the tables exist and registers the
    teardown function to close sessions.
    """
    engine = get_engine(app.config["DATABASE_URL"])
    Base.metadata.create_all(engine)

    app.extensions[EXTENSION_KEY] = {
        "engine": engine,
        "session_factory": scoped_session(sessionmaker(bind=engine)),
    }
    app.teardown_appcontext(close_db)
    logger.info(f"Remote store ready ({engine.url.get_backend_name()})")
