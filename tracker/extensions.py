"""
Flask extensions for EVC Track.

This module initializes Flask extensions that need to be shared
across the application to avoid circular imports. Storage and enablement
come from app config (RATELIMIT_STORAGE_URI, RATELIMIT_ENABLED).
"""

from flask import current_app, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def rate_limit_key() -> str:
    """Limit signed-in owners by identity and guests by address."""
    identity = request.headers.get(current_app.config["AUTH_USER_HEADER"])
    if identity:
        return f"user:{identity}"
    return get_remote_address()


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=["1000 per hour", "200 per minute"],  # Global default
    strategy="fixed-window",
    headers_enabled=True,  # Return X-RateLimit-* headers
)

# Only the static vehicle catalogue is cached; owner data never is
cache = Cache()


def init_cache(app):
    """Initialize cache based on environment."""
    if app.config.get("TESTING"):
        cache.init_app(app, config={"CACHE_TYPE": "NullCache"})
    else:
        cache.init_app(
            app,
            config={
                "CACHE_TYPE": "SimpleCache",
                "CACHE_DEFAULT_TIMEOUT": app.config["CACHE_TIMEOUT_SECONDS"],
            },
        )


class RateLimits:
    """Common rate limit configurations for different endpoint types."""

    # Read-heavy endpoints (history, analytics)
    READ_HEAVY = "500 per hour"

    # Write endpoints (POST/PUT/PATCH/DELETE)
    WRITE_MODERATE = "100 per hour"

    # Expensive operations (exports, backups)
    EXPENSIVE = "20 per hour"
