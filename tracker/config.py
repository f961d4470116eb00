import os


class Config:
    """Application configuration from environment variables."""

    # Database (remote store for authenticated users)
    DATABASE_URL = os.environ.get(
        'DATABASE_URL',
        'sqlite:///evc_track.db'
    )

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'
    TESTING = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Guest-mode storage (stand-in for browser local storage)
    LOCAL_STORAGE_PATH = os.environ.get('LOCAL_STORAGE_PATH', 'local_storage.json')

    # Identity is asserted by the upstream auth proxy
    AUTH_USER_HEADER = os.environ.get('AUTH_USER_HEADER', 'X-Auth-User-Id')
    AUTH_PROXY_TOKEN_HEADER = os.environ.get('AUTH_PROXY_TOKEN_HEADER', 'X-Auth-Proxy-Token')
    AUTH_PROXY_TOKEN_HASH = os.environ.get('AUTH_PROXY_TOKEN_HASH')

    # Money
    DEFAULT_CURRENCY = os.environ.get('DEFAULT_CURRENCY', 'JPY')

    # API Configuration
    FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.environ.get('FLASK_PORT', 8080))
    CACHE_TIMEOUT_SECONDS = int(os.environ.get('CACHE_TIMEOUT', 3600))
    RATELIMIT_STORAGE_URI = os.environ.get('RATE_LIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_ENABLED = True

    # Analytics
    TREND_MONTHS = int(os.environ.get('TREND_MONTHS', 6))
